"""
models.py — Python dataclasses for the Farmlytics backend.

Dataset rows (production, consumption, establishment census) are frozen:
they are loaded once and shared read-only by every request. CropPlan maps
to the crop_plans table defined in database.py.
"""

from dataclasses import dataclass, asdict
from typing import Optional


# Crop plan statuses
STATUS_PLANNED = 'Planned'
STATUS_PLANTED = 'Planted'
STATUS_HARVESTED = 'Harvested'
STATUS_COMPLETED = 'Completed'
STATUS_CANCELLED = 'Cancelled'

PLAN_STATUSES = (
    STATUS_PLANNED, STATUS_PLANTED, STATUS_HARVESTED, STATUS_COMPLETED, STATUS_CANCELLED,
)

ROLE_FARMER = 'farmer'
ROLE_BUYER = 'buyer'
ROLE_ADMIN = 'admin'

ROLES = (ROLE_FARMER, ROLE_BUYER, ROLE_ADMIN)


@dataclass(frozen=True)
class ProductionRecord:
    """Historical production for one district x crop x season (SAS survey)."""
    district_name: str
    crop_name: str
    avg_area_ha: float
    avg_yield_kg_per_ha: float
    total_production_kg: float
    season: Optional[str] = None
    year: int = 0
    num_observations: int = 0


@dataclass(frozen=True)
class ConsumptionRecord:
    """Historical household consumption for one district x crop (EICV survey)."""
    district_name: str
    province_name: str
    crop_name: str
    total_quantity_kg: float
    total_value_rwf: float
    year: int = 0
    num_households_observed: int = 0


@dataclass(frozen=True)
class EstablishmentRecord:
    """One business establishment from the establishment census."""
    district_name: str
    province_name: str
    isic_section_code: str = ''
    isic_section_name: str = ''
    total_workers: int = 0
    annual_turnover: float = 0.0
    employed_capital: float = 0.0
    is_agriculture_related: bool = False
    is_food_processing_related: bool = False
    is_food_trade_related: bool = False
    is_exporter_goods: bool = False
    is_cooperative: bool = False


@dataclass(frozen=True)
class Actor:
    """Identity of the caller, as established by the authentication layer."""
    user_id: str
    role: str = ROLE_FARMER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class CropPlan:
    """A farmer's planting decision with its estimated and actual outcomes."""
    id: Optional[int] = None
    user_id: str = ''
    crop_name: str = ''
    district_name: str = ''
    actual_area_planted_ha: float = 0.0
    planting_date: str = ''
    status: str = STATUS_PLANTED
    # Derived from the estimation engine
    estimated_harvest_date: Optional[str] = None
    estimated_yield_kg_per_ha: Optional[float] = None
    estimated_total_production_kg: Optional[float] = None
    estimated_price_per_kg_rwf: Optional[float] = None
    estimated_revenue_rwf: Optional[float] = None
    # Recorded by the farmer at harvest
    actual_harvest_date: Optional[str] = None
    actual_yield_kg_per_ha: Optional[float] = None
    actual_total_production_kg: Optional[float] = None
    actual_selling_price_per_kg_rwf: Optional[float] = None
    actual_revenue_rwf: Optional[float] = None
    harvest_notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def apply_estimate(self, estimate):
        """Copy the estimated fields of a HarvestTrackerService.estimate() result."""
        self.estimated_harvest_date = estimate['estimated_harvest_date']
        self.estimated_yield_kg_per_ha = estimate['estimated_yield_kg_per_ha']
        self.estimated_total_production_kg = estimate['estimated_total_production_kg']
        self.estimated_price_per_kg_rwf = estimate['estimated_price_per_kg_rwf']
        self.estimated_revenue_rwf = estimate['estimated_revenue_rwf']

    def to_dict(self):
        return asdict(self)
