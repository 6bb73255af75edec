"""
harvest_tracker.py — Harvest and revenue estimates for a single crop plan.

Cross-references the two historical datasets:
- Yield: the district's top recommended crop (CropPlannerService, top_n=1,
  all seasons) if it is the requested crop, else the default-yield table
- Price per kg: value / quantity of the district's top crop by consumption
  value (MarketDemandService, top_n=1) if it is the requested crop, else the
  default-price table
- Crops missing from the default tables get the generic 500 kg/ha yield
  and 200 Rwf/kg price
- Harvest date: planting date + the crop's maturity days (calendar days)

A yield or price that resolves to 0 (a zero entry in an injected table) is
an EstimationError.
"""

import logging
from datetime import date, datetime, timedelta

from errors import EstimationError, InvalidInputError
from reference_data import (
    DEFAULT_PRICES_RWF_PER_KG, DEFAULT_YIELDS_KG_PER_HA, GENERIC_DEFAULT_PRICE_RWF_PER_KG,
    GENERIC_DEFAULT_YIELD_KG_PER_HA, maturity_days_for
)

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'


def parse_iso_date(value, field='planting_date'):
    """
    Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        InvalidInputError: value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise InvalidInputError(field, f"{field} must be a valid date in YYYY-MM-DD format.")


class HarvestTrackerService:
    """Estimates built on top of the recommendation and demand services."""

    def __init__(self, crop_planner, market_demand,
                 default_yields=None, default_prices=None):
        self.crop_planner = crop_planner
        self.market_demand = market_demand
        self.default_yields = DEFAULT_YIELDS_KG_PER_HA if default_yields is None else default_yields
        self.default_prices = DEFAULT_PRICES_RWF_PER_KG if default_prices is None else default_prices

    def _resolve_yield(self, crop_name, area_ha, district_name):
        top = self.crop_planner.recommend(district_name, area_ha, top_n=1)
        for rec in top:
            if rec['crop_name'] == crop_name:
                return rec['estimated_yield_kg_per_ha']

        logger.warning("No historical yield for '%s' in '%s', using default.", crop_name, district_name)
        return self.default_yields.get(crop_name, GENERIC_DEFAULT_YIELD_KG_PER_HA)

    def _resolve_price(self, crop_name, district_name):
        top = self.market_demand.demand_insights(district_name, 'District', 1, 'value')
        for demand in top:
            if demand['crop_name'] == crop_name and demand['total_quantity_kg'] > 0:
                return demand['total_value_rwf'] / demand['total_quantity_kg']

        logger.warning("No market price for '%s' in '%s', using default.", crop_name, district_name)
        return self.default_prices.get(crop_name, GENERIC_DEFAULT_PRICE_RWF_PER_KG)

    def estimate(self, crop_name, area_ha, planting_date, district_name):
        """
        Estimate harvest date, production and revenue for a planting.

        Args:
            crop_name: Crop planted.
            area_ha: Area planted in hectares (validated positive by the caller).
            planting_date: YYYY-MM-DD string or date.
            district_name: District where the crop is planted.

        Returns:
            dict with crop_name, area_ha, planting_date, estimated_yield_kg_per_ha,
            estimated_total_production_kg, estimated_price_per_kg_rwf,
            estimated_revenue_rwf, estimated_harvest_date.

        Raises:
            InvalidInputError: planting_date is not a valid date.
            EstimationError: yield or price resolved to 0.
        """
        planted_on = parse_iso_date(planting_date)

        yield_kg_per_ha = self._resolve_yield(crop_name, area_ha, district_name)
        if yield_kg_per_ha == 0:
            raise EstimationError(
                crop_name, district_name,
                f"Unable to estimate yield for '{crop_name}' in '{district_name}'. Estimated yield is 0."
            )
        total_production_kg = round(area_ha * yield_kg_per_ha, 2)

        price_per_kg = self._resolve_price(crop_name, district_name)
        if price_per_kg == 0:
            raise EstimationError(
                crop_name, district_name,
                f"Unable to estimate market price for '{crop_name}' in '{district_name}'. "
                f"Estimated price is 0."
            )
        price_per_kg = round(price_per_kg, 2)

        harvest_on = planted_on + timedelta(days=maturity_days_for(crop_name))

        return {
            'crop_name': crop_name,
            'area_ha': round(area_ha, 2),
            'planting_date': planted_on.strftime(DATE_FORMAT),
            'estimated_yield_kg_per_ha': round(yield_kg_per_ha, 2),
            'estimated_total_production_kg': total_production_kg,
            'estimated_price_per_kg_rwf': price_per_kg,
            'estimated_revenue_rwf': round(total_production_kg * price_per_kg, 2),
            'estimated_harvest_date': harvest_on.strftime(DATE_FORMAT),
        }
