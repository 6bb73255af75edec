"""
dataset_loader.py — Load the three historical datasets and build the analytics context.

Loads:
- SAS production (district x crop x season) → ProductionRecord
- EICV household consumption (district x crop) → ConsumptionRecord
- Establishment census → EstablishmentRecord

Numeric coercion policy: every numeric column is parsed with
pandas.to_numeric; a cell that is missing or not a number becomes 0. The
count of coerced cells per column is logged and kept in the LoadReport so
malformed source data is visible instead of silently masked.

Relevance filters (applied before rows are exposed):
- production: average area > 0
- consumption: quantity > 0 or value > 0

Any read or parse failure raises DatasetLoadError. The server must not
start with partial data.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pandas as pd

from crop_planner import CropPlannerService
from errors import AnalyticsNotInitializedError, DatasetLoadError
from harvest_tracker import HarvestTrackerService
from market_connection import MarketConnectionService
from market_demand import MarketDemandService
from models import ConsumptionRecord, EstablishmentRecord, ProductionRecord

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'farmlytics_analytics'

PRODUCTION_REQUIRED = ['DistrictName', 'CropName', 'Avg_Area_ha',
                       'Avg_Yield_Kg_per_Ha', 'Total_Production_Kg']
PRODUCTION_NUMERIC = ['Year', 'Avg_Area_ha', 'Avg_Yield_Kg_per_Ha',
                      'Total_Production_Kg', 'Num_Observations']

CONSUMPTION_REQUIRED = ['DistrictName', 'ProvinceName', 'CropName',
                        'Total_Weighted_Consumption_Qty_Kg',
                        'Total_Weighted_Consumption_Value_Rwf']
CONSUMPTION_NUMERIC = ['Year', 'Total_Weighted_Consumption_Qty_Kg',
                       'Total_Weighted_Consumption_Value_Rwf', 'Num_Households_Observed']

ESTABLISHMENT_REQUIRED = ['DistrictName', 'ProvinceName']
ESTABLISHMENT_NUMERIC = ['Total_workers', 'Annual_Turnover_2022', 'Employed_Capital']
ESTABLISHMENT_FLAGS = ['Is_Agriculture_Related', 'Is_Food_Processing_Related',
                       'Is_Food_Trade_Related', 'Is_Exporter_Goods', 'Is_Cooperative']

TRUE_STRINGS = {'yes', 'true', 'y'}

_init_lock = threading.Lock()


@dataclass
class LoadReport:
    """Row counts and coercion counts for one dataset."""
    name: str
    rows_read: int = 0
    rows_kept: int = 0
    coerced_cells: Dict[str, int] = field(default_factory=dict)


# ========================================
# Parsing policy
# ========================================

def coerce_numeric(frame, columns, report=None):
    """
    Parse the given columns as numbers, replacing unparseable or missing cells with 0.

    Columns absent from the frame are created filled with 0.

    Args:
        frame: DataFrame read with all columns as text.
        columns: Column names declared numeric.
        report: Optional LoadReport that receives the coerced-cell counts.

    Returns:
        The same frame, with the columns converted to float.
    """
    for column in columns:
        if column not in frame.columns:
            frame[column] = 0.0
            continue
        parsed = pd.to_numeric(frame[column].astype(str).str.strip(), errors='coerce')
        coerced = int(parsed.isna().sum())
        if coerced:
            logger.warning("%s: %d non-numeric value(s) in column %s coerced to 0.",
                           report.name if report else 'dataset', coerced, column)
            if report is not None:
                report.coerced_cells[column] = coerced
        frame[column] = parsed.fillna(0.0).astype(float)
    return frame


def coerce_flag(value):
    """0/1-style flag: a non-zero number or 'yes'/'true' is True."""
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    try:
        return float(text) != 0
    except ValueError:
        return False


def _text(value):
    text = str(value).strip()
    return text or None


def read_dataset(path, required_columns):
    """
    Read a CSV file with every column as text.

    Raises:
        DatasetLoadError: file missing, unreadable, unparseable or lacking a required column.
    """
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except FileNotFoundError:
        raise DatasetLoadError(path, 'file not found')
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DatasetLoadError(path, str(e))

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in required_columns if c not in frame.columns]
    if missing:
        raise DatasetLoadError(path, f"missing required column(s): {', '.join(missing)}")
    return frame


# ========================================
# Per-dataset loaders
# ========================================

def load_production(path) -> Tuple[Tuple[ProductionRecord, ...], LoadReport]:
    report = LoadReport(name=os.path.basename(path))
    frame = read_dataset(path, PRODUCTION_REQUIRED)
    report.rows_read = len(frame)
    coerce_numeric(frame, PRODUCTION_NUMERIC, report)
    if 'Season' not in frame.columns:
        frame['Season'] = ''

    frame = frame[frame['Avg_Area_ha'] > 0]
    records = tuple(
        ProductionRecord(
            district_name=str(row.DistrictName).strip(),
            crop_name=str(row.CropName).strip(),
            avg_area_ha=float(row.Avg_Area_ha),
            avg_yield_kg_per_ha=float(row.Avg_Yield_Kg_per_Ha),
            total_production_kg=float(row.Total_Production_Kg),
            season=_text(row.Season),
            year=int(row.Year),
            num_observations=int(row.Num_Observations),
        )
        for row in frame.itertuples(index=False)
    )
    report.rows_kept = len(records)
    logger.info("Loaded %d of %d production records from %s.",
                report.rows_kept, report.rows_read, report.name)
    return records, report


def load_consumption(path) -> Tuple[Tuple[ConsumptionRecord, ...], LoadReport]:
    report = LoadReport(name=os.path.basename(path))
    frame = read_dataset(path, CONSUMPTION_REQUIRED)
    report.rows_read = len(frame)
    coerce_numeric(frame, CONSUMPTION_NUMERIC, report)

    frame = frame[(frame['Total_Weighted_Consumption_Qty_Kg'] > 0)
                  | (frame['Total_Weighted_Consumption_Value_Rwf'] > 0)]
    records = tuple(
        ConsumptionRecord(
            district_name=str(row.DistrictName).strip(),
            province_name=str(row.ProvinceName).strip(),
            crop_name=str(row.CropName).strip(),
            total_quantity_kg=float(row.Total_Weighted_Consumption_Qty_Kg),
            total_value_rwf=float(row.Total_Weighted_Consumption_Value_Rwf),
            year=int(row.Year),
            num_households_observed=int(row.Num_Households_Observed),
        )
        for row in frame.itertuples(index=False)
    )
    report.rows_kept = len(records)
    logger.info("Loaded %d of %d consumption records from %s.",
                report.rows_kept, report.rows_read, report.name)
    return records, report


def load_establishments(path) -> Tuple[Tuple[EstablishmentRecord, ...], LoadReport]:
    report = LoadReport(name=os.path.basename(path))
    frame = read_dataset(path, ESTABLISHMENT_REQUIRED)
    report.rows_read = len(frame)
    coerce_numeric(frame, ESTABLISHMENT_NUMERIC, report)
    for column in ESTABLISHMENT_FLAGS + ['ISIC_Section_Code', 'ISIC_Section_Name']:
        if column not in frame.columns:
            frame[column] = ''

    records = tuple(
        EstablishmentRecord(
            district_name=str(row.DistrictName).strip(),
            province_name=str(row.ProvinceName).strip(),
            isic_section_code=str(row.ISIC_Section_Code).strip(),
            isic_section_name=str(row.ISIC_Section_Name).strip(),
            total_workers=int(row.Total_workers),
            annual_turnover=float(row.Annual_Turnover_2022),
            employed_capital=float(row.Employed_Capital),
            is_agriculture_related=coerce_flag(row.Is_Agriculture_Related),
            is_food_processing_related=coerce_flag(row.Is_Food_Processing_Related),
            is_food_trade_related=coerce_flag(row.Is_Food_Trade_Related),
            is_exporter_goods=coerce_flag(row.Is_Exporter_Goods),
            is_cooperative=coerce_flag(row.Is_Cooperative),
        )
        for row in frame.itertuples(index=False)
    )
    report.rows_kept = len(records)
    logger.info("Loaded %d establishment census records from %s.", report.rows_kept, report.name)
    return records, report


# ========================================
# Analytics context
# ========================================

@dataclass
class AnalyticsContext:
    """The three read-only datasets and the services built over them."""
    production: Tuple[ProductionRecord, ...]
    consumption: Tuple[ConsumptionRecord, ...]
    establishments: Tuple[EstablishmentRecord, ...]
    crop_planner: CropPlannerService
    market_demand: MarketDemandService
    market_connection: MarketConnectionService
    harvest_tracker: HarvestTrackerService
    reports: Tuple[LoadReport, ...] = ()

    @classmethod
    def from_records(cls, production=(), consumption=(), establishments=(), reports=()):
        """Build a context from in-memory rows (no filtering, no file I/O)."""
        production = tuple(production)
        consumption = tuple(consumption)
        establishments = tuple(establishments)
        crop_planner = CropPlannerService(production)
        market_demand = MarketDemandService(consumption)
        return cls(
            production=production,
            consumption=consumption,
            establishments=establishments,
            crop_planner=crop_planner,
            market_demand=market_demand,
            market_connection=MarketConnectionService(establishments),
            harvest_tracker=HarvestTrackerService(crop_planner, market_demand),
            reports=tuple(reports),
        )

    def summary(self):
        return {
            'production_records': len(self.production),
            'consumption_records': len(self.consumption),
            'establishment_records': len(self.establishments),
            'coerced_cells': {r.name: dict(r.coerced_cells) for r in self.reports if r.coerced_cells},
        }


def load_context(data_dir, production_file, consumption_file, establishment_file):
    """Load all three datasets from data_dir. Raises DatasetLoadError on any failure."""
    logger.info("Initializing analytics services from %s...", data_dir)
    production, production_report = load_production(os.path.join(data_dir, production_file))
    consumption, consumption_report = load_consumption(os.path.join(data_dir, consumption_file))
    establishments, establishment_report = load_establishments(
        os.path.join(data_dir, establishment_file)
    )
    context = AnalyticsContext.from_records(
        production, consumption, establishments,
        reports=(production_report, consumption_report, establishment_report),
    )
    logger.info("All analytics services initialized successfully.")
    return context


def init_analytics(app, context: Optional[AnalyticsContext] = None):
    """
    One-time initialization barrier for an application.

    Loads the datasets named in app.config (or installs the given context)
    into app.extensions. Concurrent callers wait on the lock; once
    initialized, later calls return the existing context unchanged.
    """
    with _init_lock:
        existing = app.extensions.get(EXTENSION_KEY)
        if existing is not None:
            return existing
        if context is None:
            context = load_context(
                app.config['DATA_DIR'],
                app.config['PRODUCTION_FILE'],
                app.config['CONSUMPTION_FILE'],
                app.config['ESTABLISHMENT_FILE'],
            )
        app.extensions[EXTENSION_KEY] = context
        return context


def get_analytics(app) -> AnalyticsContext:
    """Return the app's analytics context; raises until init_analytics() has completed."""
    context = app.extensions.get(EXTENSION_KEY)
    if context is None:
        raise AnalyticsNotInitializedError()
    return context
