"""
tests/test_dataset_loader.py — Tests for CSV loading, the numeric coercion
policy and the one-time analytics initialization.
"""

import pytest
from flask import Flask

from dataset_loader import (
    AnalyticsContext, coerce_flag, get_analytics, init_analytics,
    load_consumption, load_context, load_establishments, load_production
)
from errors import AnalyticsNotInitializedError, DatasetLoadError

PRODUCTION_CSV = """DistrictName,CropName,Season,Year,Avg_Area_ha,Avg_Yield_Kg_per_Ha,Total_Production_Kg,Num_Observations
Gasabo,Maize,Season A,2022,1.0,700,700,10
Gasabo,Beans,Season A,2022,0,600,0,3
Gasabo,Cassava,Season B,2022,2.5,n/a,,4
Kicukiro,Tomatoes,,2023,0.5,20000,10000,2
"""

CONSUMPTION_CSV = """DistrictName,ProvinceName,CropName,Year,Total_Weighted_Consumption_Qty_Kg,Total_Weighted_Consumption_Value_Rwf
Gasabo,Kigali City,Maize,2022,10000,3500000
Gasabo,Kigali City,Beans,2022,0,0
Kicukiro,Kigali City,Beans,2022,,2500000
"""

ESTABLISHMENT_CSV = """DistrictName,ProvinceName,ISIC_Section_Code,ISIC_Section_Name,Total_workers,Annual_Turnover_2022,Employed_Capital,Is_Agriculture_Related,Is_Food_Processing_Related,Is_Food_Trade_Related,Is_Exporter_Goods,Is_Cooperative
Gasabo,Kigali City,A,Agriculture,12,5000000,2000000,1,0,0,0,Yes
Gasabo,Kigali City,G,Trade,unknown,2000000,,0,0,true,0,0
"""


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / 'production.csv').write_text(PRODUCTION_CSV)
    (tmp_path / 'consumption.csv').write_text(CONSUMPTION_CSV)
    (tmp_path / 'establishments.csv').write_text(ESTABLISHMENT_CSV)
    return tmp_path


def test_production_filters_zero_area_and_coerces(data_dir):
    records, report = load_production(str(data_dir / 'production.csv'))

    assert report.rows_read == 4
    assert report.rows_kept == 3
    assert [r.crop_name for r in records] == ['Maize', 'Cassava', 'Tomatoes']

    cassava = records[1]
    assert cassava.avg_yield_kg_per_ha == 0.0
    assert cassava.total_production_kg == 0.0
    assert report.coerced_cells == {'Avg_Yield_Kg_per_Ha': 1, 'Total_Production_Kg': 1}

    assert records[0].season == 'Season A'
    assert records[0].year == 2022
    assert records[2].season is None


def test_consumption_keeps_rows_with_quantity_or_value(data_dir):
    records, report = load_consumption(str(data_dir / 'consumption.csv'))

    assert [(r.district_name, r.crop_name) for r in records] == [
        ('Gasabo', 'Maize'), ('Kicukiro', 'Beans')
    ]
    assert records[1].total_quantity_kg == 0.0
    assert report.coerced_cells['Total_Weighted_Consumption_Qty_Kg'] == 1
    # Optional column absent from the file: created, not counted as coerced
    assert 'Num_Households_Observed' not in report.coerced_cells


def test_establishment_flags(data_dir):
    records, report = load_establishments(str(data_dir / 'establishments.csv'))

    coop, trader = records
    assert coop.is_cooperative and coop.is_agriculture_related
    assert not coop.is_food_trade_related
    assert trader.is_food_trade_related
    assert trader.total_workers == 0
    assert report.coerced_cells == {'Total_workers': 1, 'Employed_Capital': 1}


@pytest.mark.parametrize('value,expected', [
    ('1', True), ('1.0', True), ('Yes', True), ('TRUE', True), ('y', True),
    ('0', False), ('', False), ('no', False), ('maybe', False),
])
def test_coerce_flag(value, expected):
    assert coerce_flag(value) is expected


def test_missing_file_raises(tmp_path):
    with pytest.raises(DatasetLoadError) as exc:
        load_production(str(tmp_path / 'absent.csv'))
    assert 'absent.csv' in exc.value.message


def test_missing_required_column_raises(tmp_path):
    path = tmp_path / 'production.csv'
    path.write_text("DistrictName,CropName,Avg_Area_ha\nGasabo,Maize,1.0\n")

    with pytest.raises(DatasetLoadError) as exc:
        load_production(str(path))
    assert 'Avg_Yield_Kg_per_Ha' in exc.value.message


def test_load_context_builds_services(data_dir):
    context = load_context(str(data_dir), 'production.csv', 'consumption.csv', 'establishments.csv')

    assert context.summary()['production_records'] == 3
    assert context.crop_planner.recommend('Gasabo', 1.0)[0]['crop_name'] == 'Maize'
    assert len(context.reports) == 3


def test_get_analytics_before_init_raises():
    app = Flask(__name__)
    with pytest.raises(AnalyticsNotInitializedError):
        get_analytics(app)


def test_init_analytics_runs_once():
    app = Flask(__name__)
    first = init_analytics(app, context=AnalyticsContext.from_records())
    second = init_analytics(app, context=AnalyticsContext.from_records())

    assert second is first
    assert get_analytics(app) is first


def test_init_analytics_from_config(data_dir):
    app = Flask(__name__)
    app.config.update({
        'DATA_DIR': str(data_dir),
        'PRODUCTION_FILE': 'production.csv',
        'CONSUMPTION_FILE': 'consumption.csv',
        'ESTABLISHMENT_FILE': 'missing.csv',
    })
    with pytest.raises(DatasetLoadError):
        init_analytics(app)
    with pytest.raises(AnalyticsNotInitializedError):
        get_analytics(app)
