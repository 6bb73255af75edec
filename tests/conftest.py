"""
tests/conftest.py — Shared fixtures: in-memory dataset rows, an analytics
context built over them, and an app wired to a temporary database.
"""

import os
import tempfile

import pytest

from app import create_app
from dataset_loader import AnalyticsContext, init_analytics
from models import Actor, ConsumptionRecord, EstablishmentRecord, ProductionRecord


PRODUCTION_ROWS = [
    # Gasabo: Maize outranks Beans on yield; Beans has three times the area
    ProductionRecord('Gasabo', 'Maize', 1.0, 700.0, 700.0, 'Season A', 2022, 10),
    ProductionRecord('Gasabo', 'Beans', 3.0, 600.0, 1800.0, 'Season A', 2022, 8),
    # Noise: too little area, and zero yield
    ProductionRecord('Gasabo', 'Sorghum', 0.005, 900.0, 4.5, 'Season A', 2022, 1),
    ProductionRecord('Gasabo', 'Cassava', 2.0, 0.0, 0.0, 'Season A', 2022, 3),
    # Kicukiro: one crop per season and year
    ProductionRecord('Kicukiro', 'Tomatoes', 0.5, 20000.0, 10000.0, 'Season A', 2022, 4),
    ProductionRecord('Kicukiro', 'Beans', 1.0, 1000.0, 1000.0, 'Season B', 2023, 6),
]

CONSUMPTION_ROWS = [
    ConsumptionRecord('Gasabo', 'Kigali City', 'Maize', 10000.0, 3500000.0, 2022, 40),
    ConsumptionRecord('Gasabo', 'Kigali City', 'Beans', 20000.0, 2000000.0, 2022, 55),
    ConsumptionRecord('Kicukiro', 'Kigali City', 'Beans', 5000.0, 2500000.0, 2022, 30),
    ConsumptionRecord('Nyarugenge', 'Kigali City', 'Maize', 1000.0, 400000.0, 2022, 12),
    ConsumptionRecord('Huye', 'Southern Province', 'Cassava', 8000.0, 800000.0, 2022, 25),
]

ESTABLISHMENT_ROWS = [
    EstablishmentRecord('Gasabo', 'Kigali City', 'A', 'Agriculture', 12, 5000000.0, 2000000.0,
                        is_agriculture_related=True, is_cooperative=True),
    # Below both thresholds
    EstablishmentRecord('Gasabo', 'Kigali City', 'G', 'Wholesale and retail trade', 3, 500000.0, 100000.0,
                        is_food_trade_related=True),
    # Few workers but large turnover
    EstablishmentRecord('Gasabo', 'Kigali City', 'G', 'Wholesale and retail trade', 2, 2000000.0, 300000.0,
                        is_food_trade_related=True),
    # Both a buyer and a processor
    EstablishmentRecord('Gasabo', 'Kigali City', 'C', 'Manufacturing', 20, 9000000.0, 4000000.0,
                        is_food_processing_related=True, is_food_trade_related=True),
    EstablishmentRecord('Kicukiro', 'Kigali City', 'C', 'Manufacturing', 6, 3000000.0, 1000000.0,
                        is_exporter_goods=True, is_cooperative=True),
]

FARMER = Actor('farmer-1', 'farmer')
OTHER_FARMER = Actor('farmer-2', 'farmer')
ADMIN = Actor('admin-1', 'admin')


@pytest.fixture
def analytics():
    return AnalyticsContext.from_records(PRODUCTION_ROWS, CONSUMPTION_ROWS, ESTABLISHMENT_ROWS)


@pytest.fixture
def app(analytics):
    """App with an isolated database and the fixture rows installed as its datasets."""
    db_fd, db_path = tempfile.mkstemp(suffix='.db')

    app = create_app({
        'TESTING': True,
        'DATABASE': db_path,
        'LOAD_DATASETS': False,
    })
    init_analytics(app, context=analytics)

    with app.app_context():
        yield app

    os.close(db_fd)
    for path in (db_path, db_path + '-wal', db_path + '-shm'):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


def auth_headers(actor):
    return {'X-User-Id': actor.user_id, 'X-User-Role': actor.role}
