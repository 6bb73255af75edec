"""
reference_data.py — Static reference tables: Rwanda's provinces and districts,
the MVP crop list with maturity days, and the default yield/price tables
used when the historical datasets have no usable figure.

The first digit of a district code is the code of its province.
"""

from typing import Dict, List, Optional


PROVINCES = {
    1: 'Kigali City', 2: 'Southern Province', 3: 'Western Province',
    4: 'Northern Province', 5: 'Eastern Province',
}

DISTRICTS = {
    11: 'Nyarugenge', 12: 'Gasabo', 13: 'Kicukiro',
    21: 'Nyanza', 22: 'Gisagara', 23: 'Nyaruguru', 24: 'Huye',
    25: 'Nyamagabe', 26: 'Ruhango', 27: 'Muhanga', 28: 'Kamonyi',
    31: 'Karongi', 32: 'Ngororero', 33: 'Nyabihu', 34: 'Rubavu',
    35: 'Rusizi', 36: 'Nyamasheke', 37: 'Rutsiro',
    41: 'Burera', 42: 'Gakenke', 43: 'Gicumbi', 44: 'Musanze', 45: 'Rulindo',
    51: 'Bugesera', 52: 'Gatsibo', 53: 'Kayonza', 54: 'Kirehe',
    55: 'Ngoma', 56: 'Nyagatare', 57: 'Rwamagana',
}

DISTRICT_TO_PROVINCE = {
    name: PROVINCES[code // 10] for code, name in DISTRICTS.items()
}

# (crop name, average maturity in days), in display order
MVP_CROPS = [
    ('Maize', 120),
    ('Beans', 90),
    ('Irish potatoes', 100),
    ('Cassava', 365),
    ('Tomatoes', 75),
]

MATURITY_DAYS = dict(MVP_CROPS)
DEFAULT_MATURITY_DAYS = 90

# Fallbacks for crops missing from the tables below
GENERIC_DEFAULT_YIELD_KG_PER_HA = 500.0
GENERIC_DEFAULT_PRICE_RWF_PER_KG = 200.0

DEFAULT_YIELDS_KG_PER_HA = {
    'Maize': 700.0,
    'Beans': 1500.0,
    'Irish potatoes': 10000.0,
    'Cassava': 15000.0,
    'Tomatoes': 20000.0,
}

DEFAULT_PRICES_RWF_PER_KG = {
    'Maize': 350.0,
    'Beans': 500.0,
    'Irish potatoes': 250.0,
    'Cassava': 100.0,
    'Tomatoes': 400.0,
}


def _to_list(mapping: Dict[int, str]) -> List[Dict]:
    return [{'code': code, 'name': name} for code, name in mapping.items()]


def get_provinces() -> List[Dict]:
    return _to_list(PROVINCES)


def get_districts() -> List[Dict]:
    """All districts with their code and province name."""
    return [
        {'code': code, 'name': name, 'province': DISTRICT_TO_PROVINCE[name]}
        for code, name in DISTRICTS.items()
    ]


def get_crop_list() -> List[Dict]:
    return [
        {'name': name, 'average_maturity_days': days}
        for name, days in MVP_CROPS
    ]


def is_mvp_crop(crop_name: str) -> bool:
    return crop_name in MATURITY_DAYS


def maturity_days_for(crop_name: str) -> int:
    """Days from planting to expected harvest; unknown crops get the generic default."""
    return MATURITY_DAYS.get(crop_name, DEFAULT_MATURITY_DAYS)


def province_for_district(district_name: str) -> Optional[str]:
    return DISTRICT_TO_PROVINCE.get(district_name)


def districts_in_province(province_name: str) -> List[str]:
    return [d for d, p in DISTRICT_TO_PROVINCE.items() if p == province_name]
