from reference_data import (
    DEFAULT_MATURITY_DAYS, districts_in_province, get_districts, is_mvp_crop,
    maturity_days_for, province_for_district
)


def test_district_codes_map_to_provinces():
    assert province_for_district('Gasabo') == 'Kigali City'
    assert province_for_district('Huye') == 'Southern Province'
    assert province_for_district('Atlantis') is None
    assert len(get_districts()) == 30


def test_districts_in_province():
    assert districts_in_province('Kigali City') == ['Nyarugenge', 'Gasabo', 'Kicukiro']
    assert len(districts_in_province('Eastern Province')) == 7


def test_maturity_days():
    assert maturity_days_for('Cassava') == 365
    assert maturity_days_for('Quinoa') == DEFAULT_MATURITY_DAYS
    assert is_mvp_crop('Tomatoes')
    assert not is_mvp_crop('tomatoes')
