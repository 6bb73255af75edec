"""
market_connection.py — Market connections from the establishment census.

Provides read-only lookups of establishments in a district or province:
- find_cooperatives()
- find_buyers_and_processors() — food traders and food processors above a
  worker-count or turnover threshold
- find_exporters()
- find_agriculture_related()

Province queries are a flat union of the province's establishments;
establishments are not summed.
"""

from market_demand import validate_location_type

DEFAULT_MIN_WORKERS = 5
DEFAULT_MIN_TURNOVER = 1_000_000


def _project(row):
    return {
        'isic_section_code': row.isic_section_code,
        'isic_section_name': row.isic_section_name,
        'total_workers': row.total_workers,
        'annual_turnover': row.annual_turnover,
        'employed_capital': row.employed_capital,
    }


class MarketConnectionService:
    """Establishment lookups over EstablishmentRecord rows."""

    def __init__(self, records):
        self.records = tuple(records)

    def filter_by_location(self, location_name, location_type='District'):
        validate_location_type(location_type)
        if location_type == 'District':
            return [r for r in self.records if r.district_name == location_name]
        return [r for r in self.records if r.province_name == location_name]

    def find_cooperatives(self, location_name, location_type='District'):
        rows = self.filter_by_location(location_name, location_type)
        return [_project(r) for r in rows if r.is_cooperative]

    def find_buyers_and_processors(self, location_name, location_type='District',
                                   min_workers=DEFAULT_MIN_WORKERS,
                                   min_turnover=DEFAULT_MIN_TURNOVER):
        """
        Food traders (potential buyers) and food processors large enough to matter.

        An establishment qualifies when it has at least min_workers workers OR
        an annual turnover of at least min_turnover. One establishment may be
        listed as both buyer and processor.

        Returns:
            {'potential_buyers': [...], 'food_processors': [...]}
        """
        rows = self.filter_by_location(location_name, location_type)

        def significant(r):
            return r.total_workers >= min_workers or r.annual_turnover >= min_turnover

        return {
            'potential_buyers': [
                _project(r) for r in rows if r.is_food_trade_related and significant(r)
            ],
            'food_processors': [
                _project(r) for r in rows if r.is_food_processing_related and significant(r)
            ],
        }

    def find_exporters(self, location_name, location_type='District'):
        rows = self.filter_by_location(location_name, location_type)
        return [_project(r) for r in rows if r.is_exporter_goods]

    def find_agriculture_related(self, location_name, location_type='District'):
        rows = self.filter_by_location(location_name, location_type)
        return [_project(r) for r in rows if r.is_agriculture_related]
