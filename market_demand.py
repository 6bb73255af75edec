"""
market_demand.py — Market demand insights over historical household consumption.

Provides:
- demand_insights(): top crops by consumed quantity or value for a district,
  or for a province by summing its districts on every call
- demand_trends(): per-year consumption history for one crop

Quantities and values are rounded to whole kg / Rwf on output.
"""

import logging
from collections import defaultdict

from errors import InvalidInputError

logger = logging.getLogger(__name__)

LOCATION_TYPES = ('District', 'Province')
SORT_FIELDS = {
    'quantity': 'total_quantity_kg',
    'value': 'total_value_rwf',
}


def validate_location_type(location_type):
    if location_type not in LOCATION_TYPES:
        raise InvalidInputError(
            'location_type', "location_type must be 'District' or 'Province'."
        )


class MarketDemandService:
    """Demand queries over ConsumptionRecord rows."""

    def __init__(self, records):
        self.records = tuple(records)

    def _filter_by_location(self, location_name, location_type):
        validate_location_type(location_type)
        if location_type == 'District':
            return [r for r in self.records if r.district_name == location_name]
        return [r for r in self.records if r.province_name == location_name]

    def demand_insights(self, location_name, location_type='District', top_n=5,
                        sort_by='quantity', year=None):
        """
        Rank crops by consumption for a district or province.

        Args:
            location_name: District or province name.
            location_type: 'District' or 'Province'.
            top_n: Number of crops to return.
            sort_by: 'quantity' or 'value'.
            year: Optional survey year; falls back to all years when empty.

        Returns:
            List of {crop_name, total_quantity_kg, total_value_rwf}, largest first.

        Raises:
            InvalidInputError: unknown location_type or sort_by.
        """
        if sort_by not in SORT_FIELDS:
            raise InvalidInputError('sort_by', "sort_by must be 'quantity' or 'value'.")

        rows = self._filter_by_location(location_name, location_type)
        if not rows:
            return []

        if year:
            year_rows = [r for r in rows if r.year == year]
            if year_rows:
                rows = year_rows
            else:
                logger.warning("No consumption data for %s in year %s, using all years.",
                               location_name, year)

        # Province rows are one per district; sum them per crop
        totals = {}
        for r in rows:
            agg = totals.setdefault(r.crop_name, {
                'crop_name': r.crop_name,
                'total_quantity_kg': 0.0,
                'total_value_rwf': 0.0,
            })
            agg['total_quantity_kg'] += r.total_quantity_kg
            agg['total_value_rwf'] += r.total_value_rwf

        sort_key = SORT_FIELDS[sort_by]
        ranked = sorted(totals.values(), key=lambda a: a[sort_key], reverse=True)

        return [
            {
                'crop_name': item['crop_name'],
                'total_quantity_kg': round(item['total_quantity_kg']),
                'total_value_rwf': round(item['total_value_rwf']),
            }
            for item in ranked[:top_n]
        ]

    def demand_trends(self, location_name, location_type, crop_name,
                      year_start=None, year_end=None):
        """Per-year summed consumption of one crop, sorted by year."""
        rows = [
            r for r in self._filter_by_location(location_name, location_type)
            if r.crop_name == crop_name
        ]
        if year_start:
            rows = [r for r in rows if r.year >= year_start]
        if year_end:
            rows = [r for r in rows if r.year <= year_end]

        by_year = defaultdict(lambda: [0.0, 0.0])
        for r in rows:
            by_year[r.year][0] += r.total_quantity_kg
            by_year[r.year][1] += r.total_value_rwf

        return [
            {
                'year': year,
                'crop_name': crop_name,
                'location_name': location_name,
                'location_type': location_type,
                'total_quantity_kg': round(quantity),
                'total_value_rwf': round(value),
            }
            for year, (quantity, value) in sorted(by_year.items())
        ]
