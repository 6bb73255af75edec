"""
crop_planner.py — Crop recommendation over historical production data.

This module implements:
- recommend(): rank a district's crops by historical yield and split the
  farmer's land between the top N proportionally to historical planted area
- yield_trends(): per-year yield and production history for one crop

Algorithm details (recommend):
- Rows are narrowed to the district, then optionally to a year and a season;
  an empty year or season subset falls back to the wider set
- Rows are pooled per crop: "average" columns are averaged across rows,
  "total" columns are summed (an unweighted approximation)
- Crops with mean area <= 0.01 ha or mean yield <= 0 are noise and dropped
- Area allocation: share of farm size = crop mean area / sum of mean areas of
  the selected crops; even split when that sum is 0
- Rounding to 2 decimals happens only on the returned values
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from models import ProductionRecord

logger = logging.getLogger(__name__)

MIN_MEAN_AREA_HA = 0.01


class CropPlannerService:
    """Recommendations and yield history over ProductionRecord rows."""

    def __init__(self, records: Iterable[ProductionRecord]):
        self.records = tuple(records)

    def _rows_for_district(self, district_name):
        return [r for r in self.records if r.district_name == district_name]

    def recommend(
        self,
        district_name: str,
        farm_size_ha: float,
        top_n: int = 3,
        season: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[Dict]:
        """
        Recommend the top crops for a district and allocate the farm between them.

        Args:
            district_name: District to recommend for.
            farm_size_ha: Farmer's total land in hectares (validated positive by the caller).
            top_n: Number of crops to return.
            season: Optional season (e.g., "Season A"); falls back to all seasons when empty.
            year: Optional survey year; falls back to all years when empty.

        Returns:
            List of dicts with crop_name, recommended_area_ha,
            estimated_yield_kg_per_ha, estimated_total_production_kg.
            Empty list when the district has no usable rows.
        """
        rows = self._rows_for_district(district_name)
        if not rows:
            return []

        if year:
            year_rows = [r for r in rows if r.year == year]
            if year_rows:
                rows = year_rows
            else:
                logger.warning("No production data for %s in year %s, using all years.",
                               district_name, year)

        if season:
            season_rows = [r for r in rows if r.season == season]
            if season_rows:
                rows = season_rows
            else:
                logger.warning("No production data for %s in season %s, using all seasons.",
                               district_name, season)

        pooled = _pool_by_crop(rows)
        candidates = [
            c for c in pooled
            if c['mean_area_ha'] > MIN_MEAN_AREA_HA and c['mean_yield_kg_per_ha'] > 0
        ]
        # Stable sort: ties keep first-seen order
        candidates.sort(key=lambda c: c['mean_yield_kg_per_ha'], reverse=True)
        selected = candidates[:top_n]
        if not selected:
            return []

        total_area = sum(c['mean_area_ha'] for c in selected)
        results = []
        for crop in selected:
            if total_area == 0:
                allocated = farm_size_ha / len(selected)
            else:
                allocated = crop['mean_area_ha'] / total_area * farm_size_ha
            production = allocated * crop['mean_yield_kg_per_ha']
            results.append({
                'crop_name': crop['crop_name'],
                'recommended_area_ha': round(allocated, 2),
                'estimated_yield_kg_per_ha': round(crop['mean_yield_kg_per_ha'], 2),
                'estimated_total_production_kg': round(production, 2),
            })
        return results

    def yield_trends(self, district_name, crop_name, year_start=None, year_end=None):
        """
        Per-year yield history for one crop in one district.

        Yearly yield is the area-weighted mean of the row yields; production
        is summed across seasons. Sorted by year ascending.
        """
        rows = [
            r for r in self._rows_for_district(district_name)
            if r.crop_name == crop_name
        ]
        if year_start:
            rows = [r for r in rows if r.year >= year_start]
        if year_end:
            rows = [r for r in rows if r.year <= year_end]

        by_year = defaultdict(lambda: {'weighted_yield': 0.0, 'area': 0.0, 'production': 0.0})
        for r in rows:
            agg = by_year[r.year]
            agg['weighted_yield'] += r.avg_yield_kg_per_ha * r.avg_area_ha
            agg['area'] += r.avg_area_ha
            agg['production'] += r.total_production_kg

        trends = []
        for year in sorted(by_year):
            agg = by_year[year]
            avg_yield = agg['weighted_yield'] / agg['area'] if agg['area'] else 0.0
            trends.append({
                'year': year,
                'crop_name': crop_name,
                'district_name': district_name,
                'average_yield_kg_per_ha': round(avg_yield, 2),
                'total_production_kg': round(agg['production'], 2),
            })
        return trends


def _pool_by_crop(rows):
    """Mean area, mean yield and summed production per crop, in first-seen order."""
    sums = {}
    for r in rows:
        agg = sums.setdefault(r.crop_name, {'area': 0.0, 'yield': 0.0, 'production': 0.0, 'count': 0})
        agg['area'] += r.avg_area_ha
        agg['yield'] += r.avg_yield_kg_per_ha
        agg['production'] += r.total_production_kg
        agg['count'] += 1

    return [
        {
            'crop_name': crop_name,
            'mean_area_ha': agg['area'] / agg['count'],
            'mean_yield_kg_per_ha': agg['yield'] / agg['count'],
            'total_production_kg': agg['production'],
        }
        for crop_name, agg in sums.items()
    ]
