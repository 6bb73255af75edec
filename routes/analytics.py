"""
routes/analytics.py — Historical trend routes.

Provides:
- GET /api/v1/analytics/yield-trends   — Yearly yield of one crop in a district
- GET /api/v1/analytics/demand-trends  — Yearly consumption of one crop in a district or province
"""

from flask import Blueprint, current_app, jsonify, request

from dataset_loader import get_analytics
from market_demand import LOCATION_TYPES
from models import ROLE_ADMIN, ROLE_FARMER
from utils.identity import require_roles
from utils.validators import parse_choice, parse_int, require

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api/v1/analytics')


def _year_range():
    year_start = parse_int(request.args.get('year_start'), 'year_start', minimum=1)
    year_end = parse_int(request.args.get('year_end'), 'year_end', minimum=1)
    return year_start, year_end


@analytics_bp.route('/yield-trends')
@require_roles(ROLE_FARMER, ROLE_ADMIN)
def get_yield_trends():
    district_name, crop_name = require(request.args, 'district_name', 'crop_name')
    year_start, year_end = _year_range()

    planner = get_analytics(current_app).crop_planner
    trends = planner.yield_trends(district_name, crop_name, year_start, year_end)

    if not trends:
        return jsonify({
            'success': False,
            'error': f"No yield history found for {crop_name} in {district_name}."
        }), 404
    return jsonify({'success': True, 'count': len(trends), 'data': trends})


@analytics_bp.route('/demand-trends')
@require_roles(ROLE_FARMER, ROLE_ADMIN)
def get_demand_trends():
    location_name, crop_name = require(request.args, 'location_name', 'crop_name')
    location_type = parse_choice(
        request.args.get('location_type'), 'location_type', LOCATION_TYPES, default='District'
    )
    year_start, year_end = _year_range()

    service = get_analytics(current_app).market_demand
    trends = service.demand_trends(location_name, location_type, crop_name, year_start, year_end)

    if not trends:
        return jsonify({
            'success': False,
            'error': f"No demand history found for {crop_name} in {location_type}: {location_name}."
        }), 404
    return jsonify({'success': True, 'count': len(trends), 'data': trends})
