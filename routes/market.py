"""
routes/market.py — Market demand and market connection routes.

Provides:
- GET /api/v1/market/demand             — Top crops by consumption (quantity or value)
- GET /api/v1/market/cooperatives       — Cooperatives in a district or province
- GET /api/v1/market/buyers-processors  — Significant food traders and processors
- GET /api/v1/market/exporters          — Goods exporters
- GET /api/v1/market/agriculture        — Agriculture-related establishments

Every route takes location_name (required) and location_type
('District' by default, or 'Province').
"""

from flask import Blueprint, current_app, jsonify, request

from dataset_loader import get_analytics
from market_connection import DEFAULT_MIN_TURNOVER, DEFAULT_MIN_WORKERS
from market_demand import LOCATION_TYPES, SORT_FIELDS
from models import ROLE_ADMIN, ROLE_BUYER, ROLE_FARMER
from utils.identity import require_roles
from utils.validators import (
    parse_choice, parse_int, parse_non_negative_float, require
)

market_bp = Blueprint('market', __name__, url_prefix='/api/v1/market')

MARKET_ROLES = (ROLE_FARMER, ROLE_BUYER, ROLE_ADMIN)


def _location_args():
    """(location_name, location_type) from the query string."""
    location_name, = require(request.args, 'location_name')
    location_type = parse_choice(
        request.args.get('location_type'), 'location_type', LOCATION_TYPES, default='District'
    )
    return location_name, location_type


def _not_found(what, location_name, location_type):
    return jsonify({
        'success': False,
        'error': f"No {what} found for {location_type}: {location_name}."
    }), 404


# ========================================
# Market demand
# ========================================

@market_bp.route('/demand')
@require_roles(*MARKET_ROLES)
def get_demand_insights():
    """Top crops consumed in a district or province."""
    location_name, location_type = _location_args()
    top_n = parse_int(request.args.get('top_n'), 'top_n', default=5, minimum=1)
    sort_by = parse_choice(request.args.get('sort_by'), 'sort_by', tuple(SORT_FIELDS), default='quantity')
    year = parse_int(request.args.get('year'), 'year', minimum=1)

    service = get_analytics(current_app).market_demand
    insights = service.demand_insights(location_name, location_type, top_n, sort_by, year=year)

    if not insights:
        return _not_found('market demand data', location_name, location_type)
    return jsonify({'success': True, 'count': len(insights), 'data': insights})


# ========================================
# Market connections
# ========================================

@market_bp.route('/cooperatives')
@require_roles(*MARKET_ROLES)
def find_cooperatives():
    location_name, location_type = _location_args()
    service = get_analytics(current_app).market_connection
    cooperatives = service.find_cooperatives(location_name, location_type)

    if not cooperatives:
        return _not_found('cooperatives', location_name, location_type)
    return jsonify({'success': True, 'count': len(cooperatives), 'data': cooperatives})


@market_bp.route('/buyers-processors')
@require_roles(*MARKET_ROLES)
def find_buyers_and_processors():
    """Food traders and processors above the worker or turnover threshold."""
    location_name, location_type = _location_args()
    min_workers = parse_int(request.args.get('min_workers'), 'min_workers',
                            default=DEFAULT_MIN_WORKERS, minimum=0)
    min_turnover = parse_non_negative_float(request.args.get('min_turnover'), 'min_turnover',
                                            default=DEFAULT_MIN_TURNOVER)

    service = get_analytics(current_app).market_connection
    results = service.find_buyers_and_processors(
        location_name, location_type, min_workers=min_workers, min_turnover=min_turnover
    )

    if not results['potential_buyers'] and not results['food_processors']:
        return _not_found('significant potential buyers or food processors',
                          location_name, location_type)
    return jsonify({'success': True, 'data': results})


@market_bp.route('/exporters')
@require_roles(*MARKET_ROLES)
def find_exporters():
    location_name, location_type = _location_args()
    service = get_analytics(current_app).market_connection
    exporters = service.find_exporters(location_name, location_type)

    if not exporters:
        return _not_found('goods exporters', location_name, location_type)
    return jsonify({'success': True, 'count': len(exporters), 'data': exporters})


@market_bp.route('/agriculture')
@require_roles(*MARKET_ROLES)
def find_agriculture_related():
    location_name, location_type = _location_args()
    service = get_analytics(current_app).market_connection
    establishments = service.find_agriculture_related(location_name, location_type)

    if not establishments:
        return _not_found('agriculture-related establishments', location_name, location_type)
    return jsonify({'success': True, 'count': len(establishments), 'data': establishments})
