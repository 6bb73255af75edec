"""
routes/crops.py — Crop recommendation routes.

Provides:
- GET /api/v1/crops/recommendations — Top crops for a district with land allocation
"""

from flask import Blueprint, current_app, jsonify, request

from dataset_loader import get_analytics
from models import ROLE_ADMIN, ROLE_FARMER
from utils.identity import require_roles
from utils.validators import parse_int, parse_positive_float, require

crops_bp = Blueprint('crops', __name__, url_prefix='/api/v1/crops')

MAX_TOP_N = 10


@crops_bp.route('/recommendations')
@require_roles(ROLE_FARMER, ROLE_ADMIN)
def get_recommendations():
    """Recommend crops for a district and split the farm between them."""
    district_name, farm_size_ha = require(request.args, 'district_name', 'farm_size_ha')
    farm_size_ha = parse_positive_float(farm_size_ha, 'farm_size_ha')
    top_n = parse_int(request.args.get('top_n'), 'top_n', default=3, minimum=1, maximum=MAX_TOP_N)
    season = request.args.get('season') or None
    year = parse_int(request.args.get('year'), 'year', minimum=1)

    planner = get_analytics(current_app).crop_planner
    recommendations = planner.recommend(district_name, farm_size_ha, top_n, season=season, year=year)

    if not recommendations:
        suffix = f" in {season}" if season else ''
        return jsonify({
            'success': False,
            'error': f"No crop recommendations found for district: {district_name}{suffix}."
        }), 404

    return jsonify({'success': True, 'count': len(recommendations), 'data': recommendations})
