"""
routes/tracker.py — Harvest and revenue estimate route.

Provides:
- GET /api/v1/tracker/estimates — Estimate harvest date, production and revenue
  for a planting without storing anything
"""

from flask import Blueprint, current_app, jsonify, request

from dataset_loader import get_analytics
from models import ROLE_ADMIN, ROLE_FARMER
from utils.identity import require_roles
from utils.validators import parse_positive_float, require

tracker_bp = Blueprint('tracker', __name__, url_prefix='/api/v1/tracker')


@tracker_bp.route('/estimates')
@require_roles(ROLE_FARMER, ROLE_ADMIN)
def get_estimates():
    crop_name, area, planting_date, district_name = require(
        request.args, 'crop_name', 'actual_area_planted_ha', 'planting_date', 'district_name'
    )
    area_ha = parse_positive_float(area, 'actual_area_planted_ha')

    tracker = get_analytics(current_app).harvest_tracker
    estimates = tracker.estimate(crop_name, area_ha, planting_date, district_name)
    return jsonify({'success': True, 'data': estimates})
