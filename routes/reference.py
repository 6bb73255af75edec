"""
routes/reference.py — Public reference-data routes.

Provides:
- GET /api/v1/health       — Service status, dataset sizes, crop plans per status
- GET /api/v1/provinces    — Rwanda's provinces
- GET /api/v1/districts    — Rwanda's districts with their province
- GET /api/v1/crops/list   — MVP crops with average maturity days
"""

from flask import Blueprint, current_app, jsonify

from database import count_crop_plans_by_status
from dataset_loader import EXTENSION_KEY
from reference_data import get_crop_list, get_districts, get_provinces

reference_bp = Blueprint('reference', __name__, url_prefix='/api/v1')


@reference_bp.route('/health')
def health():
    """Service status, loaded dataset sizes and crop plans per status."""
    context = current_app.extensions.get(EXTENSION_KEY)
    return jsonify({
        'success': True,
        'status': 'ok' if context is not None else 'starting',
        'datasets': context.summary() if context is not None else None,
        'crop_plans': count_crop_plans_by_status(),
    })


@reference_bp.route('/provinces')
def list_provinces():
    provinces = get_provinces()
    return jsonify({'success': True, 'count': len(provinces), 'data': provinces})


@reference_bp.route('/districts')
def list_districts():
    districts = get_districts()
    return jsonify({'success': True, 'count': len(districts), 'data': districts})


@reference_bp.route('/crops/list')
def list_crops():
    crops = get_crop_list()
    return jsonify({'success': True, 'count': len(crops), 'data': crops})
