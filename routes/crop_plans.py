"""
routes/crop_plans.py — Crop plan lifecycle routes.

Provides:
- GET    /api/v1/crop-plans                        — List visible crop plans
- POST   /api/v1/crop-plans                        — Create a plan (estimates computed)
- GET    /api/v1/crop-plans/<id>                   — Get one plan
- PUT    /api/v1/crop-plans/<id>                   — Edit a plan (re-estimates when needed)
- DELETE /api/v1/crop-plans/<id>                   — Delete a plan
- PUT    /api/v1/crop-plans/<id>/record-harvest    — Record the actual harvest
- GET    /api/v1/crop-plans/export                 — Excel workbook of visible plans

Farmers only see and change their own plans; admins see everyone's.
"""

from flask import Blueprint, current_app, g, jsonify, request, send_file

import crop_plan_lifecycle as lifecycle
from dataset_loader import get_analytics
from errors import InvalidInputError
from models import ROLE_ADMIN, ROLE_FARMER
from utils.export import generate_crop_plans_excel
from utils.identity import require_roles

crop_plans_bp = Blueprint('crop_plans', __name__, url_prefix='/api/v1/crop-plans')

PLAN_ROLES = (ROLE_FARMER, ROLE_ADMIN)


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInputError('body', 'Request body must be a JSON object.')
    return data


def _visible_plans():
    return lifecycle.list_plans(g.actor, user_id=request.args.get('user_id') or None)


# ========================================
# Collection
# ========================================

@crop_plans_bp.route('', methods=['GET'])
@require_roles(*PLAN_ROLES)
def list_crop_plans():
    plans = _visible_plans()
    return jsonify({
        'success': True,
        'count': len(plans),
        'data': [p.to_dict() for p in plans]
    })


@crop_plans_bp.route('', methods=['POST'])
@require_roles(*PLAN_ROLES)
def create_crop_plan():
    """Create a crop plan; estimates are computed before anything is stored."""
    data = _json_body()
    plan = lifecycle.create_plan(
        get_analytics(current_app),
        g.actor,
        crop_name=data.get('crop_name'),
        district_name=data.get('district_name'),
        area_ha=data.get('actual_area_planted_ha'),
        planting_date=data.get('planting_date'),
        status=data.get('status'),
    )
    return jsonify({'success': True, 'data': plan.to_dict()}), 201


@crop_plans_bp.route('/export')
@require_roles(*PLAN_ROLES)
def export_crop_plans():
    """Download the visible crop plans as an Excel workbook."""
    buffer, filename = generate_crop_plans_excel(_visible_plans())
    if not buffer:
        return jsonify({'success': False, 'error': 'No crop plans to export.'}), 404

    return send_file(
        buffer,
        as_attachment=True,
        download_name=filename,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )


# ========================================
# Single plan
# ========================================

@crop_plans_bp.route('/<int:plan_id>', methods=['GET'])
@require_roles(*PLAN_ROLES)
def get_crop_plan(plan_id):
    plan = lifecycle.get_plan(g.actor, plan_id)
    return jsonify({'success': True, 'data': plan.to_dict()})


@crop_plans_bp.route('/<int:plan_id>', methods=['PUT'])
@require_roles(*PLAN_ROLES)
def update_crop_plan(plan_id):
    plan = lifecycle.update_plan(get_analytics(current_app), g.actor, plan_id, _json_body())
    return jsonify({'success': True, 'data': plan.to_dict()})


@crop_plans_bp.route('/<int:plan_id>', methods=['DELETE'])
@require_roles(*PLAN_ROLES)
def delete_crop_plan(plan_id):
    lifecycle.delete_plan(g.actor, plan_id)
    return jsonify({'success': True, 'data': {}})


@crop_plans_bp.route('/<int:plan_id>/record-harvest', methods=['PUT'])
@require_roles(*PLAN_ROLES)
def record_harvest(plan_id):
    """Record actual harvest date, yield and selling price (once, for a Planted plan)."""
    data = _json_body()
    plan = lifecycle.record_harvest(
        g.actor,
        plan_id,
        actual_harvest_date=data.get('actual_harvest_date'),
        actual_yield_kg_per_ha=data.get('actual_yield_kg_per_ha'),
        actual_selling_price_per_kg_rwf=data.get('actual_selling_price_per_kg_rwf'),
        harvest_notes=data.get('harvest_notes'),
    )
    return jsonify({'success': True, 'data': plan.to_dict()})
