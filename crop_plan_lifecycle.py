"""
crop_plan_lifecycle.py — Crop-plan state machine and recalculation rules.

Statuses: Planned → Planted → Harvested → Completed, with Cancelled
reachable from every non-terminal status. Completed and Cancelled are
terminal. Planted → Harvested happens only through record_harvest(),
exactly once.

Write paths:
- create_plan(): always estimates; nothing is stored if estimation fails
- update_plan(): re-estimates when crop, area, planting date or district
  changes, using the merged old/new values; planting fields are frozen once
  the plan is Harvested, Completed or Cancelled
- record_harvest(): actual production = stored area × actual yield,
  actual revenue = actual production × actual price

Only the plan's owner or an admin may read or change a plan.
"""

import logging
from typing import List, Optional

from database import (
    delete_crop_plan, get_crop_plan, insert_crop_plan, list_crop_plans,
    save_crop_plan, transaction
)
from errors import (
    AlreadyHarvestedError, InvalidInputError, InvalidTransitionError,
    NotAuthorizedError, PlanNotFoundError
)
from harvest_tracker import DATE_FORMAT, parse_iso_date
from models import (
    PLAN_STATUSES, STATUS_CANCELLED, STATUS_COMPLETED, STATUS_HARVESTED,
    STATUS_PLANNED, STATUS_PLANTED, Actor, CropPlan
)
from reference_data import MATURITY_DAYS, is_mvp_crop
from utils.validators import parse_non_negative_float, parse_positive_float

logger = logging.getLogger(__name__)

# Status changes allowed through update_plan(); Planted → Harvested is
# reserved for record_harvest().
ALLOWED_STATUS_CHANGES = {
    STATUS_PLANNED: {STATUS_PLANTED, STATUS_CANCELLED},
    STATUS_PLANTED: {STATUS_CANCELLED},
    STATUS_HARVESTED: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_COMPLETED: set(),
    STATUS_CANCELLED: set(),
}

INITIAL_STATUSES = (STATUS_PLANNED, STATUS_PLANTED)

# Planting fields are frozen once the harvest figures depend on them
LOCKED_STATUSES = (STATUS_HARVESTED, STATUS_COMPLETED, STATUS_CANCELLED)

ESTIMATE_FIELDS = ('crop_name', 'actual_area_planted_ha', 'planting_date', 'district_name')
UPDATABLE_FIELDS = ESTIMATE_FIELDS + ('status', 'harvest_notes')


# ========================================
# Authorization and validation helpers
# ========================================

def can_access(plan: CropPlan, actor: Actor) -> bool:
    """True for the plan's owner or an administrator."""
    return actor.is_admin or plan.user_id == actor.user_id


def _authorize(plan, actor, action):
    if not can_access(plan, actor):
        raise NotAuthorizedError(f"User {actor.user_id} is not authorized to {action} this crop plan")


def _load(plan_id, actor, action, conn=None):
    plan = get_crop_plan(plan_id, conn=conn)
    if plan is None:
        raise PlanNotFoundError(plan_id)
    _authorize(plan, actor, action)
    return plan


def _validate_crop_name(crop_name):
    if not crop_name or not is_mvp_crop(crop_name):
        raise InvalidInputError(
            'crop_name', f"crop_name must be one of: {', '.join(MATURITY_DAYS)}."
        )
    return crop_name


def _validate_district(district_name):
    district_name = (district_name or '').strip()
    if not district_name:
        raise InvalidInputError('district_name', 'Please specify the district name.')
    return district_name


def _validate_non_negative(value, field):
    number = parse_non_negative_float(value, field)
    if number is None:
        raise InvalidInputError(field, f"Please provide {field}.")
    return number


def _validate_status(status):
    if status not in PLAN_STATUSES:
        raise InvalidInputError('status', f"status must be one of: {', '.join(PLAN_STATUSES)}.")
    return status


def _estimate_into(plan, analytics):
    estimate = analytics.harvest_tracker.estimate(
        plan.crop_name, plan.actual_area_planted_ha, plan.planting_date, plan.district_name
    )
    plan.apply_estimate(estimate)


# ========================================
# Lifecycle operations
# ========================================

def create_plan(analytics, actor, crop_name, district_name, area_ha, planting_date, status=None):
    """
    Create a crop plan with its estimates.

    Args:
        analytics: AnalyticsContext providing the harvest tracker.
        actor: Owner of the new plan.
        crop_name: One of the MVP crops.
        district_name: District where the crop is planted.
        area_ha: Area planted, > 0.
        planting_date: YYYY-MM-DD string or date.
        status: Initial status; Planted when omitted.

    Returns:
        The stored CropPlan.

    Raises:
        InvalidInputError: a field is invalid.
        EstimationError: estimation failed; nothing is stored.
    """
    plan = CropPlan(
        user_id=actor.user_id,
        crop_name=_validate_crop_name(crop_name),
        district_name=_validate_district(district_name),
        actual_area_planted_ha=parse_positive_float(area_ha, 'actual_area_planted_ha'),
        planting_date=parse_iso_date(planting_date).strftime(DATE_FORMAT),
        status=_validate_status(status) if status else STATUS_PLANTED,
    )
    if plan.status not in INITIAL_STATUSES:
        raise InvalidInputError(
            'status', f"A crop plan can only be created as {' or '.join(INITIAL_STATUSES)}."
        )

    _estimate_into(plan, analytics)
    insert_crop_plan(plan)
    logger.info("Crop plan %s created for user %s (%s, %s ha in %s).",
                plan.id, plan.user_id, plan.crop_name, plan.actual_area_planted_ha, plan.district_name)
    return plan


def update_plan(analytics, actor, plan_id, changes):
    """
    Apply edits to a crop plan, re-estimating when a planting field changes.

    Args:
        analytics: AnalyticsContext providing the harvest tracker.
        actor: Caller; must own the plan or be an admin.
        plan_id: Plan to edit.
        changes: Mapping of field name to new value (see UPDATABLE_FIELDS).

    Returns:
        The updated CropPlan.
    """
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise InvalidInputError(unknown[0], f"Field '{unknown[0]}' cannot be updated.")

    # Validate before touching storage
    cleaned = {}
    if 'crop_name' in changes:
        cleaned['crop_name'] = _validate_crop_name(changes['crop_name'])
    if 'district_name' in changes:
        cleaned['district_name'] = _validate_district(changes['district_name'])
    if 'actual_area_planted_ha' in changes:
        cleaned['actual_area_planted_ha'] = parse_positive_float(
            changes['actual_area_planted_ha'], 'actual_area_planted_ha'
        )
    if 'planting_date' in changes:
        cleaned['planting_date'] = parse_iso_date(changes['planting_date']).strftime(DATE_FORMAT)
    if 'status' in changes:
        cleaned['status'] = _validate_status(changes['status'])
    if 'harvest_notes' in changes:
        cleaned['harvest_notes'] = changes['harvest_notes'] or None

    with transaction() as conn:
        plan = _load(plan_id, actor, 'update', conn=conn)

        new_status = cleaned.pop('status', plan.status)
        if new_status != plan.status:
            if new_status not in ALLOWED_STATUS_CHANGES[plan.status]:
                raise InvalidTransitionError(
                    plan.status,
                    f"Cannot change status from '{plan.status}' to '{new_status}'."
                )

        changed = [f for f in ESTIMATE_FIELDS if f in cleaned and cleaned[f] != getattr(plan, f)]
        if changed and plan.status in LOCKED_STATUSES:
            raise InvalidTransitionError(
                plan.status,
                f"Cannot change {', '.join(changed)} of a crop plan with status '{plan.status}'."
            )
        needs_estimate = bool(changed)
        for key, value in cleaned.items():
            setattr(plan, key, value)
        plan.status = new_status

        if needs_estimate:
            _estimate_into(plan, analytics)
            logger.info("Crop plan %s re-estimated after edit.", plan.id)

        save_crop_plan(plan, conn=conn)
    return plan


def record_harvest(actor, plan_id, actual_harvest_date, actual_yield_kg_per_ha,
                   actual_selling_price_per_kg_rwf, harvest_notes=None):
    """
    Record the actual harvest of a Planted crop plan (one time only).

    The area comes from the stored plan, never from the caller.

    Raises:
        AlreadyHarvestedError: the plan is already Harvested.
        InvalidTransitionError: the plan is in any other status than Planted.
        InvalidInputError: harvest date, yield or price is invalid.
    """
    with transaction() as conn:
        plan = _load(plan_id, actor, 'record harvest for', conn=conn)

        if plan.status == STATUS_HARVESTED:
            raise AlreadyHarvestedError(plan.id)
        if plan.status != STATUS_PLANTED:
            raise InvalidTransitionError(
                plan.status,
                f"Cannot record harvest for a crop plan with status '{plan.status}'; "
                f"it must be '{STATUS_PLANTED}'."
            )

        harvested_on = parse_iso_date(actual_harvest_date, field='actual_harvest_date')
        yield_kg_per_ha = _validate_non_negative(actual_yield_kg_per_ha, 'actual_yield_kg_per_ha')
        price_per_kg = _validate_non_negative(
            actual_selling_price_per_kg_rwf, 'actual_selling_price_per_kg_rwf'
        )

        production_kg = plan.actual_area_planted_ha * yield_kg_per_ha
        plan.actual_harvest_date = harvested_on.strftime(DATE_FORMAT)
        plan.actual_yield_kg_per_ha = yield_kg_per_ha
        plan.actual_total_production_kg = production_kg
        plan.actual_selling_price_per_kg_rwf = price_per_kg
        plan.actual_revenue_rwf = production_kg * price_per_kg
        plan.harvest_notes = harvest_notes or None
        plan.status = STATUS_HARVESTED

        save_crop_plan(plan, conn=conn)

    logger.info("Harvest recorded for crop plan %s: %.2f kg, %.2f Rwf.",
                plan.id, plan.actual_total_production_kg, plan.actual_revenue_rwf)
    return plan


def delete_plan(actor, plan_id):
    with transaction() as conn:
        _load(plan_id, actor, 'delete', conn=conn)
        delete_crop_plan(plan_id, conn=conn)
    logger.info("Crop plan %s deleted by user %s.", plan_id, actor.user_id)


def get_plan(actor, plan_id):
    return _load(plan_id, actor, 'view')


def list_plans(actor: Actor, user_id: Optional[str] = None) -> List[CropPlan]:
    """Farmers see their own plans; admins see everyone's, or one user's when user_id is given."""
    if actor.is_admin:
        return list_crop_plans(user_id)
    return list_crop_plans(actor.user_id)
