"""
errors.py — Exception hierarchy for the estimation engine and crop-plan lifecycle.

Each exception carries the HTTP status the Flask error handler in app.py
maps it to. Empty-but-valid query results are never raised as errors;
routes decide when an empty list means 404.
"""


class FarmlyticsError(Exception):
    """Base class for every error raised by the core."""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class InvalidInputError(FarmlyticsError):
    """Caller-input error attributable to one field."""
    status_code = 400

    def __init__(self, field, message):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        payload = super().to_dict()
        payload['field'] = self.field
        return payload


class NotAuthenticatedError(FarmlyticsError):
    status_code = 401


class NotAuthorizedError(FarmlyticsError):
    status_code = 403


class PlanNotFoundError(FarmlyticsError):
    status_code = 404

    def __init__(self, plan_id):
        super().__init__(f"Crop plan not found with id of {plan_id}")
        self.plan_id = plan_id


class InvalidTransitionError(FarmlyticsError):
    """Lifecycle transition not allowed from the plan's current status."""
    status_code = 409

    def __init__(self, current_status, message=None):
        super().__init__(message or f"Invalid status transition from '{current_status}'.")
        self.current_status = current_status


class AlreadyHarvestedError(InvalidTransitionError):
    def __init__(self, plan_id):
        super().__init__(
            'Harvested',
            f"Crop plan {plan_id} is already harvested (current status: Harvested)."
        )
        self.plan_id = plan_id


class EstimationError(FarmlyticsError):
    """Yield or price could not be resolved from either the datasets or the defaults."""
    status_code = 500

    def __init__(self, crop_name, district_name, message):
        super().__init__(message)
        self.crop_name = crop_name
        self.district_name = district_name


class AnalyticsNotInitializedError(FarmlyticsError):
    status_code = 500

    def __init__(self, message='Analytics services not initialized.'):
        super().__init__(message)


class DatasetLoadError(FarmlyticsError):
    """A dataset file could not be read or parsed. Fatal at startup."""

    def __init__(self, path, message):
        super().__init__(f"Failed to load dataset {path}: {message}")
        self.path = path
