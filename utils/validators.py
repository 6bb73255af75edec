"""
utils/validators.py — Query-parameter and request-body validation helpers.

Validates:
- Required parameters (present, non-empty)
- Positive / non-negative finite numbers
- Bounded integers (e.g. top_n)
- Enumerated values (location type, sort field)

Every helper raises InvalidInputError naming the offending field, which the
app's error handler turns into a 400 response.
"""

import math

from errors import InvalidInputError


def require(params, *names):
    """Return the values of the required parameters, in order."""
    missing = [n for n in names if params.get(n) in (None, '')]
    if missing:
        raise InvalidInputError(
            missing[0],
            f"Please provide {', '.join(missing)} as {'a parameter' if len(missing) == 1 else 'parameters'}."
        )
    return [params.get(n) for n in names]


def parse_positive_float(value, field):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, f"{field} must be a positive number.")
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(field, f"{field} must be a positive number.")
    return number


def parse_non_negative_float(value, field, default=None):
    if value in (None, ''):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, f"{field} must be a non-negative number.")
    if not math.isfinite(number) or number < 0:
        raise InvalidInputError(field, f"{field} must be a non-negative number.")
    return number


def parse_int(value, field, default=None, minimum=None, maximum=None):
    """Parse an optional integer, enforcing inclusive bounds."""
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, f"{field} must be an integer.")
    if minimum is not None and number < minimum:
        raise InvalidInputError(field, _range_message(field, minimum, maximum))
    if maximum is not None and number > maximum:
        raise InvalidInputError(field, _range_message(field, minimum, maximum))
    return number


def parse_choice(value, field, choices, default=None):
    if value in (None, ''):
        return default
    if value not in choices:
        raise InvalidInputError(field, f"{field} must be one of: {', '.join(choices)}.")
    return value


def _range_message(field, minimum, maximum):
    if maximum is None:
        return f"{field} must be at least {minimum}."
    if minimum is None:
        return f"{field} must be at most {maximum}."
    return f"{field} must be between {minimum} and {maximum}."
