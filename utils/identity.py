"""
utils/identity.py — Caller identity for the HTTP boundary.

Authentication happens upstream; the gateway forwards the verified user id
and role in the X-User-Id and X-User-Role headers. require_roles() turns
them into an Actor on flask.g and rejects callers without an allowed role.
"""

from functools import wraps

from flask import g, request

from errors import NotAuthenticatedError, NotAuthorizedError
from models import ROLES, Actor

USER_ID_HEADER = 'X-User-Id'
USER_ROLE_HEADER = 'X-User-Role'


def current_actor():
    """Build the Actor for this request from the identity headers."""
    user_id = (request.headers.get(USER_ID_HEADER) or '').strip()
    role = (request.headers.get(USER_ROLE_HEADER) or '').strip().lower()
    if not user_id or role not in ROLES:
        raise NotAuthenticatedError('Not authorized, no identity provided')
    return Actor(user_id=user_id, role=role)


def require_roles(*roles):
    """
    Decorator enforcing that the caller has one of the given roles.

    Usage:
        @require_roles('farmer', 'admin')
        def get_recommendations():
            actor = g.actor
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if actor.role not in roles:
                raise NotAuthorizedError(
                    f"User role {actor.role} is not authorized to access this route"
                )
            g.actor = actor
            return func(*args, **kwargs)
        return wrapper
    return decorator
