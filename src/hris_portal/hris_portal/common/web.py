from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date
from .serialization import to_jsonable

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def json_ok(status: int = 200, **payload):
    return jsonify({"success": True, **to_jsonable(payload)}), status


def json_fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def request_data() -> dict:
    """JSON body when present, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def optional_date(value: Optional[str]):
    return parse_iso_date(value) if value and str(value).strip() else None


def handles_errors(failure_message: str):
    """Convert every failure of a view into a JSON error response."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                status = next((code for cls, code in _STATUS_CODES if isinstance(e, cls)), 400)
                return json_fail(str(e), status)
            except Exception as e:
                logger.exception(failure_message)
                if bool(current_app.config.get("DEBUG", False)):
                    return json_fail(f"{failure_message}: {e}", 500)
                return json_fail(failure_message, 500)

        return wrapper

    return decorator


def make_guards(resolver):
    """Build ``login_required``/``admin_required`` decorators bound to a session resolver.

    The resolved actor is stored on ``flask.g.actor``. Apply them beneath
    :func:`handles_errors` so a failing profile lookup still answers in JSON.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = resolver.resolve(session.get("uid"))
            if actor is None:
                return json_fail("Please sign in to continue", 401)
            g.actor = actor
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = resolver.resolve(session.get("uid"))
            if actor is None:
                return json_fail("Please sign in to continue", 401)
            if not actor.is_admin:
                return json_fail("Administrator access required", 403)
            g.actor = actor
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required
