from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ValidationError, 400),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def request_data() -> dict:
    """JSON body, falling back to form fields."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def json_action(failure_message: str):
    """Turn a view's result or DomainError into a JSON response.

    Unexpected errors are logged and answered with ``failure_message`` only.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                result = view(*args, **kwargs)
            except DomainError as e:
                return jsonify({"error": str(e), "kind": e.kind}), status_for(e)
            except Exception:
                logger.exception("%s (%s %s)", failure_message, request.method, request.path)
                return jsonify({"error": failure_message}), 500
            if isinstance(result, tuple):
                body, status = result
                return jsonify(body), status
            return jsonify(result)

        return wrapper

    return decorator
