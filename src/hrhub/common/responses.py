from __future__ import annotations

from flask import jsonify

from ..core.enums import ErrorKind
from ..core.results import Result

_STATUS_BY_ERROR = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_CHECKED_IN: 409,
    ErrorKind.ALREADY_CHECKED_OUT: 409,
    ErrorKind.NOT_CHECKED_IN: 409,
    ErrorKind.INVALID_STATE_TRANSITION: 409,
    ErrorKind.CONCURRENCY_CONFLICT: 409,
    ErrorKind.DESIGNATION_MISMATCH: 409,
}


def status_for(result: Result, *, created: bool = False) -> int:
    if result.ok:
        return 201 if created else 200
    # Remaining business-rule failures are unprocessable input.
    return _STATUS_BY_ERROR.get(result.error, 422)


def result_response(result: Result, *, created: bool = False, **extra):
    body = result.to_dict()
    body.update(extra)
    return jsonify(body), status_for(result, created=created)
