"""Response envelope builder.

Every endpoint answers with the same JSON shape::

    {"fulfilled": bool, "data"?: ..., "errors"?: {field: [msg, ...]}, "pagination"?: ...}

A member is present only when it is non-empty. Success envelopes never carry
``errors`` and error envelopes never carry ``data`` or ``pagination``.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from fastapi.responses import JSONResponse

from userapi.schemas.common import Envelope, ErrorEnvelope, ErrorSet, SuccessEnvelope

# Canonical error tokens
NOT_FOUND = "Not found"
INVALID = "Invalid"
SAVE_FAILED = "Save failed"
UNAUTHORIZE = "Unauthorize"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, Sequence)):
        return len(value) == 0
    return False


def build(
    fulfilled: bool,
    data: Any = None,
    errors: ErrorSet | None = None,
    pagination: Any = None,
) -> Envelope:
    """Assemble an envelope, dropping every empty member."""
    if fulfilled:
        has_data = not _is_empty(data)
        return SuccessEnvelope(
            data=data if has_data else None,
            # pagination only ever travels with data
            pagination=pagination if has_data and not _is_empty(pagination) else None,
        )
    return ErrorEnvelope(errors=None if _is_empty(errors) else dict(errors))


def build_error(errors: ErrorSet) -> Envelope:
    return build(False, errors=errors)


def build_success(data: Any) -> Envelope:
    return build(True, data=data)


def build_success_with_pagination(data: Any, pagination: Any) -> Envelope:
    return build(True, data=data, pagination=pagination)


def build_not_found(field: str = "data") -> Envelope:
    return build_error({field: [NOT_FOUND]})


def build_unauthorize() -> Envelope:
    return build_error({"user": [UNAUTHORIZE]})


def envelope_response(
    envelope: Envelope,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render *envelope* as a JSON response with *status_code*."""
    return JSONResponse(
        status_code=status_code, content=envelope.to_response(), headers=headers
    )
