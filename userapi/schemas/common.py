"""Shared / generic schemas: the response envelope every endpoint returns."""

from typing import Any, Literal

from pydantic import BaseModel

# field name -> ordered violation messages
ErrorSet = dict[str, list[str]]


class Envelope(BaseModel):
    """Base of the two envelope variants.

    Optional members are left as ``None`` when not applicable and dropped on
    serialization, so clients see absence rather than ``null``.
    """

    fulfilled: bool

    def to_response(self) -> dict[str, Any]:
        dumped = self.model_dump(mode="json")
        return {key: value for key, value in dumped.items() if value is not None}


class SuccessEnvelope(Envelope):
    """``{fulfilled: true, data?, pagination?}``"""

    fulfilled: Literal[True] = True
    data: Any = None
    pagination: Any = None


class ErrorEnvelope(Envelope):
    """``{fulfilled: false, errors?}``"""

    fulfilled: Literal[False] = False
    errors: ErrorSet | None = None


class PaginationMeta(BaseModel):
    """Attached under ``pagination`` for paged listings."""

    current_page: int
    per_page: int
    total: int
    last_page: int
