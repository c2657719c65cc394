"""Pydantic schemas — re‑exported for convenience."""

from userapi.schemas.common import (  # noqa: F401
    Envelope,
    ErrorEnvelope,
    ErrorSet,
    PaginationMeta,
    SuccessEnvelope,
)
from userapi.schemas.user import (  # noqa: F401
    UserCreate,
    UserLogin,
    UserRead,
    UserUpdate,
    Token,
)
