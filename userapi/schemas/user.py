"""User & authentication schemas.

Request bodies only pin down JSON types; presence, format and length are
checked by the rule sets in ``userapi.validation`` so that every violation of
a field can be reported together.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from userapi.core.security import TOKEN_TYPE


class UserCreate(BaseModel):
    """POST /api/register"""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class UserLogin(BaseModel):
    """POST /api/login"""

    email: str | None = None
    password: str | None = None


class UserUpdate(BaseModel):
    """PUT/PATCH /api/users/{id} — password is only changed when given."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class UserRead(BaseModel):
    """User returned from API — never exposes the password hash."""

    id: uuid.UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    """Bearer token handed out on register and login."""

    access_token: str
    token_type: str = TOKEN_TYPE
