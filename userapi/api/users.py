"""User registration, login, and user resource routes.

Every route answers with the envelope; failures are raised as ``ApiError``
and rendered by the global handlers in ``error_handlers``.
"""

from fastapi import APIRouter, Depends, Query, status

from userapi.api.deps import (
    get_current_user,
    get_owned_target,
    get_target_user,
    get_user_handler,
    validated_login,
    validated_register,
    validated_update,
)
from userapi.config import settings
from userapi.db.models import User
from userapi.schemas.user import UserCreate, UserLogin, UserUpdate
from userapi.services.user_handler import UserHandler

auth_router = APIRouter()
router = APIRouter()


# ── Auth ──────────────────────────────────────────────────────────────────────


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate = Depends(validated_register),
    handler: UserHandler = Depends(get_user_handler),
):
    """Create an account and return a bearer token for it."""
    return handler.register(body).to_response()


@auth_router.post("/login")
def login(
    body: UserLogin = Depends(validated_login),
    handler: UserHandler = Depends(get_user_handler),
):
    """Exchange email + password for a fresh bearer token."""
    return handler.login(body).to_response()


# ── Users ─────────────────────────────────────────────────────────────────────


@router.get("")
def index(
    page: int | None = Query(None, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    current_user: User = Depends(get_current_user),
    handler: UserHandler = Depends(get_user_handler),
):
    """List users. Passing ``page`` switches to a paginated listing."""
    return handler.index(page=page, per_page=per_page).to_response()


@router.get("/{user_id}")
def show(
    current_user: User = Depends(get_current_user),
    user: User = Depends(get_target_user),
    handler: UserHandler = Depends(get_user_handler),
):
    return handler.show(user).to_response()


@router.api_route("/{user_id}", methods=["PUT", "PATCH"])
def update(
    current_user: User = Depends(get_current_user),
    user: User = Depends(get_owned_target),
    body: UserUpdate = Depends(validated_update),
    handler: UserHandler = Depends(get_user_handler),
):
    """Replace name and email; the password changes only when one is supplied."""
    return handler.update(current_user.id, user, body).to_response()


@router.delete("/{user_id}")
def destroy(
    current_user: User = Depends(get_current_user),
    user: User = Depends(get_target_user),
    handler: UserHandler = Depends(get_user_handler),
):
    """Delete your own account; the response carries the deleted record."""
    return handler.destroy(current_user.id, user).to_response()
