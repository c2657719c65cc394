"""FastAPI dependencies shared across routes."""

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from userapi.core.errors import AuthorizationError, NotFoundError
from userapi.core.security import CredentialService
from userapi.db.models import User
from userapi.db.session import get_db
from userapi.schemas.user import UserCreate, UserLogin, UserUpdate
from userapi.services.user_handler import UserHandler
from userapi.services.user_store import UserStore
from userapi.validation import enforce, login_rules, register_rules, update_rules

bearer_scheme = HTTPBearer(auto_error=False)


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_credentials() -> CredentialService:
    return CredentialService()


def get_user_handler(
    store: UserStore = Depends(get_user_store),
    credentials: CredentialService = Depends(get_credentials),
) -> UserHandler:
    return UserHandler(store, credentials)


# ── Who is asking, and about whom ─────────────────────────────────────────────


def get_current_user(
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: UserStore = Depends(get_user_store),
    credentials: CredentialService = Depends(get_credentials),
) -> User:
    """Resolve the bearer token to a user, or fail with 401."""
    if bearer is None:
        raise AuthorizationError("Missing bearer token")
    user_id = credentials.decode(bearer.credentials)
    if user_id is None:
        raise AuthorizationError("Invalid or expired token")
    user = store.find_by_id(user_id)
    if user is None:
        raise AuthorizationError("Token user no longer exists")
    return user


def get_target_user(
    user_id: str,
    store: UserStore = Depends(get_user_store),
) -> User:
    """The user addressed by the ``{user_id}`` path segment, or 404.

    An id that is not a UUID cannot name any user, so it is a 404 as well.
    """
    try:
        parsed = uuid.UUID(user_id)
    except ValueError:
        raise NotFoundError("data") from None
    user = store.find_by_id(parsed)
    if user is None:
        raise NotFoundError("data")
    return user


def get_owned_target(
    current_user: User = Depends(get_current_user),
    target: User = Depends(get_target_user),
) -> User:
    """The addressed user, provided the caller is that user; 401 otherwise.

    Takes no body, so ownership is settled before the payload is even parsed.
    """
    if current_user.id != target.id:
        raise AuthorizationError(f"{current_user.id} may not modify {target.id}")
    return target


# ── Validated request bodies ──────────────────────────────────────────────────


def validated_register(
    body: UserCreate | None = None,
    store: UserStore = Depends(get_user_store),
) -> UserCreate:
    body = body or UserCreate()
    enforce(body.model_dump(), register_rules(store))
    return body


def validated_login(body: UserLogin | None = None) -> UserLogin:
    body = body or UserLogin()
    enforce(body.model_dump(), login_rules())
    return body


def validated_update(
    target: User = Depends(get_owned_target),
    body: UserUpdate | None = None,
    store: UserStore = Depends(get_user_store),
) -> UserUpdate:
    body = body or UserUpdate()
    enforce(body.model_dump(), update_rules(store, target.id))
    return body
