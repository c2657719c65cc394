"""Unit tests for UserHandler against a real store on SQLite."""

import uuid

import pytest
from sqlalchemy.orm import Session

from userapi.core.errors import (
    AuthorizationError,
    CredentialMismatch,
    EmailAlreadyTaken,
    NotFoundError,
)
from userapi.core.security import CredentialService
from userapi.db.models import User
from userapi.schemas.user import UserCreate, UserLogin, UserUpdate
from userapi.services.user_handler import UserHandler
from userapi.services.user_store import UserStore


@pytest.fixture
def store(db: Session) -> UserStore:
    return UserStore(db)


@pytest.fixture
def handler(store: UserStore) -> UserHandler:
    return UserHandler(store, CredentialService())


def _make_user(handler: UserHandler, email: str = "owner@gmail.com") -> User:
    handler.register(UserCreate(name="Owner", email=email, password="secret1"))
    return handler.store.find_by_email(email)


def test_register_hashes_password_and_returns_token(handler: UserHandler):
    envelope = handler.register(
        UserCreate(name="New", email="new@gmail.com", password="secret1")
    ).to_response()
    assert envelope["data"]["token_type"] == "Bearer"

    user = handler.store.find_by_email("new@gmail.com")
    assert user.hashed_password != "secret1"
    assert handler.credentials.verify("secret1", user.hashed_password)
    assert handler.credentials.decode(envelope["data"]["access_token"]) == user.id


def test_hashing_refuses_passwords_bcrypt_would_truncate(handler: UserHandler):
    with pytest.raises(ValueError, match="exceeds 72 bytes"):
        handler.credentials.hash("x" * 73)
    # multi-byte characters count by encoded length
    with pytest.raises(ValueError):
        handler.credentials.hash("é" * 37)

    hashed = handler.credentials.hash("x" * 72)
    assert handler.credentials.verify("x" * 72, hashed)
    assert not handler.credentials.verify("x" * 72, "not-a-bcrypt-hash")


def test_register_race_on_unique_email(handler: UserHandler):
    """The unique constraint still guards writes that slipped past validation."""
    _make_user(handler, "dup@gmail.com")
    with pytest.raises(EmailAlreadyTaken) as excinfo:
        handler.register(UserCreate(name="Dup", email="dup@gmail.com", password="secret1"))
    assert excinfo.value.http_status == 422
    assert excinfo.value.errors == {"email": ["The email has already been taken."]}

    # session is usable after the rollback
    assert len(handler.store.all()) == 1


def test_login_errors(handler: UserHandler):
    _make_user(handler)
    with pytest.raises(NotFoundError) as excinfo:
        handler.login(UserLogin(email="nobody@gmail.com", password="secret1"))
    assert excinfo.value.errors == {"email": ["Not found"]}

    with pytest.raises(CredentialMismatch) as excinfo:
        handler.login(UserLogin(email="owner@gmail.com", password="wrong-one"))
    assert excinfo.value.http_status == 401
    assert excinfo.value.errors == {"password": ["Invalid"]}


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_update_by_owner_with_blank_password(handler: UserHandler, blank):
    user = _make_user(handler)
    old_hash = user.hashed_password

    envelope = handler.update(
        user.id, user, UserUpdate(name="Renamed", email="renamed@gmail.com", password=blank)
    ).to_response()
    assert envelope["data"]["name"] == "Renamed"
    assert envelope["data"]["email"] == "renamed@gmail.com"
    assert user.hashed_password == old_hash


def test_update_by_stranger_never_touches_the_record(handler: UserHandler, db: Session):
    user = _make_user(handler)
    with pytest.raises(AuthorizationError):
        handler.update(uuid.uuid4(), user, UserUpdate(name="Hacked", email="h@gmail.com"))
    assert user.name == "Owner"
    assert not db.dirty


def test_destroy(handler: UserHandler):
    user = _make_user(handler)
    user_id = user.id

    with pytest.raises(AuthorizationError):
        handler.destroy(uuid.uuid4(), user)
    assert handler.store.find_by_id(user_id) is not None

    envelope = handler.destroy(user_id, user).to_response()
    assert envelope["data"]["id"] == str(user_id)
    assert handler.store.find_by_id(user_id) is None


def test_index_without_users_has_no_data(handler: UserHandler):
    assert handler.index().to_response() == {"fulfilled": True}


def test_index_pagination_meta(handler: UserHandler):
    for i in range(5):
        _make_user(handler, f"user{i}@gmail.com")

    envelope = handler.index(page=1, per_page=2).to_response()
    assert len(envelope["data"]) == 2
    assert envelope["pagination"] == {
        "current_page": 1,
        "per_page": 2,
        "total": 5,
        "last_page": 3,
    }
