"""User resource orchestration: register, login and CRUD on user records.

The handler never looks at the HTTP request.  Callers hand it already
validated payloads and, where ownership matters, the id of the acting user.
Successful calls return an envelope; failures raise an ``ApiError``.
"""

import logging
import math
import uuid

from userapi.config import settings
from userapi.core.errors import AuthorizationError, CredentialMismatch, NotFoundError
from userapi.core.responses import (
    build_success,
    build_success_with_pagination,
)
from userapi.core.security import CredentialService
from userapi.db.models import User
from userapi.schemas.common import Envelope, PaginationMeta
from userapi.schemas.user import Token, UserCreate, UserLogin, UserRead, UserUpdate
from userapi.services.user_store import UserStore
from userapi.validation.rules import is_empty

logger = logging.getLogger(__name__)


def _serialize(user: User) -> UserRead:
    return UserRead.model_validate(user)


class UserHandler:
    def __init__(self, store: UserStore, credentials: CredentialService):
        self.store = store
        self.credentials = credentials

    def _token_envelope(self, user: User) -> Envelope:
        token = Token(access_token=self.credentials.issue_token(user.id))
        return build_success(token.model_dump())

    @staticmethod
    def _authorize(actor_id: uuid.UUID, user: User) -> None:
        if actor_id != user.id:
            logger.warning("User %s denied access to user %s", actor_id, user.id)
            raise AuthorizationError(f"{actor_id} may not modify {user.id}")

    # ── auth ────────────────────────────────────────────────────────────

    def register(self, body: UserCreate) -> Envelope:
        user = self.store.create(
            name=body.name,
            email=body.email,
            hashed_password=self.credentials.hash(body.password),
        )
        logger.info("Registered user %s", user.id)
        return self._token_envelope(user)

    def login(self, body: UserLogin) -> Envelope:
        user = self.store.find_by_email(body.email)
        if user is None:
            logger.info("Login for unknown email")
            raise NotFoundError("email")
        if not self.credentials.verify(body.password, user.hashed_password):
            logger.info("Login with wrong password for user %s", user.id)
            raise CredentialMismatch()
        logger.info("User %s logged in", user.id)
        return self._token_envelope(user)

    # ── resource ────────────────────────────────────────────────────────

    def index(self, page: int | None = None, per_page: int | None = None) -> Envelope:
        """List users; paginated when *page* is given."""
        if page is None:
            return build_success([_serialize(u) for u in self.store.all()])

        per_page = per_page or settings.DEFAULT_PER_PAGE
        users, total = self.store.paginate(page, per_page)
        pagination = PaginationMeta(
            current_page=page,
            per_page=per_page,
            total=total,
            last_page=max(1, math.ceil(total / per_page)),
        )
        return build_success_with_pagination(
            [_serialize(u) for u in users], pagination.model_dump()
        )

    def show(self, user: User) -> Envelope:
        return build_success(_serialize(user))

    def update(self, actor_id: uuid.UUID, user: User, body: UserUpdate) -> Envelope:
        self._authorize(actor_id, user)
        user.name = body.name
        user.email = body.email
        if not is_empty(body.password):
            user.hashed_password = self.credentials.hash(body.password)
        user = self.store.save(user)
        logger.info("Updated user %s", user.id)
        return build_success(_serialize(user))

    def destroy(self, actor_id: uuid.UUID, user: User) -> Envelope:
        self._authorize(actor_id, user)
        snapshot = _serialize(user)
        self.store.delete(user)
        logger.info("Deleted user %s", snapshot.id)
        return build_success(snapshot)
