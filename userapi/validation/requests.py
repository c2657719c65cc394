"""Rule sets for each endpoint that accepts a body."""

import uuid

from userapi.core.security import BCRYPT_MAX_BYTES
from userapi.services.user_store import UserStore
from userapi.validation.rules import Email, MaxBytes, MinLength, Required, RuleSet, Unique

PASSWORD_MIN_LENGTH = 6


def register_rules(store: UserStore) -> RuleSet:
    return {
        "name": [Required()],
        "email": [Required(), Email(), Unique(store.email_taken)],
        "password": [
            Required(),
            MinLength(PASSWORD_MIN_LENGTH),
            MaxBytes(BCRYPT_MAX_BYTES),
        ],
    }


def update_rules(store: UserStore, user_id: uuid.UUID) -> RuleSet:
    """The user being updated may keep its own email."""
    return {
        "name": [Required()],
        "email": [Required(), Email(), Unique(store.email_taken, ignore_id=user_id)],
        "password": [MinLength(PASSWORD_MIN_LENGTH), MaxBytes(BCRYPT_MAX_BYTES)],
    }


def login_rules() -> RuleSet:
    return {
        "email": [Required(), Email()],
        "password": [Required(), MinLength(PASSWORD_MIN_LENGTH)],
    }
