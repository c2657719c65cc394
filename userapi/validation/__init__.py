"""Request validation — rule objects and per-endpoint rule sets."""

from userapi.validation.rules import enforce, validate  # noqa: F401
from userapi.validation.requests import (  # noqa: F401
    login_rules,
    register_rules,
    update_rules,
)
