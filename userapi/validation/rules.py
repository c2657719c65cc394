"""Field rules and the pipeline that evaluates them.

A rule set maps each field to an ordered list of rules.  Every rule of a
field is evaluated and every failure is kept, in rule order.  A field whose
value is empty (missing, ``None``, blank string, empty collection) is only
checked by *implicit* rules such as :class:`Required`; all other rules treat
an empty value as "nothing to check".
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from email_validator import EmailNotValidError, validate_email

from userapi.core.errors import ValidationFailed
from userapi.schemas.common import ErrorSet


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False


class Rule:
    """A predicate plus the message reported when it does not hold.

    ``message`` is a ``str.format`` template; ``{attribute}`` is the
    human-readable field name, other placeholders come from ``params()``.
    """

    message: str = "The {attribute} field is invalid."
    implicit: bool = False

    def passes(self, value: Any) -> bool:
        raise NotImplementedError

    def params(self) -> dict[str, Any]:
        return {}

    def message_for(self, field: str) -> str:
        return self.message.format(attribute=field.replace("_", " "), **self.params())


class Required(Rule):
    message = "The {attribute} field is required."
    implicit = True

    def passes(self, value: Any) -> bool:
        return not is_empty(value)


class Email(Rule):
    message = "The {attribute} field must be a valid email address."

    def passes(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True


class MinLength(Rule):
    message = "The {attribute} field must be at least {min} characters."

    def __init__(self, min_length: int):
        self.min_length = min_length

    def passes(self, value: Any) -> bool:
        return isinstance(value, str) and len(value) >= self.min_length

    def params(self) -> dict[str, Any]:
        return {"min": self.min_length}


class MaxBytes(Rule):
    """Upper bound on the UTF-8 encoded size of a string."""

    message = "The {attribute} field must not be greater than {max} bytes."

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes

    def passes(self, value: Any) -> bool:
        return isinstance(value, str) and len(value.encode("utf-8")) <= self.max_bytes

    def params(self) -> dict[str, Any]:
        return {"max": self.max_bytes}


class Unique(Rule):
    """Fails when *exists(value, ignore_id)* reports the value as taken."""

    message = "The {attribute} has already been taken."

    def __init__(self, exists: Callable[[Any, Any], bool], ignore_id: Any = None):
        self.exists = exists
        self.ignore_id = ignore_id

    def passes(self, value: Any) -> bool:
        return not self.exists(value, self.ignore_id)


RuleSet = Mapping[str, Sequence[Rule]]


def validate(payload: Mapping[str, Any], rules: RuleSet) -> ErrorSet:
    """Run *rules* against *payload* and collect the violations per field."""
    errors: ErrorSet = {}
    for field, field_rules in rules.items():
        value = payload.get(field)
        empty = is_empty(value)
        messages: list[str] = []
        for rule in field_rules:
            if empty and not rule.implicit:
                continue
            if not rule.passes(value):
                message = rule.message_for(field)
                if message not in messages:
                    messages.append(message)
        if messages:
            errors[field] = messages
    return errors


def enforce(payload: Mapping[str, Any], rules: RuleSet) -> None:
    """Raise :class:`ValidationFailed` unless *payload* satisfies *rules*."""
    errors = validate(payload, rules)
    if errors:
        raise ValidationFailed(errors)
