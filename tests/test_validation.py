"""Unit tests for the validation rules and rule sets."""

import pytest

from userapi.core.errors import ValidationFailed
from userapi.validation import enforce, login_rules, validate
from userapi.validation.rules import Email, MaxBytes, MinLength, Required, Unique


def _taken(*emails):
    """Existence lookup backed by a fixed set of emails."""

    def exists(value, ignore_id):
        return value in emails and ignore_id is None

    return exists


class TestRules:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_required_rejects_empty(self, value):
        assert not Required().passes(value)

    @pytest.mark.parametrize("value", ["x", 0, False])
    def test_required_accepts_present(self, value):
        assert Required().passes(value)

    @pytest.mark.parametrize("value", ["geronimo794@gmail.com", "a.b+c@mail.co.id"])
    def test_email_accepts(self, value):
        assert Email().passes(value)

    @pytest.mark.parametrize("value", ["geronimo794@", "plain", "a@b@c.com", 42])
    def test_email_rejects(self, value):
        assert not Email().passes(value)

    def test_min_length(self):
        assert MinLength(6).passes("abcdef")
        assert not MinLength(6).passes("abcde")
        assert MinLength(6).message_for("password") == (
            "The password field must be at least 6 characters."
        )

    def test_max_bytes_counts_encoded_size(self):
        assert MaxBytes(4).passes("abcd")
        assert not MaxBytes(4).passes("ééé")

    def test_unique_honours_ignored_id(self):
        assert not Unique(_taken("a@gmail.com")).passes("a@gmail.com")
        assert Unique(_taken("a@gmail.com"), ignore_id=1).passes("a@gmail.com")


class TestPipeline:
    def test_empty_value_only_reports_required(self):
        errors = validate({"email": ""}, {"email": [Required(), Email(), MinLength(6)]})
        assert errors == {"email": ["The email field is required."]}

    def test_optional_empty_value_passes(self):
        assert validate({"password": ""}, {"password": [MinLength(6)]}) == {}
        assert validate({}, {"password": [MinLength(6)]}) == {}

    def test_all_failures_of_a_field_are_kept_in_rule_order(self):
        rules = {"email": [Required(), Email(), MinLength(20), Unique(_taken("a@b"))]}
        errors = validate({"email": "a@b"}, rules)
        assert errors == {
            "email": [
                "The email field must be a valid email address.",
                "The email field must be at least 20 characters.",
                "The email has already been taken.",
            ]
        }

    def test_fields_reported_in_rule_set_order(self):
        errors = validate({}, {"name": [Required()], "email": [Required()]})
        assert list(errors) == ["name", "email"]

    def test_duplicate_messages_collapse(self):
        errors = validate({"name": ""}, {"name": [Required(), Required()]})
        assert errors == {"name": ["The name field is required."]}

    def test_enforce_raises_with_error_set(self):
        with pytest.raises(ValidationFailed) as excinfo:
            enforce({"email": "nope", "password": "123"}, login_rules())
        assert excinfo.value.http_status == 422
        assert set(excinfo.value.errors) == {"email", "password"}

    def test_enforce_passes_valid_login(self):
        enforce({"email": "geronimo794@gmail.com", "password": "123456"}, login_rules())
