"""Tests for the contact form schema.

Covers:
- Whole-object validation (trimming, all-or-nothing, issue paths)
- Rule priority per field (required before length, length bounds)
- Single-field validation used at blur time
- Purity (same input, same result)
"""

import pytest

from app.schemas.contact import (
    ContactSubmission,
    SubmissionInvalid,
    validate_field,
    validate_submission,
)


def _issues(data):
    with pytest.raises(SubmissionInvalid) as exc:
        validate_submission(data)
    return exc.value


class TestValidateSubmission:

    def test_minimum_valid_submission(self, valid_payload):
        """Name of exactly 2 chars and a 10+ char message pass."""
        submission = validate_submission(valid_payload)
        assert isinstance(submission, ContactSubmission)
        assert submission.name == "Jo"
        assert submission.email == "jo@example.com"
        assert submission.message == "Hello there, interested"

    def test_fields_are_trimmed(self):
        submission = validate_submission({
            "name": "  Jane Doe  ",
            "email": " jane@example.com\n",
            "message": "\n  I would like a consultation.  ",
        })
        assert submission.name == "Jane Doe"
        assert submission.email == "jane@example.com"
        assert submission.message == "I would like a consultation."

    def test_inner_newlines_preserved(self):
        submission = validate_submission({
            "name": "Jane",
            "email": "jane@example.com",
            "message": "Line one\nLine two\nLine three",
        })
        assert submission.message == "Line one\nLine two\nLine three"

    def test_one_char_name_rejected(self, valid_payload):
        err = _issues({**valid_payload, "name": "J"})
        assert err.field_errors() == {"name": "Name must be at least 2 characters"}

    def test_extra_keys_ignored(self, valid_payload):
        submission = validate_submission({**valid_payload, "phone": "555-0100"})
        assert not hasattr(submission, "phone")

    def test_all_invalid_fields_reported(self):
        err = _issues({"name": "", "email": "nope", "message": "short"})
        assert err.field_errors() == {
            "name": "Name is required",
            "email": "Please enter a valid email address",
            "message": "Message must be at least 10 characters",
        }

    def test_one_bad_field_rejects_whole_submission(self, valid_payload):
        """No partial acceptance: a single issue fails the lot."""
        err = _issues({**valid_payload, "message": "x" * 2001})
        assert [i.field for i in err.issues] == ["message"]

    def test_issue_shape(self, valid_payload):
        err = _issues({**valid_payload, "email": ""})
        issue = err.issues[0]
        assert issue.to_dict() == {
            "path": ["email"],
            "message": "Email is required",
            "code": "required",
        }

    def test_missing_fields_are_required(self):
        err = _issues({})
        assert err.field_errors() == {
            "name": "Name is required",
            "email": "Email is required",
            "message": "Message is required",
        }

    def test_non_string_values_are_required(self):
        err = _issues({"name": 42, "email": None, "message": ["a"]})
        assert err.field_errors() == {
            "name": "Name is required",
            "email": "Email is required",
            "message": "Message is required",
        }

    @pytest.mark.parametrize("data", [None, "name=Jo", ["Jo"], 7])
    def test_non_object_payload_rejected(self, data):
        err = _issues(data)
        assert len(err.issues) == 1
        assert err.issues[0].path == ()
        assert err.issues[0].code == "invalid_type"

    def test_validation_is_idempotent(self, valid_payload):
        assert validate_submission(valid_payload) == validate_submission(valid_payload)

        bad = {**valid_payload, "name": "J"}
        first = [i.to_dict() for i in _issues(bad).issues]
        second = [i.to_dict() for i in _issues(bad).issues]
        assert first == second

    def test_input_not_mutated(self, valid_payload):
        data = {**valid_payload, "name": "  Jo  "}
        validate_submission(data)
        assert data["name"] == "  Jo  "


class TestFieldRules:

    @pytest.mark.parametrize("value, expected", [
        ("", "Name is required"),
        ("   ", "Name is required"),
        ("J", "Name must be at least 2 characters"),
        (" J ", "Name must be at least 2 characters"),
        ("Jo", ""),
        ("x" * 100, ""),
        ("x" * 101, "Name must be less than 100 characters"),
    ])
    def test_name_rules(self, value, expected):
        assert validate_field("name", value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("", "Email is required"),
        ("plainaddress", "Please enter a valid email address"),
        ("jo@", "Please enter a valid email address"),
        ("@example.com", "Please enter a valid email address"),
        ("jo@@example.com", "Please enter a valid email address"),
        ("jo example@example.com", "Please enter a valid email address"),
        ("jo@example.com", ""),
        ("  jo.smith+leads@example.co.uk  ", ""),
        ("jo@melius.test", ""),
        ("jo@localhost", "Please enter a valid email address"),
    ])
    def test_email_rules(self, value, expected):
        assert validate_field("email", value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("", "Message is required"),
        ("too short", "Message must be at least 10 characters"),
        ("exactly 10", ""),
        ("x" * 2000, ""),
        ("x" * 2001, "Message must be less than 2000 characters"),
    ])
    def test_message_rules(self, value, expected):
        assert validate_field("message", value) == expected

    def test_missing_value_is_required(self):
        assert validate_field("message", None) == "Message is required"

    def test_unknown_field_raises(self):
        with pytest.raises(KeyError):
            validate_field("phone", "555-0100")

    def test_field_and_object_validation_agree(self, valid_payload):
        """Blur-time and submit-time checks share one rule table."""
        bad = {"name": "J", "email": "nope", "message": "short"}
        err = _issues(bad)
        for field, message in err.field_errors().items():
            assert validate_field(field, bad[field]) == message
