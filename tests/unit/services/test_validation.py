"""Unit tests for form validation."""

import pytest

from core.exceptions import ErrorCode, ValidationFailure
from domain.services.validation import parse_duration, validate_activity, validate_profile


class TestValidateProfile:
    def test_accepts_filled_form(self):
        submission = validate_profile("Jane", "1990-04-12")

        assert submission.display_name == "Jane"
        assert submission.birthdate == "1990-04-12"

    def test_strips_surrounding_whitespace(self):
        submission = validate_profile("  Jane Doe ", " 1990-04-12")

        assert submission.display_name == "Jane Doe"
        assert submission.birthdate == "1990-04-12"

    @pytest.mark.parametrize(
        ("display_name", "birthdate", "field"),
        [
            ("", "1990-04-12", "display_name"),
            ("   ", "1990-04-12", "display_name"),
            (None, "1990-04-12", "display_name"),
            ("Jane", "", "birthdate"),
            ("Jane", None, "birthdate"),
        ],
    )
    def test_rejects_missing_field(self, display_name, birthdate, field):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_profile(display_name, birthdate)

        assert exc_info.value.field == field
        assert exc_info.value.error_code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.message == "Please fill in all fields."


class TestParseDuration:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(30, 30), ("30", 30), (" 45 ", 45), ("+5", 5), (1, 1)],
    )
    def test_accepts_positive_whole_minutes(self, raw, expected):
        assert parse_duration(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [0, "0", -5, "-5", "", "abc", "1.5", 1.5, None, True, False, "30 min"],
    )
    def test_rejects_everything_else(self, raw):
        with pytest.raises(ValidationFailure) as exc_info:
            parse_duration(raw)

        assert exc_info.value.field == "duration"


class TestValidateActivity:
    def test_accepts_filled_form(self):
        submission = validate_activity("Morning run", "30")

        assert submission.description == "Morning run"
        assert submission.duration == 30

    def test_description_checked_first(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_activity("", "0")

        assert exc_info.value.field == "description"

    def test_zero_duration_is_missing(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_activity("Morning run", "0")

        assert exc_info.value.field == "duration"
