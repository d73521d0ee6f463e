"""Form submission validation.

Both checks run before anything is written; a failure names the offending
field so the view can place the message next to it.
"""

import re
from dataclasses import dataclass
from typing import Any

from core.exceptions import ValidationFailure

_DIGITS = re.compile(r"\+?\d+")


@dataclass(frozen=True)
class ProfileSubmission:
    display_name: str
    birthdate: str


@dataclass(frozen=True)
class ActivitySubmission:
    description: str
    duration: int


def _required_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailure(field)
    return value.strip()


def parse_duration(value: Any) -> int:
    """Parse a duration in whole minutes.

    Accepts an int or a string of decimal digits. Zero counts as missing.

    Raises:
        ValidationFailure: if the value is not a positive integer.
    """
    if isinstance(value, bool):
        raise ValidationFailure("duration")
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, str) and _DIGITS.fullmatch(value.strip()):
        minutes = int(value.strip())
    else:
        raise ValidationFailure("duration")

    if minutes <= 0:
        raise ValidationFailure("duration")
    return minutes


def validate_profile(display_name: Any, birthdate: Any) -> ProfileSubmission:
    return ProfileSubmission(
        display_name=_required_text(display_name, "display_name"),
        birthdate=_required_text(birthdate, "birthdate"),
    )


def validate_activity(description: Any, duration: Any) -> ActivitySubmission:
    return ActivitySubmission(
        description=_required_text(description, "description"),
        duration=parse_duration(duration),
    )
