"""Activity record domain entities."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.server_value import ServerTimestamp


class ActivityDocument(BaseModel):
    """Validated shape of a stored activity document.

    Strict: a stored ``"30"`` is not a duration, and ``True`` is not a
    timestamp. Unknown keys are ignored.
    """

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    description: str = Field(min_length=1)
    duration: int = Field(gt=0)
    timestamp: int
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)


@dataclass(frozen=True)
class ActivityRecord:
    """An immutable activity stored at ``activities/{uid}/{id}``."""

    id: str
    description: str
    duration: int
    timestamp: int
    date: str
    time: str

    @classmethod
    def decode(cls, key: str, raw: Any) -> "ActivityRecord":
        """Build a record from a store key and its raw fields.

        Raises:
            pydantic.ValidationError: if the fields do not form a valid record.
        """
        document = ActivityDocument.model_validate(raw)
        return cls(id=key, **document.model_dump())


@dataclass(frozen=True)
class ActivityDraft:
    """Fields written for a new activity; the store resolves ``timestamp``."""

    description: str
    duration: int
    date: str
    time: str
    timestamp: int | ServerTimestamp
