"""Persisted progress records and their decoding."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 1

RecordT = TypeVar("RecordT", bound=BaseModel)


class _StoredRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    schema_version: int = Field(default=SCHEMA_VERSION, ge=1, le=SCHEMA_VERSION)


class DailyRitualState(_StoredRecord):
    """Progress for one calendar day, keyed by ISO date."""

    date: str
    completed_steps: list[str] = Field(default_factory=list)
    is_completed: bool = False
    start_time: int | None = None
    end_time: int | None = None
    total_duration: int | None = None


class RitualStreak(_StoredRecord):
    """Consecutive-day completion streak."""

    current: int = 0
    longest: int = 0
    last_completion_date: str | None = None


@dataclass(frozen=True)
class MonthlyStats:
    """Month-to-date completion summary."""

    completed_days: int
    total_days: int
    completion_rate: float


@dataclass(frozen=True)
class TimeStats:
    """Estimated versus actual time for a ritual session, in minutes."""

    estimated: int
    remaining: int
    spent: int
    efficiency: float


@dataclass
class RitualProgressState:
    """In-memory progress of the current ritual session."""

    current_step_index: int
    completed_steps: set[str] = field(default_factory=set)
    is_completed: bool = False
    total_steps: int = 0
    estimated_time_remaining: int = 0
    actual_time_spent: int = 0


@dataclass(frozen=True)
class DecodeResult(Generic[RecordT]):
    """Outcome of decoding a stored record: either a value or an error."""

    value: RecordT | None = None
    error: str | None = None


class CorruptRecordError(Exception):
    """Raised when a stored record cannot be decoded."""

    def __init__(self, key: str, detail: str) -> None:
        super().__init__(f"Stored record {key!r} is corrupt: {detail}")
        self.key = key
        self.detail = detail


def decode_record(raw: str, model: type[RecordT]) -> DecodeResult[RecordT]:
    """Decode JSON text into a record model without raising."""
    try:
        return DecodeResult(value=model.model_validate_json(raw))
    except ValidationError as exc:
        return DecodeResult(error=str(exc))


def encode_record(record: BaseModel) -> str:
    """Serialize a record to the JSON text stored under its key."""
    return record.model_dump_json(by_alias=True)
