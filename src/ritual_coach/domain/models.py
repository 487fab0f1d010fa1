"""Domain models for ritual definitions and user profiles."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ritual_coach.domain.progress import SCHEMA_VERSION

Tradition = Literal["andhra_smarta", "vaishnava"]
Region = Literal["south", "north"]
Language = Literal["te", "hi", "en"]
StepStatus = Literal["pending", "active", "completed"]

DEFAULT_STEP_MINUTES = 5


@dataclass(frozen=True)
class RitualStep:
    """A single action within an ordered ritual sequence."""

    id: str
    title: str
    description: str
    duration_minutes: int | None = None
    materials: tuple[str, ...] = ()
    mantras: tuple[str, ...] = ()

    @property
    def estimated_minutes(self) -> int:
        """Minutes used for time estimates; untimed steps count as default."""
        return self.duration_minutes or DEFAULT_STEP_MINUTES


@dataclass(frozen=True)
class TraditionFlow:
    """Named step sequence with its materials and mantras."""

    name: str
    steps: tuple[RitualStep, ...]
    materials: tuple[str, ...] = field(default_factory=tuple)
    mantras: tuple[str, ...] = field(default_factory=tuple)


class RitualProfile(BaseModel):
    """Practitioner preferences captured during onboarding."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(
        default=SCHEMA_VERSION, ge=1, le=SCHEMA_VERSION, alias="schemaVersion"
    )
    user_id: str
    tradition: Tradition
    region: Region
    language_pref: Language = "en"
    daily_time: str = "06:00"
    duration_minutes: int = 30
    dietary_rules: str = ""
    kid_mode: bool = False
