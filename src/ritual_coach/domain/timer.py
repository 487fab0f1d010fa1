"""Domain models for the ritual countdown timer."""

from dataclasses import dataclass


@dataclass
class TimerState:
    """Snapshot of a countdown timer; times are in milliseconds."""

    is_running: bool
    is_paused: bool
    elapsed_time: int
    start_time: int | None
    paused_at: int | None
    duration: int
