"""Step-by-step progress tracking for a ritual session."""

import logging
import time
from collections.abc import Callable, Sequence

from ritual_coach.domain.models import RitualStep, StepStatus
from ritual_coach.domain.progress import RitualProgressState, TimeStats
from ritual_coach.services.storage import RitualStorage

_logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000
MAX_EFFICIENCY = 100.0


def wall_clock_ms() -> int:
    """Return the current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class RitualProgressTracker:
    """Navigable completion state over a fixed, ordered list of steps.

    Today's stored record is the source of truth when the tracker is built;
    afterwards the tracker keeps its own copy and writes every change back
    through the storage adapter. A ``current_step_index`` equal to the step
    count means there is no active step.
    """

    def __init__(
        self,
        steps: Sequence[RitualStep],
        storage: RitualStorage,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self._steps = list(steps)
        self._storage = storage
        self._clock = clock
        self._start_time: int | None = None
        self._state = self._initial_state()
        self._load_todays_progress()

    def _initial_state(self) -> RitualProgressState:
        return RitualProgressState(
            current_step_index=0,
            completed_steps=set(),
            is_completed=False,
            total_steps=len(self._steps),
            estimated_time_remaining=self._total_estimated_minutes(),
            actual_time_spent=0,
        )

    def _load_todays_progress(self) -> None:
        todays = self._storage.get_todays_progress()
        if todays is None:
            return
        # Today's record is shared across flows; keep only this flow's steps.
        step_ids = {step.id for step in self._steps}
        self._state.completed_steps = set(todays.completed_steps) & step_ids
        self._state.is_completed = todays.is_completed
        if todays.is_completed:
            self._state.current_step_index = len(self._steps)
        else:
            self._update_current_step_index()
        self._update_estimated_time()

    def start_ritual(self) -> None:
        self._start_time = self._clock()
        self._storage.start_ritual()

    def mark_step_completed(self, step_id: str) -> bool:
        """Complete a step; returns False when it was already complete."""
        if step_id in self._state.completed_steps:
            return False

        self._state.completed_steps.add(step_id)
        self._storage.mark_step_completed(step_id)
        self._update_current_step_index()
        self._update_estimated_time()
        self._update_actual_time_spent()

        if not self._state.is_completed and self._all_steps_completed():
            self._complete_ritual()
        return True

    def mark_step_incomplete(self, step_id: str) -> bool:
        """Undo a step; returns False when it was not complete."""
        if step_id not in self._state.completed_steps:
            return False

        self._state.completed_steps.discard(step_id)
        self._storage.mark_step_incomplete(step_id)
        self._state.is_completed = False
        self._update_current_step_index()
        self._update_estimated_time()
        return True

    def go_to_next_step(self) -> bool:
        if self._state.current_step_index < len(self._steps) - 1:
            self._state.current_step_index += 1
            return True
        return False

    def go_to_previous_step(self) -> bool:
        if self._state.current_step_index > 0:
            self._state.current_step_index -= 1
            return True
        return False

    def go_to_step(self, step_index: int) -> bool:
        if 0 <= step_index < len(self._steps):
            self._state.current_step_index = step_index
            return True
        return False

    def get_current_step(self) -> RitualStep | None:
        return self.get_step_by_index(self._state.current_step_index)

    def get_step_by_index(self, index: int) -> RitualStep | None:
        if 0 <= index < len(self._steps):
            return self._steps[index]
        return None

    def get_step_by_id(self, step_id: str) -> RitualStep | None:
        for step in self._steps:
            if step.id == step_id:
                return step
        return None

    def is_step_completed(self, step_id: str) -> bool:
        return step_id in self._state.completed_steps

    def is_step_active(self, step_id: str) -> bool:
        current = self.get_current_step()
        return current is not None and current.id == step_id

    def get_step_progress(self, step_id: str) -> StepStatus:
        if self.is_step_completed(step_id):
            return "completed"
        if self.is_step_active(step_id):
            return "active"
        return "pending"

    def get_progress(self) -> float:
        """Completed fraction of the ritual; an empty ritual counts as done."""
        if not self._steps:
            return 1.0
        return len(self._state.completed_steps) / len(self._steps)

    def get_progress_percentage(self) -> int:
        return round(self.get_progress() * 100)

    def get_state(self) -> RitualProgressState:
        """Return a copy of the session state."""
        return RitualProgressState(
            current_step_index=self._state.current_step_index,
            completed_steps=set(self._state.completed_steps),
            is_completed=self._state.is_completed,
            total_steps=self._state.total_steps,
            estimated_time_remaining=self._state.estimated_time_remaining,
            actual_time_spent=self._state.actual_time_spent,
        )

    def get_all_steps(self) -> list[RitualStep]:
        return list(self._steps)

    def get_completed_steps_count(self) -> int:
        return len(self._state.completed_steps)

    def get_remaining_steps_count(self) -> int:
        return len(self._steps) - len(self._state.completed_steps)

    def get_time_stats(self) -> TimeStats:
        """Return estimated, remaining and spent minutes plus efficiency.

        Efficiency is spent time as a percentage of the estimate, capped at
        100; a zero estimate reads as 100.
        """
        estimated = self._total_estimated_minutes()
        spent = self._state.actual_time_spent
        if estimated > 0:
            efficiency = min(MAX_EFFICIENCY, spent / estimated * 100)
        else:
            efficiency = MAX_EFFICIENCY
        return TimeStats(
            estimated=estimated,
            remaining=self._state.estimated_time_remaining,
            spent=spent,
            efficiency=efficiency,
        )

    def reset_progress(self) -> None:
        """Clear in-memory progress; stored records are left untouched."""
        self._state = self._initial_state()
        self._start_time = None

    def _all_steps_completed(self) -> bool:
        return all(step.id in self._state.completed_steps for step in self._steps)

    def _total_estimated_minutes(self) -> int:
        return sum(step.estimated_minutes for step in self._steps)

    def _update_current_step_index(self) -> None:
        for index, step in enumerate(self._steps):
            if step.id not in self._state.completed_steps:
                self._state.current_step_index = index
                return
        self._state.current_step_index = len(self._steps)

    def _update_estimated_time(self) -> None:
        remaining = 0
        for step in self._steps[self._state.current_step_index :]:
            if step.id not in self._state.completed_steps:
                remaining += step.estimated_minutes
        self._state.estimated_time_remaining = remaining

    def _update_actual_time_spent(self) -> None:
        if self._start_time is not None:
            self._state.actual_time_spent = (
                self._clock() - self._start_time
            ) // MS_PER_MINUTE

    def _complete_ritual(self) -> None:
        self._state.is_completed = True
        self._state.current_step_index = len(self._steps)
        self._state.estimated_time_remaining = 0
        self._update_actual_time_spent()
        _logger.info("All %s ritual steps completed", len(self._steps))
        self._storage.mark_ritual_completed(
            len(self._steps), self._state.actual_time_spent
        )
