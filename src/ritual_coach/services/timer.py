"""Countdown timer for timed ritual steps."""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Protocol

from ritual_coach.domain.timer import TimerState

_logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 0.1
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MINUTES_PER_HOUR = 60


def monotonic_ms() -> int:
    """Return a monotonic timestamp in milliseconds."""
    return int(time.monotonic() * MS_PER_SECOND)


class TimerListener(Protocol):
    """Receives timer lifecycle events."""

    def on_tick(self, state: TimerState) -> None:
        """Called after every tick with a copy of the timer state."""

    def on_complete(self) -> None:
        """Called once when the target duration is reached."""

    def on_start(self) -> None:
        """Called when the timer starts."""

    def on_pause(self) -> None:
        """Called when the timer pauses."""

    def on_resume(self) -> None:
        """Called when the timer resumes."""

    def on_reset(self) -> None:
        """Called when the timer resets."""


class BaseTimerListener(TimerListener):
    """Listener with no-op handlers, for subclasses that need only a few."""

    def on_tick(self, state: TimerState) -> None:
        return None

    def on_complete(self) -> None:
        return None

    def on_start(self) -> None:
        return None

    def on_pause(self) -> None:
        return None

    def on_resume(self) -> None:
        return None

    def on_reset(self) -> None:
        return None


class RitualTimer:
    """Start/pause/resume/reset countdown driven by a periodic tick.

    With ``auto_tick`` enabled the timer schedules its own tick task on the
    running event loop; otherwise the owner polls :meth:`tick`.
    """

    def __init__(  # noqa: PLR0913
        self,
        duration_minutes: float,
        listeners: Iterable[TimerListener] = (),
        *,
        clock: Callable[[], int] = monotonic_ms,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        auto_tick: bool = True,
    ) -> None:
        self._state = TimerState(
            is_running=False,
            is_paused=False,
            elapsed_time=0,
            start_time=None,
            paused_at=None,
            duration=int(duration_minutes * MS_PER_MINUTE),
        )
        self._listeners = list(listeners)
        self._clock = clock
        self._tick_interval = tick_interval
        self._auto_tick = auto_tick
        self._task: asyncio.Task[None] | None = None

    def subscribe(self, listener: TimerListener) -> None:
        """Register another listener."""
        self._listeners.append(listener)

    def start(self) -> None:
        if self._state.is_running:
            return
        loop = self._tick_loop()
        self._state.is_running = True
        self._state.is_paused = False
        self._state.start_time = self._clock() - self._state.elapsed_time
        self._notify("on_start")
        self._start_ticking(loop)

    def pause(self) -> None:
        if not self._state.is_running or self._state.is_paused:
            return
        self._state.is_paused = True
        self._state.paused_at = self._clock()
        self._stop_ticking()
        self._notify("on_pause")

    def resume(self) -> None:
        if not self._state.is_running or not self._state.is_paused:
            return
        loop = self._tick_loop()
        now = self._clock()
        paused_for = now - (self._state.paused_at or now)
        self._state.is_paused = False
        self._state.start_time = (self._state.start_time or now) + paused_for
        self._state.paused_at = None
        self._notify("on_resume")
        self._start_ticking(loop)

    def reset(self) -> None:
        self._stop_ticking()
        self._state = TimerState(
            is_running=False,
            is_paused=False,
            elapsed_time=0,
            start_time=None,
            paused_at=None,
            duration=self._state.duration,
        )
        self._notify("on_reset")

    def stop(self) -> None:
        """Halt ticking without discarding elapsed time."""
        self._stop_ticking()
        self._state.is_running = False
        self._state.is_paused = False

    def tick(self) -> None:
        """Recompute elapsed time and complete the countdown when due."""
        if not self._state.is_running or self._state.is_paused:
            return
        now = self._clock()
        start = self._state.start_time if self._state.start_time is not None else now
        self._state.elapsed_time = now - start
        self._notify("on_tick", self.get_state())
        if self._state.elapsed_time >= self._state.duration:
            self._complete()

    def get_state(self) -> TimerState:
        return replace(self._state)

    def get_remaining_time(self) -> int:
        return max(0, self._state.duration - self._state.elapsed_time)

    def get_progress(self) -> float:
        if self._state.duration == 0:
            return 1.0
        return max(0.0, min(1.0, self._state.elapsed_time / self._state.duration))

    def get_formatted_time(self) -> str:
        return _format_clock(self.get_remaining_time())

    def get_formatted_elapsed(self) -> str:
        return _format_clock(self._state.elapsed_time)

    @staticmethod
    def format_duration(milliseconds: int) -> str:
        """Format a duration as ``45s`` or ``M:SS``."""
        total_seconds = milliseconds // MS_PER_SECOND
        minutes, seconds = divmod(total_seconds, 60)
        if minutes == 0:
            return f"{seconds}s"
        return f"{minutes}:{seconds:02d}"

    @staticmethod
    def format_minutes(minutes: int) -> str:
        """Format minutes as ``45m``, ``2h`` or ``1h 30m``."""
        if minutes < MINUTES_PER_HOUR:
            return f"{minutes}m"
        hours, remaining = divmod(minutes, MINUTES_PER_HOUR)
        if remaining == 0:
            return f"{hours}h"
        return f"{hours}h {remaining}m"

    def _complete(self) -> None:
        self._state.elapsed_time = self._state.duration
        self.stop()
        self._notify("on_complete")

    def _tick_loop(self) -> asyncio.AbstractEventLoop | None:
        """Return the loop for the tick task; raises RuntimeError outside one."""
        if not self._auto_tick:
            return None
        return asyncio.get_running_loop()

    def _start_ticking(self, loop: asyncio.AbstractEventLoop | None) -> None:
        if loop is None:
            return
        self._stop_ticking()
        self._task = loop.create_task(self._run())

    def _stop_ticking(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            running = asyncio.current_task()
        except RuntimeError:
            running = None
        # The tick task stops itself by leaving its loop.
        if task is not running:
            task.cancel()

    async def _run(self) -> None:
        # A listener may restart ticking from inside tick(); the old loop then
        # sees a newer task and exits.
        current = asyncio.current_task()
        while (
            self._task is current
            and self._state.is_running
            and not self._state.is_paused
        ):
            await asyncio.sleep(self._tick_interval)
            self.tick()

    def _notify(self, event: str, *args: object) -> None:
        for listener in list(self._listeners):
            try:
                getattr(listener, event)(*args)
            except Exception:
                _logger.exception("Timer listener failed: event=%s", event)


def _format_clock(milliseconds: int) -> str:
    minutes = milliseconds // MS_PER_MINUTE
    seconds = (milliseconds % MS_PER_MINUTE) // MS_PER_SECOND
    return f"{minutes:02d}:{seconds:02d}"
