"""Persistence adapter for ritual profile, daily progress and streaks."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from ritual_coach.domain.models import RitualProfile
from ritual_coach.domain.progress import (
    CorruptRecordError,
    DailyRitualState,
    MonthlyStats,
    RecordT,
    RitualStreak,
    decode_record,
    encode_record,
)
from ritual_coach.services.kv_store import KeyValueStore

_logger = logging.getLogger(__name__)

KEY_NAMESPACE = "ritual-coach-"
PROFILE_KEY = "ritual-coach-profile"
PROGRESS_KEY = "ritual-coach-progress"
STREAK_KEY = "ritual-coach-streak"
LAST_COMPLETION_KEY = "ritual-coach-last-completion"
KEY_PREFIXES = (PROFILE_KEY, PROGRESS_KEY, STREAK_KEY, LAST_COMPLETION_KEY)
WEEK_DAYS = 7

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)


def zoned_clock(timezone_name: str) -> Clock:
    """Return a clock reading the current time in the given timezone."""
    tz = ZoneInfo(timezone_name)

    def now() -> datetime:
        return datetime.now(tz=tz)

    return now


@dataclass
class RitualStorage:
    """Typed records and analytics over an injected key-value store.

    "Today" is the calendar date of ``clock()``. Missing records are a normal
    empty state and come back as ``None``; records that fail to decode raise
    :class:`CorruptRecordError` from the single-record getters.
    """

    store: KeyValueStore
    clock: Clock = utc_now

    def today(self) -> str:
        """Return today's ISO date."""
        return self.clock().date().isoformat()

    def save_profile(self, profile: RitualProfile) -> None:
        """Overwrite the stored profile."""
        self.store.set(PROFILE_KEY, encode_record(profile))

    def get_profile(self) -> RitualProfile | None:
        """Return the stored profile, if any."""
        return self._read(PROFILE_KEY, RitualProfile)

    def save_daily_progress(self, progress: DailyRitualState) -> None:
        """Overwrite the record for the progress date."""
        self.store.set(_progress_key(progress.date), encode_record(progress))

    def get_daily_progress(self, day: str) -> DailyRitualState | None:
        """Return the record for an ISO date, if any."""
        return self._read(_progress_key(day), DailyRitualState)

    def get_todays_progress(self) -> DailyRitualState | None:
        """Return today's record, if any."""
        return self.get_daily_progress(self.today())

    def mark_step_completed(self, step_id: str, day: str | None = None) -> None:
        """Add a step to the day's completed set; repeat calls are no-ops."""
        target = day or self.today()
        progress = self.get_daily_progress(target) or DailyRitualState(date=target)
        if step_id not in progress.completed_steps:
            progress.completed_steps.append(step_id)
        self.save_daily_progress(progress)

    def mark_step_incomplete(self, step_id: str, day: str | None = None) -> None:
        """Remove a step from the day's completed set and clear completion."""
        target = day or self.today()
        progress = self.get_daily_progress(target)
        if progress is None:
            return
        progress.completed_steps = [
            completed for completed in progress.completed_steps if completed != step_id
        ]
        progress.is_completed = False
        self.save_daily_progress(progress)

    def mark_ritual_completed(
        self, total_steps: int, duration: int | None = None
    ) -> None:
        """Flag today's ritual as complete and update the streak."""
        target = self.today()
        progress = self.get_daily_progress(target) or DailyRitualState(date=target)
        progress.is_completed = True
        progress.end_time = self._now_ms()
        if duration:
            progress.total_duration = duration
        self.save_daily_progress(progress)
        _logger.info(
            "Ritual completed: date=%s steps=%s duration=%s",
            target,
            total_steps,
            duration,
        )
        self.update_streak()

    def start_ritual(self) -> None:
        """Record the start time on today's record."""
        target = self.today()
        progress = self.get_daily_progress(target) or DailyRitualState(date=target)
        progress.start_time = self._now_ms()
        self.save_daily_progress(progress)

    def update_streak(self) -> RitualStreak:
        """Advance the streak for today; a second call on the same day is a no-op."""
        today = self.clock().date()
        streak = self.get_streak()
        last_completion = streak.last_completion_date
        if last_completion == today.isoformat():
            return streak

        yesterday = (today - timedelta(days=1)).isoformat()
        current = streak.current + 1 if last_completion == yesterday else 1
        updated = RitualStreak(
            current=current,
            longest=max(current, streak.longest),
            last_completion_date=today.isoformat(),
        )
        self.store.set(STREAK_KEY, encode_record(updated))
        _logger.info(
            "Streak updated: current=%s longest=%s", updated.current, updated.longest
        )
        return updated

    def get_streak(self) -> RitualStreak:
        """Return the stored streak or an empty one."""
        raw = self.store.get(STREAK_KEY)
        if raw is None:
            return RitualStreak()
        result = decode_record(raw, RitualStreak)
        if result.value is None:
            _logger.warning("Ignoring corrupt streak record: %s", result.error)
            return RitualStreak()
        return result.value

    def get_weekly_progress(self) -> list[DailyRitualState]:
        """Return the last seven days of progress, oldest first."""
        today = self.clock().date()
        return [
            self._scan_day(today - timedelta(days=offset))
            for offset in range(WEEK_DAYS - 1, -1, -1)
        ]

    def get_monthly_stats(self) -> MonthlyStats:
        """Return completion counts from the first of the month through today."""
        today = self.clock().date()
        first_day = today.replace(day=1)
        total_days = today.day
        completed_days = 0
        for offset in range(total_days):
            if self._scan_day(first_day + timedelta(days=offset)).is_completed:
                completed_days += 1
        return MonthlyStats(
            completed_days=completed_days,
            total_days=total_days,
            completion_rate=(
                completed_days / total_days * 100 if total_days > 0 else 0.0
            ),
        )

    def clear_all_progress(self) -> None:
        """Remove every stored ritual record."""
        removed = 0
        for prefix in KEY_PREFIXES:
            for key in self.store.list_keys(prefix):
                self.store.remove(key)
                removed += 1
        _logger.info("Cleared ritual progress: keys=%s", removed)

    def export_progress(self) -> str:
        """Return every stored ritual record as a JSON object of raw values."""
        data: dict[str, str] = {}
        for key in self.store.list_keys(KEY_NAMESPACE):
            value = self.store.get(key)
            if value:
                data[key] = value
        return json.dumps(data, indent=2)

    def _scan_day(self, day: date) -> DailyRitualState:
        key = _progress_key(day.isoformat())
        raw = self.store.get(key)
        if raw is not None:
            result = decode_record(raw, DailyRitualState)
            if result.value is not None:
                return result.value
            _logger.warning("Skipping corrupt progress record %s: %s", key, result.error)
        return DailyRitualState(date=day.isoformat())

    def _read(self, key: str, model: type[RecordT]) -> RecordT | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        result = decode_record(raw, model)
        if result.value is None:
            raise CorruptRecordError(key, result.error or "unknown error")
        return result.value

    def _now_ms(self) -> int:
        return int(self.clock().timestamp() * 1000)


def _progress_key(day: str) -> str:
    return f"{PROGRESS_KEY}-{day}"
