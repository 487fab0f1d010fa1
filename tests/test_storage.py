"""Tests for the ritual storage adapter."""

import json

import pytest

from ritual_coach.domain.models import RitualProfile
from ritual_coach.domain.progress import CorruptRecordError, DailyRitualState
from ritual_coach.services.kv_store import InMemoryKeyValueStore
from ritual_coach.services.storage import RitualStorage
from tests.conftest import FixedClock


def _profile() -> RitualProfile:
    return RitualProfile(
        user_id="test-user",
        tradition="andhra_smarta",
        region="south",
        language_pref="en",
        daily_time="06:30",
        duration_minutes=30,
        dietary_rules="sattvic",
        kid_mode=False,
    )


def test_profile_round_trip(storage: RitualStorage, store: InMemoryKeyValueStore) -> None:
    storage.save_profile(_profile())

    assert storage.get_profile() == _profile()
    assert json.loads(store.get("ritual-coach-profile"))["user_id"] == "test-user"


def test_missing_records_are_none(storage: RitualStorage) -> None:
    assert storage.get_profile() is None
    assert storage.get_daily_progress("2024-01-01") is None
    assert storage.get_todays_progress() is None


def test_daily_progress_uses_dated_key(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    progress = DailyRitualState(date="2023-12-30", completed_steps=["1", "2"])

    storage.save_daily_progress(progress)

    assert storage.get_daily_progress("2023-12-30") == progress
    raw = json.loads(store.get("ritual-coach-progress-2023-12-30"))
    assert raw["completedSteps"] == ["1", "2"]
    assert raw["isCompleted"] is False
    assert raw["schemaVersion"] == 1


def test_todays_progress_follows_clock(storage: RitualStorage, clock: FixedClock) -> None:
    storage.save_daily_progress(DailyRitualState(date="2024-01-01", completed_steps=["1"]))

    assert storage.get_todays_progress().completed_steps == ["1"]
    clock.advance(days=1)
    assert storage.get_todays_progress() is None


def test_mark_step_completed_is_idempotent(storage: RitualStorage) -> None:
    storage.mark_step_completed("step1")
    storage.mark_step_completed("step1")

    assert storage.get_todays_progress().completed_steps == ["step1"]


def test_mark_step_completed_for_explicit_date(storage: RitualStorage) -> None:
    storage.mark_step_completed("step1", "2023-12-25")

    assert storage.get_daily_progress("2023-12-25").completed_steps == ["step1"]
    assert storage.get_todays_progress() is None


def test_mark_step_incomplete_clears_completion(storage: RitualStorage) -> None:
    storage.mark_step_completed("step1")
    storage.mark_step_completed("step2")
    storage.mark_ritual_completed(2)

    storage.mark_step_incomplete("step1")

    progress = storage.get_todays_progress()
    assert progress.completed_steps == ["step2"]
    assert progress.is_completed is False


def test_mark_step_incomplete_without_record_is_noop(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    storage.mark_step_incomplete("step1")

    assert store.list_keys("ritual-coach-") == []


def test_mark_ritual_completed_records_duration(
    storage: RitualStorage, clock: FixedClock
) -> None:
    storage.mark_ritual_completed(5, 25)

    progress = storage.get_todays_progress()
    assert progress.is_completed is True
    assert progress.total_duration == 25
    assert progress.end_time == int(clock.now.timestamp() * 1000)
    assert storage.get_streak().current == 1


def test_mark_ritual_completed_skips_zero_duration(storage: RitualStorage) -> None:
    storage.mark_ritual_completed(5, 0)

    assert storage.get_todays_progress().total_duration is None


def test_start_ritual_records_start_time(storage: RitualStorage, clock: FixedClock) -> None:
    storage.start_ritual()

    progress = storage.get_todays_progress()
    assert progress.start_time == int(clock.now.timestamp() * 1000)
    assert progress.completed_steps == []


def test_streak_defaults_to_zero(storage: RitualStorage) -> None:
    streak = storage.get_streak()

    assert (streak.current, streak.longest, streak.last_completion_date) == (0, 0, None)


def test_streak_continues_and_breaks(storage: RitualStorage, clock: FixedClock) -> None:
    clock.set_day(2024, 1, 1)
    storage.mark_ritual_completed(3)
    streak = storage.get_streak()
    assert (streak.current, streak.longest, streak.last_completion_date) == (
        1,
        1,
        "2024-01-01",
    )

    clock.set_day(2024, 1, 2)
    storage.mark_ritual_completed(3)
    streak = storage.get_streak()
    assert (streak.current, streak.longest) == (2, 2)

    clock.set_day(2024, 1, 5)
    storage.mark_ritual_completed(3)
    streak = storage.get_streak()
    assert (streak.current, streak.longest, streak.last_completion_date) == (
        1,
        2,
        "2024-01-05",
    )


def test_streak_same_day_is_idempotent(storage: RitualStorage) -> None:
    storage.mark_ritual_completed(3)
    storage.mark_ritual_completed(3)
    storage.update_streak()

    streak = storage.get_streak()
    assert (streak.current, streak.longest) == (1, 1)


def test_streak_longest_never_below_current(
    storage: RitualStorage, clock: FixedClock
) -> None:
    pattern = [1, 1, 1, 3, 1, 1, 1, 1, 2, 1]
    for gap in pattern:
        clock.advance(days=gap)
        storage.update_streak()
        streak = storage.get_streak()
        assert streak.longest >= streak.current

    assert storage.get_streak().longest == 5


def test_weekly_progress_has_seven_days_oldest_first(
    storage: RitualStorage, clock: FixedClock
) -> None:
    clock.set_day(2024, 3, 10)
    storage.save_daily_progress(DailyRitualState(date="2024-03-10", is_completed=True))
    storage.save_daily_progress(DailyRitualState(date="2024-03-09", is_completed=True))

    week = storage.get_weekly_progress()

    assert [day.date for day in week] == [
        "2024-03-04",
        "2024-03-05",
        "2024-03-06",
        "2024-03-07",
        "2024-03-08",
        "2024-03-09",
        "2024-03-10",
    ]
    assert [day.is_completed for day in week].count(True) == 2
    assert week[0].completed_steps == []


def test_monthly_stats_counts_completed_days(
    storage: RitualStorage, clock: FixedClock
) -> None:
    clock.set_day(2024, 3, 10)
    for day in ("2024-03-01", "2024-03-05", "2024-03-10"):
        storage.save_daily_progress(DailyRitualState(date=day, is_completed=True))
    storage.save_daily_progress(DailyRitualState(date="2024-02-29", is_completed=True))
    storage.save_daily_progress(DailyRitualState(date="2024-03-06", completed_steps=["1"]))

    stats = storage.get_monthly_stats()

    assert stats.completed_days == 3
    assert stats.total_days == 10
    assert stats.completion_rate == pytest.approx(30.0)


def test_monthly_stats_on_first_of_month(storage: RitualStorage, clock: FixedClock) -> None:
    clock.set_day(2024, 4, 1)

    stats = storage.get_monthly_stats()

    assert (stats.completed_days, stats.total_days, stats.completion_rate) == (0, 1, 0.0)


def test_clear_all_progress_removes_everything(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    storage.save_profile(_profile())
    storage.mark_step_completed("step1")
    storage.mark_ritual_completed(1)
    store.set("ritual-coach-last-completion", "2024-01-01")
    store.set("unrelated", "keep")

    storage.clear_all_progress()

    assert storage.get_profile() is None
    assert storage.get_todays_progress() is None
    assert storage.get_streak().current == 0
    assert store.list_keys("ritual-coach-") == []
    assert store.get("unrelated") == "keep"


def test_export_progress_contains_namespaced_keys(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    storage.save_profile(_profile())
    storage.mark_step_completed("step1")
    store.set("unrelated", "skip")

    data = json.loads(storage.export_progress())

    assert set(data) == {"ritual-coach-profile", "ritual-coach-progress-2024-01-01"}
    assert json.loads(data["ritual-coach-profile"])["tradition"] == "andhra_smarta"


def test_corrupt_daily_record_raises(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    store.set("ritual-coach-progress-2024-01-01", "{not json")

    with pytest.raises(CorruptRecordError) as excinfo:
        storage.get_todays_progress()

    assert excinfo.value.key == "ritual-coach-progress-2024-01-01"


def test_corrupt_streak_falls_back_to_default(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    store.set("ritual-coach-streak", '{"current": "many"}')

    assert storage.get_streak().current == 0
    storage.update_streak()
    assert storage.get_streak().current == 1


def test_corrupt_day_is_skipped_in_analytics(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    store.set("ritual-coach-progress-2024-01-01", "[]")

    week = storage.get_weekly_progress()

    assert week[-1].date == "2024-01-01"
    assert week[-1].is_completed is False


def test_record_without_schema_version_decodes(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    store.set(
        "ritual-coach-progress-2024-01-01",
        json.dumps(
            {"date": "2024-01-01", "completedSteps": ["1"], "isCompleted": True}
        ),
    )

    progress = storage.get_todays_progress()

    assert progress.schema_version == 1
    assert progress.is_completed is True


def test_newer_schema_version_is_rejected(
    storage: RitualStorage, store: InMemoryKeyValueStore
) -> None:
    store.set(
        "ritual-coach-progress-2024-01-01",
        json.dumps({"schemaVersion": 99, "date": "2024-01-01"}),
    )

    with pytest.raises(CorruptRecordError):
        storage.get_todays_progress()
