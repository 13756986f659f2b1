"""Tests for workout history and the stats loader."""

from datetime import timedelta

import pytest

from app.services.history import StatsLoader, WorkoutHistory

from tests.conftest import T0, USER_ID, FailingStore, make_session

pytestmark = pytest.mark.asyncio


async def _seed(store, *sessions):
    for session in sessions:
        await store.put_session(USER_ID, session)


async def test_history_newest_first_and_limited(store):
    await _seed(store, *(make_session(T0 - timedelta(days=n)) for n in range(5)))
    history = WorkoutHistory(USER_ID, store, limit=3)

    workouts = await history.load_history()

    assert [w.start_time for w in workouts] == [T0, T0 - timedelta(days=1), T0 - timedelta(days=2)]
    assert history.error_message is None


async def test_history_excludes_active_sessions(store):
    active = make_session(T0).model_copy(update={"is_active": True})
    finished = make_session(T0 - timedelta(days=1))
    await _seed(store, active, finished)

    workouts = await WorkoutHistory(USER_ID, store).load_history()

    assert [w.id for w in workouts] == [finished.id]


async def test_history_is_per_user(store):
    await _seed(store, make_session(T0))
    await store.put_session("someone-else", make_session(T0, user_id="someone-else"))

    assert len(await WorkoutHistory(USER_ID, store).load_history()) == 1


async def test_delete_workout(store):
    keep, gone = make_session(T0), make_session(T0 - timedelta(days=1))
    await _seed(store, keep, gone)
    history = WorkoutHistory(USER_ID, store)
    await history.load_history()

    assert await history.delete_workout(gone.id) is True

    assert [w.id for w in history.workouts] == [keep.id]
    assert [w.id for w in await history.refresh()] == [keep.id]


async def test_failed_delete_keeps_local_list():
    failing = FailingStore()
    session = make_session(T0)
    await failing.put_session(USER_ID, session)
    history = WorkoutHistory(USER_ID, failing)
    await history.load_history()
    failing.fail_writes = True

    assert await history.delete_workout(session.id) is False

    assert [w.id for w in history.workouts] == [session.id]
    assert history.error_message.startswith("Failed to delete workout")


async def test_failed_load_sets_error():
    history = WorkoutHistory(USER_ID, FailingStore(fail_reads=True))

    assert await history.load_history() == []
    assert history.error_message.startswith("Failed to load workout history")


async def test_get_workout_finds_sessions_past_the_history_limit(store):
    sessions = [make_session(T0 - timedelta(days=n)) for n in range(60)]
    await _seed(store, *sessions)
    history = WorkoutHistory(USER_ID, store)

    oldest = await history.get_workout(sessions[-1].id)

    assert oldest.id == sessions[-1].id
    assert sessions[-1].id not in {w.id for w in await history.load_history()}


async def test_get_workout_skips_active_and_unknown(store):
    active = make_session(T0).model_copy(update={"is_active": True})
    await _seed(store, active)
    history = WorkoutHistory(USER_ID, store)

    assert await history.get_workout(active.id) is None
    assert await history.get_workout("missing") is None
    assert history.error_message is None


async def test_failed_get_workout_sets_error():
    history = WorkoutHistory(USER_ID, FailingStore(fail_reads=True))

    assert await history.get_workout("w1") is None
    assert history.error_message.startswith("Failed to load workout")


async def test_stats_loader_computes_from_store(store):
    await _seed(
        store,
        make_session(T0, sets=[(10, 100.0)]),
        make_session(T0 - timedelta(days=1), sets=[(5, 50.0)]),
        make_session(T0 - timedelta(days=2)),
    )

    stats = await StatsLoader(USER_ID, store).load_stats(now=T0)

    assert stats.totals.total_workouts == 3
    assert stats.totals.total_weight == 150
    assert stats.workout_streak == 2
    assert stats.workouts_this_week == 3


async def test_stats_loader_failure_yields_empty_stats():
    loader = StatsLoader(USER_ID, FailingStore(fail_reads=True))

    stats = await loader.load_stats(now=T0)

    assert stats.totals.total_workouts == 0
    assert loader.error_message.startswith("Failed to load workout data")
