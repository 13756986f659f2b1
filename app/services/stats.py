"""Workout statistics: totals, streaks, period counts and progress series.

Everything here is a pure function of the sessions passed in (plus ``now`` and
the zone that defines "calendar day"), so results can be recomputed at any
time and by several callers at once. Nothing is cached.

Two weight metrics are kept apart on purpose:

* total weight  = sum of set weights (``WorkoutTotals.total_weight``)
* volume        = sum of weight x reps (``session_volume``, progress series)
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo

from app.core.constants import EXERCISE_PROGRESS_SESSION_LIMIT, PROGRESS_WINDOW_DAYS
from app.schemas.stats import ExerciseProgress, ProgressDataPoint, WorkoutStats, WorkoutTotals
from app.schemas.workout import WorkoutExercise, WorkoutSession


def calendar_day(moment: datetime, tz: tzinfo = timezone.utc) -> date:
    """Local calendar date of an instant (naive datetimes are taken as UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def workout_days(sessions: Iterable[WorkoutSession], tz: tzinfo = timezone.utc) -> set[date]:
    return {calendar_day(s.start_time, tz) for s in sessions}


def session_sets(session: WorkoutSession) -> int:
    return sum(len(e.sets) for e in session.exercises)


def session_reps(session: WorkoutSession) -> int:
    return sum(s.reps for e in session.exercises for s in e.sets)


def session_weight(session: WorkoutSession) -> float:
    """Raw sum of set weights (not multiplied by reps)."""
    return sum(s.weight or 0 for e in session.exercises for s in e.sets)


def session_volume(session: WorkoutSession) -> float:
    """Sum of weight x reps over every set."""
    return sum(e.volume for e in session.exercises)


# ── Totals ───────────────────────────────────────────────────────────────


def compute_totals(sessions: Iterable[WorkoutSession]) -> WorkoutTotals:
    sessions = list(sessions)
    return WorkoutTotals(
        total_workouts=len(sessions),
        total_workout_time=sum(s.total_duration or 0 for s in sessions),
        total_sets=sum(session_sets(s) for s in sessions),
        total_reps=sum(session_reps(s) for s in sessions),
        total_weight=sum(session_weight(s) for s in sessions),
    )


# ── Streaks ──────────────────────────────────────────────────────────────


def calculate_streak(
    sessions: Iterable[WorkoutSession], today: date, tz: tzinfo = timezone.utc
) -> int:
    """Current streak as reported to users.

    The walk starts at today (or yesterday if today has no workout), seeds the
    count at 1, then adds 1 for every workout day reached walking backwards
    from the day before the seed. The seed day is therefore counted once by
    the seed and the reported value is ``count - 1``: three consecutive days
    ending today report 2. Historical values depend on this, keep it.
    """
    days = workout_days(sessions, tz)
    one_day = timedelta(days=1)
    if today in days:
        current = today - one_day
    elif today - one_day in days:
        current = today - 2 * one_day
    else:
        return 0

    streak = 1
    while current in days:
        streak += 1
        current -= one_day
    return max(0, streak - 1)


def calculate_longest_streak(sessions: Iterable[WorkoutSession], tz: tzinfo = timezone.utc) -> int:
    """Longest run of consecutive workout days ever (no adjustment)."""
    days = sorted(workout_days(sessions, tz))
    if not days:
        return 0
    longest = run = 1
    for prev, cur in zip(days, days[1:]):
        if cur - prev == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


# ── Calendar periods ─────────────────────────────────────────────────────


def start_of_week(day: date, first_weekday: int = 0) -> date:
    """First day of the calendar week containing ``day`` (0 = Monday)."""
    return day - timedelta(days=(day.weekday() - first_weekday) % 7)


def workouts_this_week(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: tzinfo = timezone.utc,
    first_weekday: int = 0,
) -> int:
    week_start = start_of_week(calendar_day(now, tz), first_weekday)
    return sum(1 for s in sessions if calendar_day(s.start_time, tz) >= week_start)


def workouts_this_month(
    sessions: Iterable[WorkoutSession], now: datetime, tz: tzinfo = timezone.utc
) -> int:
    month_start = calendar_day(now, tz).replace(day=1)
    return sum(1 for s in sessions if calendar_day(s.start_time, tz) >= month_start)


# ── Progress series ──────────────────────────────────────────────────────


def volume_progress(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: tzinfo = timezone.utc,
    window_days: int = PROGRESS_WINDOW_DAYS,
) -> list[ProgressDataPoint]:
    """Per-day volume/sets/reps/duration for the trailing window.

    Only days with at least one session appear; no zero-filled gaps.
    """
    cutoff = now - timedelta(days=window_days)
    buckets: dict[date, dict[str, float]] = {}
    for session in sessions:
        if session.start_time < cutoff:
            continue
        bucket = buckets.setdefault(
            calendar_day(session.start_time, tz),
            {"volume": 0.0, "sets": 0, "reps": 0, "duration": 0.0},
        )
        bucket["volume"] += session_volume(session)
        bucket["sets"] += session_sets(session)
        bucket["reps"] += session_reps(session)
        bucket["duration"] += session.total_duration or 0

    return [
        ProgressDataPoint(
            date=day,
            total_volume=b["volume"],
            total_sets=int(b["sets"]),
            total_reps=int(b["reps"]),
            workout_duration=b["duration"],
        )
        for day, b in sorted(buckets.items())
    ]


def _exercise_progress_point(session: WorkoutSession, exercise: WorkoutExercise) -> ExerciseProgress:
    weights = [s.weight for s in exercise.sets if s.weight is not None]
    return ExerciseProgress(
        date=session.start_time,
        max_weight=max(weights, default=0.0),
        total_volume=exercise.volume,
        total_reps=sum(s.reps for s in exercise.sets),
        sets_completed=len(exercise.sets),
    )


def exercise_progress(
    sessions: Iterable[WorkoutSession], limit: int = EXERCISE_PROGRESS_SESSION_LIMIT
) -> dict[str, list[ExerciseProgress]]:
    """Per-exercise series over the most recent ``limit`` sessions.

    Grouped by the exercise *name* snapshotted into the session, oldest first.
    """
    recent = sorted(sessions, key=lambda s: s.start_time, reverse=True)[:limit]
    progress: dict[str, list[ExerciseProgress]] = {}
    for session in recent:
        for exercise in session.exercises:
            progress.setdefault(exercise.name, []).append(_exercise_progress_point(session, exercise))
    return {name: sorted(points, key=lambda p: p.date) for name, points in progress.items()}


# ── Everything at once ───────────────────────────────────────────────────


def compute_stats(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: tzinfo = timezone.utc,
    first_weekday: int = 0,
) -> WorkoutStats:
    """Full stats for finished sessions; active sessions are ignored."""
    finished = [s for s in sessions if not s.is_active]
    totals = compute_totals(finished)
    days = workout_days(finished, tz)
    return WorkoutStats(
        totals=totals,
        workout_streak=calculate_streak(finished, calendar_day(now, tz), tz),
        longest_streak=calculate_longest_streak(finished, tz),
        last_workout_date=max(days) if days else None,
        workouts_this_week=workouts_this_week(finished, now, tz, first_weekday),
        workouts_this_month=workouts_this_month(finished, now, tz),
        average_workout_duration=totals.average_workout_duration,
        average_sets_per_workout=totals.average_sets_per_workout,
        average_reps_per_set=totals.average_reps_per_set,
        progress_data=volume_progress(finished, now, tz),
        exercise_progress=exercise_progress(finished),
    )


def format_duration(seconds: float) -> str:
    """``"1h 5m"`` from one hour up, otherwise ``"5m"``."""
    total = int(seconds)
    hours, minutes = total // 3600, total // 60 % 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
