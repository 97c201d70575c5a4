"""Workout plan generation from fixed home and gym catalogs."""

import logging
import math
import re
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from fitcoach.models.user_profile import FitnessGoal, UserProfile
from fitcoach.models.workout_plan import Exercise, WorkoutLocation, WorkoutPlan

logger = logging.getLogger(__name__)

PLAN_DURATIONS = (3, 5, 7)
WEIGHT_LOSS_REST_TIME = "45 seconds"
MUSCLE_GAIN_EXTRA_SETS = 1
MUSCLE_GAIN_EXTRA_REPS = 2

_REP_RANGE = re.compile(r"^(\d+)-(\d+)")

EXERCISE_CATALOG: Dict[WorkoutLocation, Tuple[Exercise, ...]] = {
    WorkoutLocation.HOME: (
        Exercise(
            name="Push-ups",
            sets=3,
            reps="10-15",
            rest_time="60 seconds",
            description="Classic bodyweight exercise for chest, shoulders, and triceps",
            muscle_groups=["chest", "shoulders", "triceps"],
            calories_burned=7,
        ),
        Exercise(
            name="Bodyweight Squats",
            sets=3,
            reps="15-20",
            rest_time="45 seconds",
            description="Lower body strength exercise targeting glutes and quads",
            muscle_groups=["glutes", "quadriceps", "hamstrings"],
            calories_burned=8,
        ),
        Exercise(
            name="Mountain Climbers",
            sets=3,
            reps="30 seconds",
            rest_time="30 seconds",
            description="High-intensity cardio exercise that works the entire body",
            muscle_groups=["core", "shoulders", "legs"],
            calories_burned=12,
        ),
        Exercise(
            name="Plank",
            sets=3,
            reps="30-60 seconds",
            rest_time="60 seconds",
            description="Isometric core strengthening exercise",
            muscle_groups=["core", "shoulders"],
            calories_burned=5,
        ),
        Exercise(
            name="Burpees",
            sets=3,
            reps="8-12",
            rest_time="90 seconds",
            description="Full-body explosive exercise combining squat, jump, and push-up",
            muscle_groups=["full body"],
            calories_burned=15,
        ),
        Exercise(
            name="Lunges",
            sets=3,
            reps="12 each leg",
            rest_time="60 seconds",
            description="Single-leg exercise for lower body strength and balance",
            muscle_groups=["glutes", "quadriceps", "hamstrings"],
            calories_burned=6,
        ),
    ),
    WorkoutLocation.GYM: (
        Exercise(
            name="Bench Press",
            sets=4,
            reps="8-12",
            rest_time="2-3 minutes",
            description="Compound chest exercise using barbell or dumbbells",
            muscle_groups=["chest", "shoulders", "triceps"],
            calories_burned=10,
        ),
        Exercise(
            name="Deadlifts",
            sets=4,
            reps="6-8",
            rest_time="3-4 minutes",
            description="Compound exercise targeting posterior chain muscles",
            muscle_groups=["hamstrings", "glutes", "back"],
            calories_burned=15,
        ),
        Exercise(
            name="Squats",
            sets=4,
            reps="10-12",
            rest_time="2-3 minutes",
            description="Compound lower body exercise with barbell",
            muscle_groups=["quadriceps", "glutes", "hamstrings"],
            calories_burned=12,
        ),
        Exercise(
            name="Pull-ups",
            sets=3,
            reps="6-10",
            rest_time="2 minutes",
            description="Upper body pulling exercise using body weight",
            muscle_groups=["back", "biceps"],
            calories_burned=8,
        ),
        Exercise(
            name="Overhead Press",
            sets=3,
            reps="8-12",
            rest_time="2 minutes",
            description="Shoulder and core exercise using barbell or dumbbells",
            muscle_groups=["shoulders", "triceps", "core"],
            calories_burned=9,
        ),
        Exercise(
            name="Barbell Rows",
            sets=4,
            reps="8-12",
            rest_time="2 minutes",
            description="Back strengthening exercise using barbell",
            muscle_groups=["back", "biceps"],
            calories_burned=8,
        ),
    ),
}


def _bump_rep_range(reps: str, amount: int) -> str:
    # "10-15" -> "12-17"; only the bounds are kept ("30-60 seconds" -> "32-62")
    match = _REP_RANGE.match(reps.strip())
    if not match:
        return reps
    low, high = match.groups()
    return f"{int(low) + amount}-{int(high) + amount}"


def adjust_exercise(exercise: Exercise, goal: Optional[FitnessGoal]) -> Exercise:
    """Apply the goal-specific tweak to a catalog exercise."""
    if goal == FitnessGoal.MUSCLE_GAIN:
        return exercise.model_copy(
            update={
                "sets": exercise.sets + MUSCLE_GAIN_EXTRA_SETS,
                "reps": _bump_rep_range(exercise.reps, MUSCLE_GAIN_EXTRA_REPS),
            },
            deep=True,
        )
    if goal == FitnessGoal.WEIGHT_LOSS:
        return exercise.model_copy(update={"rest_time": WEIGHT_LOSS_REST_TIME}, deep=True)
    return exercise.model_copy(deep=True)


def select_exercises(location: WorkoutLocation, duration_days: int) -> List[Exercise]:
    """Prefix of the location's catalog sized to the plan length."""
    catalog = EXERCISE_CATALOG[location]
    per_day = math.ceil(len(catalog) / duration_days)
    return list(catalog[: per_day * duration_days])


def generate_workout_plan(
    profile: UserProfile,
    location,
    duration_days: int,
) -> WorkoutPlan:
    """
    Build a workout plan for the given location and plan length.

    Args:
        profile: Owner profile; its fitness goal tweaks every exercise
        location: 'home' or 'gym'
        duration_days: Plan length in days, one of 3, 5 or 7

    Returns:
        WorkoutPlan with a fresh id

    Raises:
        ValueError: Unknown location or unsupported duration
    """
    location = WorkoutLocation(location)
    if duration_days not in PLAN_DURATIONS:
        raise ValueError(f"duration_days must be one of {PLAN_DURATIONS}, got {duration_days!r}")

    exercises = [
        adjust_exercise(exercise, profile.fitness_goal)
        for exercise in select_exercises(location, duration_days)
    ]

    plan = WorkoutPlan(
        plan_id=str(uuid.uuid4()),
        user_id=profile.uid,
        workout_type=location,
        duration_days=duration_days,
        exercises=exercises,
        created_at=datetime.now(),
    )
    logger.info(
        f"Generated {location.value} workout plan {plan.plan_id} for {profile.uid}: "
        f"{len(exercises)} exercises over {duration_days} days"
    )
    return plan
