"""Workout plan data models."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PlanDuration = Literal[3, 5, 7]


class WorkoutLocation(str, Enum):
    HOME = "home"
    GYM = "gym"


class Exercise(BaseModel):
    """Single exercise with parameters."""

    name: str = Field(..., description="Exercise name")
    sets: int = Field(..., ge=1, description="Number of sets")
    reps: str = Field(
        ..., description="Reps per set, e.g. '10-15', '12 each leg' or '30 seconds'"
    )
    rest_time: str = Field(..., description="Rest between sets, e.g. '60 seconds'")
    description: str = Field(default="", description="What the exercise does")
    muscle_groups: List[str] = Field(default_factory=list)
    calories_burned: Optional[int] = Field(None, ge=0, description="Approximate kcal per set")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Push-ups",
                "sets": 3,
                "reps": "10-15",
                "rest_time": "60 seconds",
                "description": "Classic bodyweight exercise for chest, shoulders, and triceps",
                "muscle_groups": ["chest", "shoulders", "triceps"],
                "calories_burned": 7,
            }
        }


class WorkoutPlan(BaseModel):
    """Workout plan for a user."""

    plan_id: str = Field(..., description="Unique plan ID (UUID)")
    user_id: str = Field(..., description="Owning account id")
    workout_type: WorkoutLocation = Field(..., description="home or gym")
    duration_days: PlanDuration = Field(..., description="Plan length in days: 3, 5 or 7")
    exercises: List[Exercise] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_sets(self) -> int:
        return sum(exercise.sets for exercise in self.exercises)

    class Config:
        json_schema_extra = {
            "example": {
                "plan_id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "3f6c1f0e-5a8e-4d61-9a53-0d7c4f1e2b90",
                "workout_type": "home",
                "duration_days": 3,
                "exercises": [
                    {
                        "name": "Push-ups",
                        "sets": 3,
                        "reps": "10-15",
                        "rest_time": "60 seconds",
                    }
                ],
            }
        }
