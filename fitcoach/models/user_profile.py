"""User profile data model."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

PROFILE_REQUIRED_FIELDS = (
    "name",
    "age",
    "height",
    "weight",
    "fitness_goal",
    "activity_level",
)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class FitnessGoal(str, Enum):
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"
    ENDURANCE = "endurance"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


class UserProfile(BaseModel):
    """User profile with body stats, fitness goal and activity level."""

    uid: str = Field(..., description="Account id from the identity provider")
    email: Optional[str] = Field(None, description="Account email")
    name: Optional[str] = Field(None, description="Display name")
    age: Optional[int] = Field(None, ge=13, le=120, description="Age in years")
    gender: Optional[Gender] = Field(None, description="male, female or other")
    height: Optional[float] = Field(None, ge=100, le=250, description="Height in cm")
    weight: Optional[float] = Field(None, ge=30, le=300, description="Weight in kg")
    fitness_goal: Optional[FitnessGoal] = Field(
        None, description="weight_loss, muscle_gain, maintenance or endurance"
    )
    activity_level: Optional[ActivityLevel] = Field(
        None,
        description="sedentary, light, moderate, very_active or extra_active",
    )
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator(
        "name", "age", "gender", "height", "weight", "fitness_goal", "activity_level",
        mode="before",
    )
    @classmethod
    def _empty_as_missing(cls, value: Any) -> Any:
        # Blank documents and untouched form fields store "" for unset values
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def blank(cls, uid: str, email: Optional[str] = None) -> "UserProfile":
        """Empty profile created on an account's first sign-in."""
        return cls(uid=uid, email=email)

    def is_complete(self) -> bool:
        """True when every field plan generation depends on is filled in."""
        return all(getattr(self, field) not in (None, "") for field in PROFILE_REQUIRED_FIELDS)

    def missing_fields(self) -> list[str]:
        return [field for field in PROFILE_REQUIRED_FIELDS if getattr(self, field) in (None, "")]

    @property
    def goal_label(self) -> Optional[str]:
        if self.fitness_goal is None:
            return None
        return self.fitness_goal.value.replace("_", " ")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    class Config:
        json_schema_extra = {
            "example": {
                "uid": "3f6c1f0e-5a8e-4d61-9a53-0d7c4f1e2b90",
                "email": "user@example.com",
                "name": "Alex",
                "age": 30,
                "gender": "male",
                "height": 180,
                "weight": 80,
                "fitness_goal": "maintenance",
                "activity_level": "moderate",
            }
        }
