"""Progress tracking data models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ProgressEntry(BaseModel):
    """Logged body weight at a point in time."""

    entry_id: str = Field(..., description="Unique entry ID (UUID)")
    user_id: str = Field(..., description="Owning account id")
    weight: float = Field(..., description="Weight in kg")
    date: datetime = Field(default_factory=datetime.now, description="When it was logged")
    notes: Optional[str] = Field(None, description="How the user felt, free text")

    class Config:
        json_schema_extra = {
            "example": {
                "entry_id": "123e4567-e89b-12d3-a456-426614174001",
                "user_id": "3f6c1f0e-5a8e-4d61-9a53-0d7c4f1e2b90",
                "weight": 79.4,
                "date": "2025-01-15T08:00:00",
                "notes": "Feeling lighter after the first week",
            }
        }


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


class WeightTrend(BaseModel):
    direction: TrendDirection
    magnitude: float = Field(..., ge=0)


class EntryDelta(BaseModel):
    """History row: an entry and its change against the entry before it."""

    entry: ProgressEntry
    change: Optional[float] = None
    direction: Optional[TrendDirection] = None


class ProgressSummary(BaseModel):
    current_weight: float
    first_weight: float
    goal_weight: float
    kg_to_go: float
    percent: float = Field(..., ge=0, le=100)
    trend: Optional[WeightTrend] = None
    history: List[EntryDelta] = Field(default_factory=list)
