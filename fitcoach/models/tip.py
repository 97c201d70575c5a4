"""Motivational tip model."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TipType(str, Enum):
    FITNESS = "fitness"
    NUTRITION = "nutrition"
    MINDSET = "mindset"


class MotivationalTip(BaseModel):
    tip_id: str = Field(..., description="Unique tip ID (UUID)")
    content: str
    tip_type: TipType
    created_at: datetime = Field(default_factory=datetime.now)
