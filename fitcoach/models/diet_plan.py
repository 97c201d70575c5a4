"""Diet plan data models."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class MealPlan(BaseModel):
    """Single meal scaled to a calorie budget."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Meal name")
    calories: int = Field(..., ge=0, description="Calories for this meal")
    protein: int = Field(..., ge=0, description="Protein in grams")
    carbs: int = Field(..., ge=0, description="Carbohydrates in grams")
    fat: int = Field(..., ge=0, description="Fat in grams")
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = Field(default="", description="Preparation instructions")
    alternatives: List[str] = Field(
        default_factory=list, description="Meals that can be swapped in"
    )


class DietPlan(BaseModel):
    """One day of meals for a user."""

    plan_id: str = Field(..., description="Unique plan ID (UUID)")
    user_id: str = Field(..., description="Owning account id")
    date: datetime = Field(default_factory=datetime.now, description="Plan date")
    breakfast: MealPlan
    lunch: MealPlan
    dinner: MealPlan
    snacks: List[MealPlan] = Field(..., min_length=1)
    total_calories: int = Field(..., description="Daily calorie target")
    created_at: datetime = Field(default_factory=datetime.now)

    def meals(self) -> List[MealPlan]:
        return [self.breakfast, self.lunch, self.dinner, *self.snacks]
