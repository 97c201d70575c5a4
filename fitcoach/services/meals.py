"""Meal selection and daily diet plan generation."""

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from fitcoach.models.diet_plan import DietPlan, MealPlan
from fitcoach.models.user_profile import UserProfile
from fitcoach.services.calories import estimate_target_calories, round_half_up

logger = logging.getLogger(__name__)


class MealSlot(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


# Share of the daily calorie target given to each slot
SLOT_CALORIE_SHARES = {
    MealSlot.BREAKFAST: 0.25,
    MealSlot.LUNCH: 0.35,
    MealSlot.DINNER: 0.30,
    MealSlot.SNACK: 0.10,
}


@dataclass(frozen=True)
class MealTemplate:
    name: str
    base_calories: int
    protein: int
    carbs: int
    fat: int
    ingredients: Tuple[str, ...]
    instructions: str
    alternatives: Tuple[str, ...]


MEAL_CATALOG: Dict[MealSlot, Tuple[MealTemplate, ...]] = {
    MealSlot.BREAKFAST: (
        MealTemplate(
            name="Protein Packed Oatmeal Bowl",
            base_calories=350,
            protein=20,
            carbs=45,
            fat=8,
            ingredients=("Rolled oats", "Greek yogurt", "Banana", "Berries", "Almonds", "Honey"),
            instructions=(
                "Cook oats with water, top with Greek yogurt, sliced banana, berries, "
                "and chopped almonds. Drizzle with honey."
            ),
            alternatives=("Quinoa breakfast bowl", "Chia pudding with fruits", "Protein smoothie bowl"),
        ),
        MealTemplate(
            name="Veggie Scrambled Eggs",
            base_calories=280,
            protein=18,
            carbs=12,
            fat=16,
            ingredients=("Eggs", "Spinach", "Tomatoes", "Bell peppers", "Cheese", "Olive oil"),
            instructions="Scramble eggs with sautéed vegetables and a sprinkle of cheese.",
            alternatives=("Veggie omelet", "Breakfast burrito", "Avocado toast with egg"),
        ),
    ),
    MealSlot.LUNCH: (
        MealTemplate(
            name="Grilled Chicken Salad Bowl",
            base_calories=450,
            protein=35,
            carbs=25,
            fat=22,
            ingredients=(
                "Chicken breast", "Mixed greens", "Quinoa", "Avocado", "Cherry tomatoes",
                "Olive oil dressing",
            ),
            instructions="Grill chicken breast, serve over mixed greens with quinoa, avocado, and tomatoes.",
            alternatives=("Salmon quinoa bowl", "Turkey and hummus wrap", "Mediterranean bowl"),
        ),
        MealTemplate(
            name="Lentil Power Bowl",
            base_calories=420,
            protein=18,
            carbs=55,
            fat=12,
            ingredients=("Red lentils", "Sweet potato", "Kale", "Tahini", "Pumpkin seeds", "Lemon"),
            instructions="Cook lentils and roasted sweet potato, serve with massaged kale and tahini dressing.",
            alternatives=("Chickpea curry bowl", "Black bean burrito bowl", "Tofu stir-fry bowl"),
        ),
    ),
    MealSlot.DINNER: (
        MealTemplate(
            name="Baked Salmon with Vegetables",
            base_calories=520,
            protein=40,
            carbs=30,
            fat=25,
            ingredients=("Salmon fillet", "Broccoli", "Sweet potato", "Asparagus", "Lemon", "Herbs"),
            instructions="Bake salmon with roasted vegetables, season with lemon and herbs.",
            alternatives=(
                "Grilled chicken with quinoa", "Turkey meatballs with zucchini noodles",
                "Baked cod with rice",
            ),
        ),
        MealTemplate(
            name="Lean Beef Stir-Fry",
            base_calories=480,
            protein=32,
            carbs=35,
            fat=20,
            ingredients=("Lean beef strips", "Brown rice", "Mixed vegetables", "Ginger", "Garlic", "Soy sauce"),
            instructions="Stir-fry beef with vegetables, serve over brown rice with ginger-garlic sauce.",
            alternatives=("Tofu vegetable stir-fry", "Chicken teriyaki bowl", "Shrimp fried rice"),
        ),
    ),
    MealSlot.SNACK: (
        MealTemplate(
            name="Greek Yogurt with Berries",
            base_calories=150,
            protein=12,
            carbs=18,
            fat=4,
            ingredients=("Greek yogurt", "Mixed berries", "Granola", "Honey"),
            instructions="Top Greek yogurt with berries and a small amount of granola.",
            alternatives=("Apple with almond butter", "Protein smoothie", "Nuts and dried fruit"),
        ),
        MealTemplate(
            name="Hummus and Veggies",
            base_calories=120,
            protein=5,
            carbs=15,
            fat=6,
            ingredients=("Hummus", "Cucumber", "Carrots", "Bell peppers", "Cherry tomatoes"),
            instructions="Slice vegetables and serve with hummus for dipping.",
            alternatives=("Cottage cheese with fruit", "Trail mix", "Protein bar"),
        ),
    ),
}


def _resolve_slot(slot) -> MealSlot:
    try:
        return MealSlot(slot)
    except ValueError:
        logger.warning(f"Unknown meal slot {slot!r}, using snack catalog")
        return MealSlot.SNACK


def select_meal(
    slot,
    calorie_budget: float,
    profile: Optional[UserProfile] = None,
    rng: Optional[random.Random] = None,
) -> MealPlan:
    """
    Pick a template for the slot and scale its macros to the calorie budget.

    Args:
        slot: MealSlot or its string value; unknown slots use the snack catalog
        calorie_budget: Calories this meal should provide
        profile: Owner profile (accepted for future personalization)
        rng: Random source used for the template choice

    Returns:
        MealPlan reporting the budget as its calories
    """
    rng = rng or random.Random()
    template = rng.choice(MEAL_CATALOG[_resolve_slot(slot)])
    ratio = calorie_budget / template.base_calories

    return MealPlan(
        name=template.name,
        calories=round_half_up(calorie_budget),
        protein=round_half_up(template.protein * ratio),
        carbs=round_half_up(template.carbs * ratio),
        fat=round_half_up(template.fat * ratio),
        ingredients=list(template.ingredients),
        instructions=template.instructions,
        alternatives=list(template.alternatives),
    )


def generate_diet_plan(profile: UserProfile, rng: Optional[random.Random] = None) -> DietPlan:
    """Build a full day of meals around the profile's calorie target."""
    rng = rng or random.Random()
    target = estimate_target_calories(profile)

    def meal(slot: MealSlot) -> MealPlan:
        return select_meal(slot, target * SLOT_CALORIE_SHARES[slot], profile, rng)

    now = datetime.now()
    plan = DietPlan(
        plan_id=str(uuid.uuid4()),
        user_id=profile.uid,
        date=now,
        breakfast=meal(MealSlot.BREAKFAST),
        lunch=meal(MealSlot.LUNCH),
        dinner=meal(MealSlot.DINNER),
        snacks=[meal(MealSlot.SNACK)],
        total_calories=target,
        created_at=now,
    )
    logger.info(f"Generated diet plan {plan.plan_id} for {profile.uid}: {target} kcal")
    return plan
