"""Tests for meal selection and diet plans."""

import random

import pytest

from fitcoach.services.calories import estimate_target_calories
from fitcoach.services.meals import (
    MEAL_CATALOG,
    SLOT_CALORIE_SHARES,
    MealSlot,
    generate_diet_plan,
    select_meal,
)


def test_select_meal_scales_macros(make_profile, first_choice):
    """Oatmeal bowl (350 kcal, 20/45/8) doubled."""
    meal = select_meal("breakfast", 700, make_profile(), first_choice)

    assert meal.name == "Protein Packed Oatmeal Bowl"
    assert meal.calories == 700
    assert (meal.protein, meal.carbs, meal.fat) == (40, 90, 16)


def test_select_meal_rounds_half_up(make_profile, first_choice):
    meal = select_meal(MealSlot.BREAKFAST, 525, make_profile(), first_choice)

    # ratio 1.5: carbs 67.5 -> 68
    assert (meal.protein, meal.carbs, meal.fat) == (30, 68, 12)


def test_select_meal_reports_budget_verbatim(make_profile, last_choice):
    meal = select_meal("snack", 199.6, make_profile(), last_choice)

    assert meal.name == "Hummus and Veggies"
    assert meal.calories == 200


def test_select_meal_copies_template_text(make_profile, last_choice):
    template = MEAL_CATALOG[MealSlot.DINNER][-1]
    meal = select_meal("dinner", 1000, make_profile(), last_choice)

    assert meal.ingredients == list(template.ingredients)
    assert meal.instructions == template.instructions
    assert meal.alternatives == list(template.alternatives)


def test_unknown_slot_uses_snack_catalog(make_profile, first_choice):
    meal = select_meal("brunch", 150, make_profile(), first_choice)

    assert meal.name == MEAL_CATALOG[MealSlot.SNACK][0].name


def test_select_meal_picks_from_slot_catalog(make_profile):
    rng = random.Random(7)
    names = {template.name for template in MEAL_CATALOG[MealSlot.LUNCH]}

    for _ in range(20):
        assert select_meal("lunch", 600, make_profile(), rng).name in names


def test_diet_plan_total_matches_target(make_profile):
    profile = make_profile(fitness_goal="weight_loss")
    plan = generate_diet_plan(profile, random.Random(1))

    assert plan.total_calories == estimate_target_calories(profile)
    assert plan.user_id == profile.uid
    assert len(plan.snacks) == 1


def test_diet_plan_splits_budget(make_profile, first_choice):
    profile = make_profile(weight=None)  # flat 2000 kcal
    plan = generate_diet_plan(profile, first_choice)

    assert plan.total_calories == 2000
    assert plan.breakfast.calories == 500
    assert plan.lunch.calories == 700
    assert plan.dinner.calories == 600
    assert plan.snacks[0].calories == 200
    assert sum(SLOT_CALORIE_SHARES.values()) == pytest.approx(1.0)


def test_diet_plans_get_fresh_ids(make_profile, first_choice):
    profile = make_profile()

    assert generate_diet_plan(profile, first_choice).plan_id != generate_diet_plan(profile, first_choice).plan_id
