"""Motivational tips shown on the dashboard."""

import random
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from fitcoach.models.tip import MotivationalTip, TipType
from fitcoach.models.user_profile import UserProfile

FITNESS_TIPS = (
    "{name}, every workout brings you closer to your {goal} goal!",
    "Progress, not perfection. Every rep counts!",
    "Your body can do it. It's time to convince your mind.",
    "The only bad workout is the one that didn't happen.",
    "Strength doesn't come from what you can do. "
    "It comes from overcoming the things you thought you couldn't.",
)

NUTRITION_TIPS = (
    "Fuel your body with the nutrients it craves, not just what it wants.",
    "Healthy eating is a way of life, not a temporary fix.",
    "Every meal is a chance to nourish your body and support your goals.",
    "Listen to your body - it knows what it needs.",
    "Small changes in your diet can lead to big changes in your life.",
)

MINDSET_TIPS = (
    "Believe in yourself and all that you are. You are stronger than you think!",
    "Success is the sum of small efforts repeated day in and day out.",
    "Your journey is unique. Don't compare your chapter 1 to someone else's chapter 20.",
    "Consistency is key. Small daily improvements lead to staggering yearly results.",
    "The difference between try and triumph is just a little umph!",
)


def tip_catalog(profile: UserProfile) -> Dict[TipType, List[str]]:
    """Tip texts per category, personalized where a template asks for it."""
    fields = {
        "name": profile.name or "You",
        "goal": profile.goal_label or "fitness",
    }
    return {
        TipType.FITNESS: [template.format(**fields) for template in FITNESS_TIPS],
        TipType.NUTRITION: list(NUTRITION_TIPS),
        TipType.MINDSET: list(MINDSET_TIPS),
    }


def generate_tip(profile: UserProfile, rng: Optional[random.Random] = None) -> MotivationalTip:
    rng = rng or random.Random()
    catalog = tip_catalog(profile)
    tip_type = rng.choice(list(catalog))

    return MotivationalTip(
        tip_id=str(uuid.uuid4()),
        content=rng.choice(catalog[tip_type]),
        tip_type=tip_type,
        created_at=datetime.now(),
    )
