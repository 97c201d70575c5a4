"""Weight trend and goal progress calculations."""

from typing import Iterable, List, Optional, Sequence

from fitcoach.models.progress import (
    EntryDelta,
    ProgressEntry,
    ProgressSummary,
    TrendDirection,
    WeightTrend,
)
from fitcoach.models.user_profile import FitnessGoal, UserProfile

GOAL_WEIGHT_OFFSET_KG = 10.0


def sort_entries(entries: Iterable[ProgressEntry]) -> List[ProgressEntry]:
    return sorted(entries, key=lambda entry: entry.date)


def _direction(change: float) -> TrendDirection:
    if change > 0:
        return TrendDirection.UP
    if change < 0:
        return TrendDirection.DOWN
    return TrendDirection.SAME


def weight_trend(entries: Sequence[ProgressEntry]) -> Optional[WeightTrend]:
    """
    Compare the two most recent entries.

    Args:
        entries: Progress entries sorted by date ascending

    Returns:
        WeightTrend, or None with fewer than two entries
    """
    if len(entries) < 2:
        return None

    change = entries[-1].weight - entries[-2].weight
    return WeightTrend(direction=_direction(change), magnitude=abs(change))


def goal_weight(first_weight: float, goal: Optional[FitnessGoal]) -> float:
    if goal == FitnessGoal.WEIGHT_LOSS:
        return first_weight - GOAL_WEIGHT_OFFSET_KG
    if goal == FitnessGoal.MUSCLE_GAIN:
        return first_weight + GOAL_WEIGHT_OFFSET_KG
    return first_weight


def progress_percent(current: float, first: float, goal: float) -> float:
    """Share of the distance from first weight to goal weight covered, 0-100."""
    distance = abs(goal - first)
    if distance == 0:
        return 0.0
    return max(0.0, min(100.0, abs(current - first) / distance * 100))


def entry_deltas(entries: Sequence[ProgressEntry]) -> List[EntryDelta]:
    """History rows newest first, each with its change from the previous entry."""
    rows = []
    for index, entry in enumerate(entries):
        if index == 0:
            rows.append(EntryDelta(entry=entry))
            continue
        change = entry.weight - entries[index - 1].weight
        rows.append(EntryDelta(entry=entry, change=change, direction=_direction(change)))
    rows.reverse()
    return rows


def summarize_progress(
    entries: Iterable[ProgressEntry], profile: UserProfile
) -> ProgressSummary:
    ordered = sort_entries(entries)
    fallback = profile.weight or 0.0
    current = ordered[-1].weight if ordered else fallback
    first = ordered[0].weight if ordered else fallback
    target = goal_weight(first, profile.fitness_goal)

    return ProgressSummary(
        current_weight=current,
        first_weight=first,
        goal_weight=target,
        kg_to_go=abs(current - target),
        percent=progress_percent(current, first, target),
        trend=weight_trend(ordered),
        history=entry_deltas(ordered),
    )
