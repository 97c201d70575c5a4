"""Diet plans, workout plans and progress entries stored as per-kind arrays."""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from fitcoach.memory.kv_store import KeyValueStore, StorageKeys
from fitcoach.models.diet_plan import DietPlan
from fitcoach.models.progress import ProgressEntry
from fitcoach.models.workout_plan import WorkoutPlan
from fitcoach.services.progress import sort_entries

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class PlanRepository:
    """
    Collections are whole JSON arrays under fixed keys, shared by all users
    and filtered by user_id on read.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _load_records(self, key: str) -> List[Dict[str, Any]]:
        records = self.store.get(key)
        if not isinstance(records, list):
            return []
        return [record for record in records if isinstance(record, dict)]

    def _parse(self, model: Type[ModelT], record: Dict[str, Any]) -> Optional[ModelT]:
        try:
            return model(**record)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable {model.__name__} record: {e.error_count()} errors")
            return None

    def _find_for_user(self, key: str, model: Type[ModelT], user_id: str) -> Optional[ModelT]:
        for record in self._load_records(key):
            if record.get("user_id") == user_id:
                return self._parse(model, record)
        return None

    def _replace_for_user(self, key: str, item: BaseModel, user_id: str) -> None:
        with self.store.lock:
            records = [r for r in self._load_records(key) if r.get("user_id") != user_id]
            records.append(item.model_dump(mode="json"))
            self.store.set(key, records)

    def save_diet_plan(self, plan: DietPlan) -> None:
        """Store plan as the user's only diet plan."""
        self._replace_for_user(StorageKeys.DIET_PLANS, plan, plan.user_id)
        logger.info(f"Saved diet plan {plan.plan_id} for {plan.user_id}")

    def get_diet_plan(self, user_id: str) -> Optional[DietPlan]:
        return self._find_for_user(StorageKeys.DIET_PLANS, DietPlan, user_id)

    def save_workout_plan(self, plan: WorkoutPlan) -> None:
        """Store plan as the user's only workout plan, whatever its type or length."""
        self._replace_for_user(StorageKeys.WORKOUT_PLANS, plan, plan.user_id)
        logger.info(f"Saved workout plan {plan.plan_id} for {plan.user_id}")

    def get_workout_plan(self, user_id: str) -> Optional[WorkoutPlan]:
        return self._find_for_user(StorageKeys.WORKOUT_PLANS, WorkoutPlan, user_id)

    def add_progress_entry(self, entry: ProgressEntry) -> None:
        with self.store.lock:
            records = self._load_records(StorageKeys.PROGRESS_ENTRIES)
            records.append(entry.model_dump(mode="json"))
            self.store.set(StorageKeys.PROGRESS_ENTRIES, records)
        logger.info(f"Logged {entry.weight} kg for {entry.user_id}")

    def list_progress_entries(self, user_id: str) -> List[ProgressEntry]:
        """User's entries ordered by date ascending."""
        entries = []
        for record in self._load_records(StorageKeys.PROGRESS_ENTRIES):
            if record.get("user_id") != user_id:
                continue
            entry = self._parse(ProgressEntry, record)
            if entry is not None:
                entries.append(entry)
        return sort_entries(entries)
