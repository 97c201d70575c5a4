"""Application state: signed-in account, profile and plan actions."""

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from fitcoach.errors import (
    NotAuthenticatedError,
    PasswordMismatchError,
    ProfileIncompleteError,
)
from fitcoach.memory.plan_repository import PlanRepository
from fitcoach.memory.profile_store import ProfileStore
from fitcoach.models.diet_plan import DietPlan
from fitcoach.models.progress import ProgressEntry, ProgressSummary
from fitcoach.models.tip import MotivationalTip
from fitcoach.models.user_profile import UserProfile
from fitcoach.models.workout_plan import WorkoutPlan
from fitcoach.services.meals import generate_diet_plan
from fitcoach.services.progress import summarize_progress
from fitcoach.services.tips import generate_tip
from fitcoach.services.workouts import generate_workout_plan
from fitcoach.utils.identity import Account, IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything known about the current browser session."""

    account: Optional[Account] = None
    profile: Optional[UserProfile] = None
    tip: Optional[MotivationalTip] = None

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None


class AppController:
    """Connects UI actions to the identity provider, stores and plan engine."""

    def __init__(
        self,
        identity: IdentityProvider,
        profiles: ProfileStore,
        plans: PlanRepository,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.identity = identity
        self.profiles = profiles
        self.plans = plans
        self.rng = rng or random.Random()
        self.session = Session()
        self._unsubscribe = identity.subscribe(self._on_auth_change)

    def _on_auth_change(self, account: Optional[Account]) -> None:
        if account is None:
            self.session = Session()
        else:
            profile = self.profiles.get_or_create(account.uid, account.email)
            self.session = Session(
                account=account,
                profile=profile,
                tip=generate_tip(profile, self.rng),
            )
            logger.info(
                f"Session started for {account.email} "
                f"(profile {'complete' if profile.is_complete() else 'incomplete'})"
            )

    def close(self) -> None:
        self._unsubscribe()

    def _require_account(self, action: str) -> Account:
        if self.session.account is None:
            raise NotAuthenticatedError(action)
        return self.session.account

    def _require_complete_profile(self, action: str) -> UserProfile:
        self._require_account(action)
        profile = self.session.profile
        if profile is None or not profile.is_complete():
            missing = profile.missing_fields() if profile else ["profile"]
            raise ProfileIncompleteError(missing)
        return profile

    # Authentication

    def sign_up(self, email: str, password: str, confirm_password: str) -> Account:
        if password != confirm_password:
            raise PasswordMismatchError()
        return self.identity.sign_up(email, password)

    def sign_in(self, email: str, password: str) -> Account:
        return self.identity.sign_in(email, password)

    def sign_out(self) -> None:
        self.identity.sign_out()

    # Profile

    def update_profile(self, updates: Dict[str, Any]) -> UserProfile:
        """Merge form values into the stored profile."""
        account = self._require_account("a profile update")
        profile = self.profiles.set_profile(account.uid, updates, merge=True)
        self.session.profile = profile
        return profile

    def is_profile_complete(self) -> bool:
        return self.session.profile is not None and self.session.profile.is_complete()

    # Plans

    def generate_diet_plan(self) -> DietPlan:
        profile = self._require_complete_profile("diet plan generation")
        plan = generate_diet_plan(profile, self.rng)
        self.plans.save_diet_plan(plan)
        return plan

    def generate_workout_plan(self, location: str, duration_days: int) -> WorkoutPlan:
        profile = self._require_complete_profile("workout plan generation")
        plan = generate_workout_plan(profile, location, duration_days)
        self.plans.save_workout_plan(plan)
        return plan

    def current_diet_plan(self) -> Optional[DietPlan]:
        account = self._require_account("loading plans")
        return self.plans.get_diet_plan(account.uid)

    def current_workout_plan(self) -> Optional[WorkoutPlan]:
        account = self._require_account("loading plans")
        return self.plans.get_workout_plan(account.uid)

    def refresh_tip(self) -> MotivationalTip:
        self._require_account("tips")
        profile = self.session.profile
        self.session.tip = generate_tip(profile, self.rng)
        return self.session.tip

    # Progress

    def log_progress(self, weight: float, notes: Optional[str] = None) -> ProgressEntry:
        account = self._require_account("progress logging")
        entry = ProgressEntry(
            entry_id=str(uuid.uuid4()),
            user_id=account.uid,
            weight=weight,
            date=datetime.now(),
            notes=notes or None,
        )
        self.plans.add_progress_entry(entry)
        return entry

    def progress_entries(self) -> List[ProgressEntry]:
        account = self._require_account("loading progress")
        return self.plans.list_progress_entries(account.uid)

    def progress_summary(self) -> ProgressSummary:
        account = self._require_account("loading progress")
        profile = self.session.profile or UserProfile.blank(account.uid, account.email)
        return summarize_progress(self.plans.list_progress_entries(account.uid), profile)
