"""Tests for key-value stores, the plan repository and profile documents."""

import random
import threading
import time
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from fitcoach.errors import StorageError
from fitcoach.memory.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore, StorageKeys
from fitcoach.memory.plan_repository import PlanRepository
from fitcoach.memory.profile_store import ProfileStore, clean_profile_data
from fitcoach.models.progress import ProgressEntry
from fitcoach.services.meals import generate_diet_plan
from fitcoach.services.workouts import generate_workout_plan


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryKeyValueStore()
    return JsonFileKeyValueStore(str(tmp_path / "data"))


def test_store_get_set_remove_clear(any_store):
    assert any_store.get("missing") is None

    any_store.set("a", {"x": [1, 2, 3]})
    any_store.set("b", "text")
    assert any_store.get("a") == {"x": [1, 2, 3]}

    any_store.remove("a")
    any_store.remove("a")
    assert any_store.get("a") is None
    assert any_store.get("b") == "text"

    any_store.clear()
    assert any_store.get("b") is None


def test_store_returns_copies(any_store):
    any_store.set("list", [1])
    any_store.get("list").append(2)

    assert any_store.get("list") == [1]


def test_store_rejects_non_json_values(any_store):
    with pytest.raises(StorageError):
        any_store.set("bad", object())


def test_file_store_persists_between_instances(tmp_path):
    JsonFileKeyValueStore(str(tmp_path)).set("k", {"v": 1})

    assert JsonFileKeyValueStore(str(tmp_path)).get("k") == {"v": 1}


def test_file_store_reports_corrupt_file(tmp_path):
    (tmp_path / JsonFileKeyValueStore.FILENAME).write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileKeyValueStore(str(tmp_path)).get("k")


def test_diet_plan_round_trip(any_store, make_profile):
    repo = PlanRepository(any_store)
    plan = generate_diet_plan(make_profile(), random.Random(3))

    repo.save_diet_plan(plan)

    assert repo.get_diet_plan(plan.user_id) == plan


def test_workout_plan_round_trip(any_store, make_profile):
    repo = PlanRepository(any_store)
    plan = generate_workout_plan(make_profile(fitness_goal="muscle_gain"), "gym", 5)

    repo.save_workout_plan(plan)

    assert repo.get_workout_plan(plan.user_id) == plan


def test_new_plan_replaces_previous_for_same_user(store, make_profile):
    repo = PlanRepository(store)
    alex = make_profile(uid="alex")
    sam = make_profile(uid="sam")

    repo.save_workout_plan(generate_workout_plan(sam, "home", 3))
    repo.save_workout_plan(generate_workout_plan(alex, "home", 3))
    latest = generate_workout_plan(alex, "gym", 7)
    repo.save_workout_plan(latest)

    assert repo.get_workout_plan("alex") == latest
    assert repo.get_workout_plan("sam").workout_type.value == "home"
    assert len(store.get(StorageKeys.WORKOUT_PLANS)) == 2


def test_diet_plan_replacement(store, make_profile):
    repo = PlanRepository(store)
    profile = make_profile()
    repo.save_diet_plan(generate_diet_plan(profile))
    second = generate_diet_plan(profile)
    repo.save_diet_plan(second)

    assert repo.get_diet_plan(profile.uid).plan_id == second.plan_id
    assert len(store.get(StorageKeys.DIET_PLANS)) == 1


def test_missing_plans(store):
    repo = PlanRepository(store)

    assert repo.get_diet_plan("nobody") is None
    assert repo.get_workout_plan("nobody") is None
    assert repo.list_progress_entries("nobody") == []


def test_progress_entries_round_trip_sorted_and_filtered(any_store):
    repo = PlanRepository(any_store)
    start = datetime(2025, 3, 1, 7, 30)
    later = ProgressEntry(entry_id="b", user_id="u1", weight=79.2, date=start + timedelta(days=7))
    earlier = ProgressEntry(entry_id="a", user_id="u1", weight=80.0, date=start, notes="Day one")
    other = ProgressEntry(entry_id="c", user_id="u2", weight=60.0, date=start)

    for entry in (later, other, earlier):
        repo.add_progress_entry(entry)

    assert repo.list_progress_entries("u1") == [earlier, later]


def test_unreadable_records_are_skipped(store):
    store.set(StorageKeys.PROGRESS_ENTRIES, [{"user_id": "u1", "weight": "heavy"}, "junk"])

    assert PlanRepository(store).list_progress_entries("u1") == []


def test_clean_profile_data():
    assert clean_profile_data({"name": "", "age": None, "weight": 70, "gender": "male"}) == {
        "weight": 70,
        "gender": "male",
    }


def test_profile_created_blank_on_first_load(store):
    profiles = ProfileStore(store)

    profile = profiles.get_or_create("u1", "u1@example.com")

    assert profile.uid == "u1"
    assert not profile.is_complete()
    assert store.get(StorageKeys.profile("u1"))["email"] == "u1@example.com"
    assert profiles.get_or_create("u1").email == "u1@example.com"


def test_profile_merge_keeps_existing_fields(store):
    profiles = ProfileStore(store)
    profiles.set_profile("u1", {"name": "Alex", "age": 30})

    merged = profiles.set_profile("u1", {"weight": 80, "name": ""})

    assert merged.name == "Alex"
    assert merged.age == 30
    assert merged.weight == 80
    assert profiles.get_profile("u1") == merged


def test_profile_replace_without_merge(store):
    profiles = ProfileStore(store)
    profiles.set_profile("u1", {"name": "Alex", "age": 30})

    replaced = profiles.set_profile("u1", {"name": "Sam"}, merge=False)

    assert replaced.name == "Sam"
    assert replaced.age is None


def test_profile_rejects_out_of_range_values(store):
    profiles = ProfileStore(store)

    with pytest.raises(ValidationError):
        profiles.set_profile("u1", {"age": 5})
    assert profiles.get_profile("u1") is None


class SlowMemoryStore(MemoryKeyValueStore):
    """Widens the gap between reading a collection and writing it back."""

    def get(self, key):
        value = super().get(key)
        time.sleep(0.005)
        return value


def test_parallel_progress_entries_are_all_kept():
    store = SlowMemoryStore()
    repo = PlanRepository(store)
    start = datetime(2025, 3, 1)

    def log(i):
        repo.add_progress_entry(
            ProgressEntry(entry_id=f"e{i}", user_id=f"u{i % 3}", weight=70 + i, date=start)
        )

    threads = [threading.Thread(target=log, args=(i,)) for i in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store.get(StorageKeys.PROGRESS_ENTRIES)) == 10


def test_parallel_plan_saves_keep_every_user(make_profile):
    store = SlowMemoryStore()
    repo = PlanRepository(store)
    profiles = [make_profile(uid=f"u{i}") for i in range(6)]

    threads = [
        threading.Thread(target=repo.save_workout_plan, args=(generate_workout_plan(p, "home", 3),))
        for p in profiles
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(repo.get_workout_plan(p.uid) is not None for p in profiles)
