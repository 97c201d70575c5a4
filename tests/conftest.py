"""Shared fixtures."""

import pytest

from fitcoach.memory.kv_store import MemoryKeyValueStore
from fitcoach.models.user_profile import UserProfile


class FirstChoice:
    """Random source that always picks the first option."""

    def choice(self, seq):
        return seq[0]


class LastChoice:
    def choice(self, seq):
        return seq[-1]


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def first_choice():
    return FirstChoice()


@pytest.fixture
def last_choice():
    return LastChoice()


@pytest.fixture
def make_profile():
    def _make(**overrides):
        data = {
            "uid": "user-1",
            "email": "alex@example.com",
            "name": "Alex",
            "age": 30,
            "gender": "male",
            "height": 180,
            "weight": 80,
            "fitness_goal": "maintenance",
            "activity_level": "moderate",
        }
        data.update(overrides)
        return UserProfile(**data)

    return _make
