import pytest
from datetime import datetime

from subject_rules import RuleEvaluator, Comparator, ValueResolver


class Profile:
    """Related object reached through 'profile.*' paths."""

    def __init__(self, status="active"):
        self.status = status
        self.calls = 0

    def isActive(self):
        self.calls += 1
        return self.status == "active"


class User:
    """Subject double with attributes and capabilities of every kind."""

    def __init__(
        self,
        role="guest",
        email_verified_at=None,
        age=0,
        tags=None,
        email="user@example.com",
        name="",
        profile=None,
        created_at=None
    ):
        self.role = role
        self.email_verified_at = email_verified_at
        self.age = age
        self.tags = tags or []
        self.email = email
        self.name = name
        self.profile = profile
        self.created_at = created_at or datetime(2025, 1, 1)
        self._hidden = "secret"
        self.is_staff_calls = 0

    def isStaff(self):
        self.is_staff_calls += 1
        return self.role == "staff"

    def current_profile(self):
        return self.profile

    def greet(self, other):
        return f"hello {other}"

    def explode(self):
        raise RuntimeError("boom")

    def _secret(self):
        return "hidden"

    @staticmethod
    def kind():
        return "user"

    @classmethod
    def model_name(cls):
        return cls.__name__

    @property
    def display_name(self):
        return self.name.upper()


@pytest.fixture
def make_user():
    """Factory for User subjects."""
    return User


@pytest.fixture
def make_profile():
    """Factory for Profile objects."""
    return Profile


@pytest.fixture
def evaluator():
    return RuleEvaluator()


@pytest.fixture
def comparator():
    return Comparator()


@pytest.fixture
def resolver():
    return ValueResolver()
