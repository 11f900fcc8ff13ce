from __future__ import annotations

import pytest
from permstore import Permission, Store, restrict


@restrict(secret=Permission.NONE, version="r", token="w", name=None)
class Profile(Store):
    """Store with a mix of declared permissions."""


class Employee(Profile):
    """Inherits all declarations of `Profile`."""


@restrict(version="rw")
class Draft(Profile):
    """Specializes a single declaration of `Profile`."""


@restrict(secret="none", version="r", uptime="r")
class Account(Store):
    """Seeds read-only and hidden fields on construction."""

    FIELDS = {"secret": "hunter2", "version": 3, "settings": {"theme": "dark"}}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0
        self._set_field("uptime", self._count_uptime)

    def _count_uptime(self):
        self.reads += 1
        return self.reads


class Admin(Account):
    """Overrides one inherited initial value."""

    FIELDS = {"version": 4}


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def profile():
    return Profile()


@pytest.fixture
def employee():
    return Employee()


@pytest.fixture
def draft():
    return Draft()


@pytest.fixture
def account():
    return Account()


@pytest.fixture
def admin():
    return Admin()
