"""Pytest configuration and shared fixtures."""

import itertools

import pytest
from rest_framework.test import APIClient

from factories import RecordingNotifier
from festival.models import Configuration, House, Program, User
from festival.services import AdmissionService
from festival.stores.django_config import DjangoConfigProvider
from festival.stores.django_store import DjangoRegistrationStore

_sequence = itertools.count(1)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_house(db):
    def _make(name: str | None = None, **fields) -> House:
        return House.objects.create(name=name or f"House {next(_sequence)}", **fields)

    return _make


@pytest.fixture
def make_user(db):
    def _make(house: House | None = None, role: str = User.Role.STUDENT, **fields) -> User:
        number = next(_sequence)
        return User.objects.create_user(
            username=fields.pop("username", f"student{number}"),
            password="pass1234",
            email=fields.pop("email", f"student{number}@example.com"),
            house=house,
            role=role,
            **fields,
        )

    return _make


@pytest.fixture
def make_program(db):
    def _make(
        program_type: str = Program.Type.SOLO,
        category: str = Program.Category.ON_STAGE,
        min_members: int = 1,
        max_members: int = 1,
        **fields,
    ) -> Program:
        return Program.objects.create(
            name=fields.pop("name", f"Program {next(_sequence)}"),
            type=program_type,
            category=category,
            min_members=min_members,
            max_members=max_members,
            **fields,
        )

    return _make


@pytest.fixture
def set_limits(db):
    """Write the three quota limits into the Configuration table."""

    def _set(solo: int = 5, group: int = 5, off_stage: int = 5) -> None:
        for key, value in (
            ("maxOnStageSolo", solo),
            ("maxOnStageGroup", group),
            ("maxOffStageTotal", off_stage),
        ):
            Configuration.objects.update_or_create(key=key, defaults={"value": str(value)})

    return _set


@pytest.fixture
def house(make_house) -> House:
    return make_house("Red House")


@pytest.fixture
def other_house(make_house) -> House:
    return make_house("Blue House")


@pytest.fixture
def student(make_user, house) -> User:
    return make_user(house=house)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(db, notifier) -> AdmissionService:
    return AdmissionService(DjangoRegistrationStore(), DjangoConfigProvider(), notifier)
