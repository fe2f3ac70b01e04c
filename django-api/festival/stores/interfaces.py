"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from festival.domain import (
    Grade,
    House,
    HouseId,
    Member,
    Program,
    ProgramCategory,
    ProgramId,
    Registration,
    RegistrationDraft,
    RegistrationId,
    RegistrationStatus,
    UserId,
)


class RegistrationStore(ABC):
    """Interface for festival persistence operations."""

    @abstractmethod
    def get_member(self, user_id: UserId) -> Member | None:
        """Return a user's identity and house, or None if not found."""
        ...

    @abstractmethod
    def get_members(self, user_ids: Iterable[UserId]) -> list[Member]:
        """Return the users that exist among the given ids."""
        ...

    @abstractmethod
    def house_students(
        self,
        house_id: HouseId,
        exclude: UserId,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[Member]:
        """Return students of a house other than ``exclude``, in name order.

        ``query`` matches name or username, case-insensitively.
        """
        ...

    @abstractmethod
    def get_program(self, program_id: ProgramId) -> Program | None:
        """Return a program by ID, or None if not found."""
        ...

    @abstractmethod
    def list_programs(self, category: ProgramCategory | None = None) -> list[Program]:
        """Return active programs ordered by name, optionally by category."""
        ...

    @abstractmethod
    def active_registrations_for(self, user_id: UserId) -> list[Registration]:
        """Return non-cancelled registrations the user leads or is a member of.

        Ordered by created_at descending, each registration listed once.
        """
        ...

    @abstractmethod
    def leaders_for_program(
        self, program_id: ProgramId, user_ids: Iterable[UserId]
    ) -> set[UserId]:
        """Return which users lead a non-cancelled registration for the program."""
        ...

    @abstractmethod
    def members_for_program(
        self, program_id: ProgramId, user_ids: Iterable[UserId]
    ) -> set[UserId]:
        """Return which users are a member of a non-cancelled registration for the program."""
        ...

    @abstractmethod
    def create_registration(self, draft: RegistrationDraft) -> Registration:
        """Write a registration and its roster atomically.

        Raises:
            DuplicateRegistrationError: If an active registration for the same
                user and program was committed concurrently.
        """
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def set_grade(
        self, registration_id: RegistrationId, grade: Grade | None
    ) -> Registration | None:
        """Overwrite a registration's grade; None if the registration does not exist."""
        ...

    @abstractmethod
    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration | None:
        """Overwrite a registration's status; None if the registration does not exist."""
        ...

    @abstractmethod
    def list_houses(self) -> list[House]:
        """Return all houses ordered by name."""
        ...

    @abstractmethod
    def scorable_grades(self) -> list[tuple[HouseId, Grade | None]]:
        """Return (house, grade) for every non-cancelled registration with a present mark."""
        ...

    @abstractmethod
    def recent_results(self, limit: int) -> list[Registration]:
        """Return graded registrations (excluding participation), latest update first."""
        ...


class ConfigProvider(ABC):
    """Interface for reading festival configuration values."""

    @abstractmethod
    def get_int(self, key: str) -> int | None:
        """Return the integer stored under key, or None when absent or unparseable."""
        ...


class Notifier(ABC):
    """Interface for telling a user about a change to their registrations."""

    @abstractmethod
    def notify(self, user_id: UserId, payload: dict[str, Any]) -> None:
        """Deliver a notification; raises on delivery failure."""
        ...
