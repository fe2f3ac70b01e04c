"""Result service - records grades for performed registrations."""

import logging

from festival.domain import Grade, Outcome, Registration, RegistrationId
from festival.domain.errors import NotFoundError
from festival.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)


class ResultService:
    """Service for grading registrations and listing recent results."""

    def __init__(self, store: RegistrationStore) -> None:
        self._store = store

    def set_grade(
        self, registration_id: RegistrationId, grade: Grade | None
    ) -> Outcome[Registration]:
        """Overwrite the grade of a registration; ``None`` clears it.

        A group registration holds one grade for the whole team. Attendance is
        not checked here: scoring ignores registrations nobody attended.
        """
        registration = self._store.set_grade(registration_id, grade)
        if registration is None:
            return Outcome.failure(NotFoundError("registration", registration_id.value))
        logger.info(
            "Grade recorded: registration=%s grade=%s",
            registration_id.value,
            grade.value if grade else None,
        )
        return Outcome.success(registration)

    def recent_results(self, limit: int = 10) -> list[Registration]:
        """Return the latest podium-grade results, most recently graded first."""
        return self._store.recent_results(limit)
