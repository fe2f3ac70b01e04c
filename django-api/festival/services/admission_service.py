"""Admission service - decides whether registration requests are accepted.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors (as Outcome failures)
"""

import logging
from collections.abc import Sequence

from festival.domain import (
    BatchRejection,
    BatchReport,
    Member,
    Outcome,
    Program,
    QuotaLimits,
    QuotaSummary,
    Registration,
    RegistrationDraft,
    RegistrationId,
    RegistrationRequest,
    RegistrationStatus,
    UserId,
)
from festival.domain.errors import (
    AlreadyRegisteredError,
    DomainError,
    GroupNameRequiredError,
    HouseNotAssignedError,
    LimitExceededError,
    NotFoundError,
    NothingNewError,
    NotOwnerError,
    ProgramUnavailableError,
    TypeMismatchError,
)
from festival.services.quota import count_quota, has_room, load_limits
from festival.services.roster import GroupRosterValidator
from festival.stores.interfaces import ConfigProvider, Notifier, RegistrationStore

logger = logging.getLogger(__name__)

# No separate confirmation step exists, so admission confirms directly.
ADMITTED_STATUS = RegistrationStatus.CONFIRMED

MIN_SEARCH_LENGTH = 2
MAX_SEARCH_RESULTS = 5


class AdmissionService:
    """Service for admitting, listing and cancelling registrations."""

    def __init__(
        self,
        store: RegistrationStore,
        config: ConfigProvider,
        notifier: Notifier | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._notifier = notifier
        self._roster = GroupRosterValidator(store)

    def register_single(
        self, user_id: UserId, request: RegistrationRequest
    ) -> Outcome[Registration]:
        """Admit one registration request.

        Checks run in order (house, program, type, duplicates, roster, then quota
        for the leader and each teammate) and the first failure is returned.
        """
        try:
            leader = self._require_leader(user_id)
            existing = self._store.active_registrations_for(user_id)
            limits = load_limits(self._config)
            draft = self._admit(leader, request, existing, [], limits)
            registration = self._store.create_registration(draft)
        except DomainError as exc:
            logger.info(
                "Registration rejected: user=%s program=%s reason=%s",
                user_id.value,
                request.program_id.value,
                exc,
            )
            return Outcome.failure(exc)

        logger.info(
            "Registration admitted: id=%s user=%s program=%s",
            registration.id.value,
            user_id.value,
            registration.program.id.value,
        )
        self._announce(registration)
        return Outcome.success(registration)

    def register_batch(
        self, user_id: UserId, requests: Sequence[RegistrationRequest]
    ) -> Outcome[BatchReport]:
        """Admit several requests in order, each committed on its own.

        Items already covered by an existing registration or membership (or
        by an earlier item) are skipped. Other failures reject only their item.
        Quota is consumed left to right by the items accepted so far.
        """
        try:
            leader = self._require_leader(user_id)
        except DomainError as exc:
            return Outcome.failure(exc)

        existing = self._store.active_registrations_for(user_id)
        limits = load_limits(self._config)
        accepted: list[Program] = []
        created: list[Registration] = []
        skipped = []
        rejected: list[BatchRejection] = []

        for index, request in enumerate(requests):
            try:
                draft = self._admit(leader, request, existing, accepted, limits)
                registration = self._store.create_registration(draft)
            except AlreadyRegisteredError:
                skipped.append(request.program_id)
                continue
            except DomainError as exc:
                logger.info(
                    "Batch item rejected: user=%s index=%d program=%s reason=%s",
                    user_id.value,
                    index,
                    request.program_id.value,
                    exc,
                )
                rejected.append(BatchRejection(index, request.program_id, exc))
                continue
            accepted.append(registration.program)
            created.append(registration)
            self._announce(registration)

        if not created and not rejected:
            return Outcome.failure(NothingNewError())

        logger.info(
            "Batch registration: user=%s created=%d skipped=%d rejected=%d",
            user_id.value,
            len(created),
            len(skipped),
            len(rejected),
        )
        return Outcome.success(
            BatchReport(
                created=tuple(created),
                skipped=tuple(skipped),
                rejected=tuple(rejected),
            )
        )

    def cancel(
        self, user_id: UserId, registration_id: RegistrationId
    ) -> Outcome[Registration]:
        """Cancel a registration led by the user. Rows are never deleted."""
        registration = self._store.get_registration(registration_id)
        if registration is None:
            return Outcome.failure(NotFoundError("registration", registration_id.value))
        if registration.user_id != user_id:
            return Outcome.failure(NotOwnerError(registration_id.value))
        if registration.status is RegistrationStatus.CANCELLED:
            return Outcome.success(registration)

        updated = self._store.set_status(registration_id, RegistrationStatus.CANCELLED)
        if updated is None:
            return Outcome.failure(NotFoundError("registration", registration_id.value))
        logger.info("Registration cancelled: id=%s user=%s", registration_id.value, user_id.value)
        return Outcome.success(updated)

    def list_registrations(self, user_id: UserId) -> list[Registration]:
        """Return the user's non-cancelled registrations, led or joined."""
        return self._store.active_registrations_for(user_id)

    def quota_summary(self, user_id: UserId) -> Outcome[QuotaSummary]:
        if self._store.get_member(user_id) is None:
            return Outcome.failure(NotFoundError("user", user_id.value))
        counts = count_quota(self._store.active_registrations_for(user_id))
        return Outcome.success(QuotaSummary(counts=counts, limits=load_limits(self._config)))

    def find_teammates(
        self, user_id: UserId, query: str | None = None
    ) -> Outcome[list[Member]]:
        """Students of the caller's house who could join the caller's team.

        Without a query the whole house is listed. A search needs at least two
        characters and returns at most five students.
        """
        try:
            leader = self._require_leader(user_id)
        except DomainError as exc:
            return Outcome.failure(exc)

        query = (query or "").strip()
        if not query:
            return Outcome.success(self._store.house_students(leader.house_id, leader.id))
        if len(query) < MIN_SEARCH_LENGTH:
            return Outcome.success([])
        return Outcome.success(
            self._store.house_students(
                leader.house_id, leader.id, query=query, limit=MAX_SEARCH_RESULTS
            )
        )

    def _require_leader(self, user_id: UserId) -> Member:
        leader = self._store.get_member(user_id)
        if leader is None:
            raise NotFoundError("user", user_id.value)
        if leader.house_id is None:
            raise HouseNotAssignedError(user_id.value)
        return leader

    def _admit(
        self,
        leader: Member,
        request: RegistrationRequest,
        existing: list[Registration],
        accepted: list[Program],
        limits: QuotaLimits,
    ) -> RegistrationDraft:
        program = self._store.get_program(request.program_id)
        if program is None:
            raise NotFoundError("program", request.program_id.value)
        if not program.is_active:
            raise ProgramUnavailableError(program.id.value)
        if request.is_group != program.is_group:
            raise TypeMismatchError(program.type.value, request.is_group)
        group_name = (request.group_name or "").strip()
        if request.is_group and not group_name:
            raise GroupNameRequiredError()

        self._ensure_new(leader, program, existing, accepted)

        member_ids = self._roster_of(leader, request)
        if request.is_group:
            self._roster.validate(leader.house_id, program, member_ids)

        counts = count_quota(existing, accepted)
        if not has_room(counts, limits, program.bucket):
            raise LimitExceededError(program.bucket, limits.for_bucket(program.bucket))
        self._ensure_members_have_room(program, member_ids, limits)

        return RegistrationDraft(
            user_id=leader.id,
            program=program,
            house_id=leader.house_id,
            is_group=request.is_group,
            group_name=group_name if request.is_group else None,
            status=ADMITTED_STATUS,
            member_ids=member_ids,
        )

    def _ensure_new(
        self,
        leader: Member,
        program: Program,
        existing: list[Registration],
        accepted: list[Program],
    ) -> None:
        for registration in existing:
            if registration.program.id == program.id and registration.is_active:
                raise AlreadyRegisteredError(
                    program.id.value, as_member=registration.user_id != leader.id
                )
        if any(earlier.id == program.id for earlier in accepted):
            raise AlreadyRegisteredError(program.id.value)

    def _ensure_members_have_room(
        self, program: Program, member_ids: tuple[UserId, ...], limits: QuotaLimits
    ) -> None:
        """Joining a team uses up the teammate's own quota for the bucket."""
        full = [
            member_id
            for member_id in member_ids
            if not has_room(
                count_quota(self._store.active_registrations_for(member_id)),
                limits,
                program.bucket,
            )
        ]
        if full:
            raise LimitExceededError(
                program.bucket,
                limits.for_bucket(program.bucket),
                member_ids=[str(member_id.value) for member_id in full],
            )

    def _roster_of(
        self, leader: Member, request: RegistrationRequest
    ) -> tuple[UserId, ...]:
        if not request.is_group:
            return ()
        roster: list[UserId] = []
        for member_id in request.member_ids:
            if member_id != leader.id and member_id not in roster:
                roster.append(member_id)
        return tuple(roster)

    def _announce(self, registration: Registration) -> None:
        if self._notifier is None:
            return
        payload = {
            "event": "confirmed",
            "registration_id": str(registration.id.value),
            "program": registration.program.name,
            "status": registration.status.value,
            "group_name": registration.group_name,
        }
        for user_id in (registration.user_id, *registration.member_ids):
            try:
                self._notifier.notify(user_id, payload)
            except Exception:
                logger.exception(
                    "Notification failed: registration=%s user=%s",
                    registration.id.value,
                    user_id.value,
                )
