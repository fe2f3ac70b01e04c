"""Django ORM implementation of the RegistrationStore."""

import logging
from collections.abc import Iterable

from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef, Q

from festival import models
from festival.domain import (
    Grade,
    House,
    HouseId,
    Member,
    Program,
    ProgramCategory,
    ProgramId,
    ProgramType,
    Registration,
    RegistrationDraft,
    RegistrationId,
    RegistrationStatus,
    TeamSize,
    UserId,
)
from festival.domain.errors import DuplicateRegistrationError
from festival.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)

CANCELLED = models.Registration.Status.CANCELLED


def _to_program(row: models.Program) -> Program:
    return Program(
        id=ProgramId(row.id),
        name=row.name,
        type=ProgramType(row.type),
        category=ProgramCategory(row.category),
        team_size=TeamSize(minimum=row.min_members, maximum=row.max_members),
        is_active=row.is_active,
        description=row.description,
    )


def _to_registration(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        user_id=UserId(row.user_id),
        program=_to_program(row.program),
        house_id=HouseId(row.house_id),
        is_group=row.is_group,
        group_name=row.group_name,
        status=RegistrationStatus(row.status),
        grade=Grade(row.grade) if row.grade else None,
        member_ids=tuple(UserId(member.user_id) for member in row.members.all()),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_member(row: models.User) -> Member:
    return Member(
        id=UserId(row.id),
        house_id=HouseId(row.house_id) if row.house_id else None,
        display_name=row.get_full_name() or row.username,
        is_student=row.role == models.User.Role.STUDENT,
    )


class DjangoRegistrationStore(RegistrationStore):
    """Relational store using Django ORM."""

    def _registrations(self):
        return models.Registration.objects.select_related("program").prefetch_related(
            "members"
        )

    def get_member(self, user_id: UserId) -> Member | None:
        row = models.User.objects.filter(pk=user_id.value).first()
        return _to_member(row) if row else None

    def get_members(self, user_ids: Iterable[UserId]) -> list[Member]:
        ids = [user_id.value for user_id in user_ids]
        return [_to_member(row) for row in models.User.objects.filter(pk__in=ids)]

    def house_students(
        self,
        house_id: HouseId,
        exclude: UserId,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[Member]:
        rows = (
            models.User.objects.filter(
                house_id=house_id.value, role=models.User.Role.STUDENT, is_active=True
            )
            .exclude(pk=exclude.value)
            .order_by("first_name", "last_name", "username")
        )
        if query:
            rows = rows.filter(
                Q(first_name__icontains=query)
                | Q(last_name__icontains=query)
                | Q(username__icontains=query)
            )
        if limit is not None:
            rows = rows[:limit]
        return [_to_member(row) for row in rows]

    def get_program(self, program_id: ProgramId) -> Program | None:
        row = models.Program.objects.filter(pk=program_id.value).first()
        return _to_program(row) if row else None

    def list_programs(self, category: ProgramCategory | None = None) -> list[Program]:
        rows = models.Program.objects.filter(is_active=True)
        if category is not None:
            rows = rows.filter(category=category.value)
        return [_to_program(row) for row in rows.order_by("name")]

    def active_registrations_for(self, user_id: UserId) -> list[Registration]:
        rows = (
            self._registrations()
            .filter(Q(user_id=user_id.value) | Q(members__user_id=user_id.value))
            .exclude(status=CANCELLED)
            .distinct()
            .order_by("-created_at")
        )
        return [_to_registration(row) for row in rows]

    def leaders_for_program(
        self, program_id: ProgramId, user_ids: Iterable[UserId]
    ) -> set[UserId]:
        ids = [user_id.value for user_id in user_ids]
        rows = (
            models.Registration.objects.filter(program_id=program_id.value, user_id__in=ids)
            .exclude(status=CANCELLED)
            .values_list("user_id", flat=True)
        )
        return {UserId(value) for value in rows}

    def members_for_program(
        self, program_id: ProgramId, user_ids: Iterable[UserId]
    ) -> set[UserId]:
        ids = [user_id.value for user_id in user_ids]
        rows = (
            models.GroupMember.objects.filter(
                registration__program_id=program_id.value, user_id__in=ids
            )
            .exclude(registration__status=CANCELLED)
            .values_list("user_id", flat=True)
        )
        return {UserId(value) for value in rows}

    def _has_active_registration(self, user_id: UserId, program_id: ProgramId) -> bool:
        return (
            models.Registration.objects.filter(
                user_id=user_id.value, program_id=program_id.value
            )
            .exclude(status=CANCELLED)
            .exists()
        )

    def create_registration(self, draft: RegistrationDraft) -> Registration:
        try:
            with transaction.atomic():
                row = models.Registration.objects.create(
                    user_id=draft.user_id.value,
                    program_id=draft.program.id.value,
                    house_id=draft.house_id.value,
                    is_group=draft.is_group,
                    group_name=draft.group_name,
                    status=draft.status.value,
                )
                models.GroupMember.objects.bulk_create(
                    [
                        models.GroupMember(registration=row, user_id=member_id.value)
                        for member_id in draft.member_ids
                    ]
                )
        except IntegrityError as exc:
            if self._has_active_registration(draft.user_id, draft.program.id):
                logger.warning(
                    "Concurrent registration detected: user=%s program=%s",
                    draft.user_id.value,
                    draft.program.id.value,
                )
                raise DuplicateRegistrationError(
                    draft.user_id.value, draft.program.id.value
                ) from exc
            raise

        return Registration(
            id=RegistrationId(row.id),
            user_id=draft.user_id,
            program=draft.program,
            house_id=draft.house_id,
            is_group=draft.is_group,
            group_name=draft.group_name,
            status=draft.status,
            grade=None,
            member_ids=draft.member_ids,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = self._registrations().filter(pk=registration_id.value).first()
        return _to_registration(row) if row else None

    def set_grade(
        self, registration_id: RegistrationId, grade: Grade | None
    ) -> Registration | None:
        row = self._registrations().filter(pk=registration_id.value).first()
        if row is None:
            return None
        row.grade = grade.value if grade else None
        row.save(update_fields=["grade", "updated_at"])
        return _to_registration(row)

    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration | None:
        row = self._registrations().filter(pk=registration_id.value).first()
        if row is None:
            return None
        row.status = status.value
        row.save(update_fields=["status", "updated_at"])
        return _to_registration(row)

    def list_houses(self) -> list[House]:
        return [
            House(id=HouseId(row.id), name=row.name, color=row.color)
            for row in models.House.objects.order_by("name")
        ]

    def scorable_grades(self) -> list[tuple[HouseId, Grade | None]]:
        present = models.Attendance.objects.filter(
            registration=OuterRef("pk"), is_present=True
        )
        rows = (
            models.Registration.objects.exclude(status=CANCELLED)
            .filter(Exists(present))
            .values_list("house_id", "grade")
        )
        return [
            (HouseId(house_id), Grade(grade) if grade else None)
            for house_id, grade in rows
        ]

    def recent_results(self, limit: int) -> list[Registration]:
        rows = (
            self._registrations()
            .filter(grade__isnull=False)
            .exclude(grade="")
            .exclude(grade=models.Registration.Grade.PARTICIPATION)
            .exclude(status=CANCELLED)
            .order_by("-updated_at")[:limit]
        )
        return [_to_registration(row) for row in rows]
