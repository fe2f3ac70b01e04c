"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/ and services/.
"""

import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class House(models.Model):
    """Persistence model for houses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    color = models.CharField(max_length=20, blank=True, null=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """Festival account; the house is the unit credited for scoring."""

    class Role(models.TextChoices):
        STUDENT = "STUDENT", "Student"
        VOLUNTEER = "VOLUNTEER", "Volunteer"
        COORDINATOR = "COORDINATOR", "Coordinator"
        ADMIN = "ADMIN", "Admin"
        MASTER = "MASTER", "Master"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STUDENT)
    house = models.ForeignKey(
        House,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )

    def __str__(self) -> str:
        return self.get_full_name() or self.username


class Program(models.Model):
    """Persistence model for festival programs."""

    class Type(models.TextChoices):
        SOLO = "SOLO", "Solo"
        GROUP = "GROUP", "Group"

    class Category(models.TextChoices):
        ON_STAGE = "ON_STAGE", "On stage"
        OFF_STAGE = "OFF_STAGE", "Off stage"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.SOLO)
    category = models.CharField(max_length=10, choices=Category.choices)
    min_members = models.PositiveIntegerField(default=1)
    max_members = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "name"], name="program_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(min_members__lte=F("max_members")),
                name="program_team_size_bounds",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        super().clean()
        if self.min_members > self.max_members:
            raise ValidationError(
                {"min_members": "Minimum team size cannot exceed the maximum."}
            )


class Registration(models.Model):
    """Persistence model for a program registration led by one user."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        CONFIRMED = "CONFIRMED", "Confirmed"
        CANCELLED = "CANCELLED", "Cancelled"

    class Grade(models.TextChoices):
        PARTICIPATION = "PARTICIPATION", "Participation"
        SECOND_RUNNER_UP = "SECOND_RUNNER_UP", "Second runner-up"
        FIRST_RUNNER_UP = "FIRST_RUNNER_UP", "First runner-up"
        WINNER = "WINNER", "Winner"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations"
    )
    program = models.ForeignKey(
        Program, on_delete=models.CASCADE, related_name="registrations"
    )
    house = models.ForeignKey(
        House, on_delete=models.PROTECT, related_name="registrations"
    )
    is_group = models.BooleanField(default=False)
    group_name = models.CharField(max_length=120, blank=True, null=True)
    status = models.CharField(
        max_length=12, choices=Status.choices, default=Status.CONFIRMED
    )
    grade = models.CharField(
        max_length=20, choices=Grade.choices, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "program"],
                condition=~Q(status="CANCELLED"),
                name="unique_active_registration",
            ),
        ]
        indexes = [
            models.Index(fields=["program", "status"], name="reg_program_status_idx"),
            models.Index(fields=["house", "status"], name="reg_house_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.program}"


class GroupMember(models.Model):
    """A teammate on a group registration (the leader is not listed)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    registration = models.ForeignKey(
        Registration, on_delete=models.CASCADE, related_name="members"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["registration", "user"], name="unique_group_member"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user} in {self.registration}"


class Attendance(models.Model):
    """Presence mark recorded by staff for a participant of a registration."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    registration = models.ForeignKey(
        Registration, on_delete=models.CASCADE, related_name="attendance"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="attendance"
    )
    is_present = models.BooleanField(default=False)
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attendance_marked",
    )
    marked_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["registration", "user"], name="unique_attendance_mark"
            ),
        ]

    def __str__(self) -> str:
        state = "present" if self.is_present else "absent"
        return f"{self.user} {state} for {self.registration}"


class Configuration(models.Model):
    """Key/value settings edited by festival staff (e.g. quota limits)."""

    key = models.CharField(max_length=100, primary_key=True)
    value = models.CharField(max_length=255)
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
