"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class UserId:
    """Unique identifier for a User."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))


@dataclass(frozen=True)
class HouseId:
    """Unique identifier for a House."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))


@dataclass(frozen=True)
class ProgramId:
    """Unique identifier for a Program."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))


class ProgramType(Enum):
    SOLO = "SOLO"
    GROUP = "GROUP"


class ProgramCategory(Enum):
    ON_STAGE = "ON_STAGE"
    OFF_STAGE = "OFF_STAGE"


class RegistrationStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Grade(Enum):
    """Result awarded to a graded registration."""

    PARTICIPATION = "PARTICIPATION"
    SECOND_RUNNER_UP = "SECOND_RUNNER_UP"
    FIRST_RUNNER_UP = "FIRST_RUNNER_UP"
    WINNER = "WINNER"

    @property
    def points(self) -> int:
        return GRADE_POINTS[self]


GRADE_POINTS: dict[Grade, int] = {
    Grade.WINNER: 5,
    Grade.FIRST_RUNNER_UP: 4,
    Grade.SECOND_RUNNER_UP: 3,
    Grade.PARTICIPATION: 0,
}


def points_for(grade: Grade | None) -> int:
    """Return the house points earned by a grade; ungraded is worth nothing."""
    if grade is None:
        return 0
    return grade.points


class QuotaBucket(Enum):
    """The unit against which per-student limits are enforced."""

    ON_STAGE_SOLO = "ON_STAGE_SOLO"
    ON_STAGE_GROUP = "ON_STAGE_GROUP"
    OFF_STAGE_TOTAL = "OFF_STAGE_TOTAL"

    @classmethod
    def for_program(cls, category: ProgramCategory, program_type: ProgramType) -> Self:
        if category is ProgramCategory.OFF_STAGE:
            return cls.OFF_STAGE_TOTAL
        if program_type is ProgramType.SOLO:
            return cls.ON_STAGE_SOLO
        return cls.ON_STAGE_GROUP

    @property
    def limit_key(self) -> str:
        """Configuration key holding this bucket's maximum."""
        return LIMIT_KEYS[self]


LIMIT_KEYS: dict[QuotaBucket, str] = {
    QuotaBucket.ON_STAGE_SOLO: "maxOnStageSolo",
    QuotaBucket.ON_STAGE_GROUP: "maxOnStageGroup",
    QuotaBucket.OFF_STAGE_TOTAL: "maxOffStageTotal",
}


@dataclass(frozen=True)
class TeamSize:
    """Inclusive bounds on a team's size, leader included.

    Bounds of ``0..0`` mean the program places no limit on team size.
    """

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        if self.minimum < 0 or self.maximum < 0:
            raise ValueError("Team size bounds cannot be negative")
        if not self.is_unbounded and self.minimum > self.maximum:
            raise ValueError("Team size minimum cannot exceed maximum")

    @property
    def is_unbounded(self) -> bool:
        return self.minimum == 0 and self.maximum == 0

    def allows(self, size: int) -> bool:
        if self.is_unbounded:
            return True
        return self.minimum <= size <= self.maximum
