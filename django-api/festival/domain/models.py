"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in festival/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime

from festival.domain.value_objects import (
    Grade,
    HouseId,
    ProgramCategory,
    ProgramId,
    ProgramType,
    QuotaBucket,
    RegistrationId,
    RegistrationStatus,
    TeamSize,
    UserId,
)


@dataclass(frozen=True)
class House:
    """Domain representation of a House, the unit credited for scoring."""

    id: HouseId
    name: str
    color: str | None = None


@dataclass(frozen=True)
class Member:
    """The slice of a user the core reads: identity, house and whether they compete."""

    id: UserId
    house_id: HouseId | None
    display_name: str = ""
    is_student: bool = True


@dataclass(frozen=True)
class Program:
    """Domain representation of a Program."""

    id: ProgramId
    name: str
    type: ProgramType
    category: ProgramCategory
    team_size: TeamSize
    is_active: bool = True
    description: str = ""

    @property
    def bucket(self) -> QuotaBucket:
        return QuotaBucket.for_program(self.category, self.type)

    @property
    def is_group(self) -> bool:
        return self.type is ProgramType.GROUP


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration and its roster."""

    id: RegistrationId
    user_id: UserId
    program: Program
    house_id: HouseId
    is_group: bool
    group_name: str | None
    status: RegistrationStatus
    grade: Grade | None
    member_ids: tuple[UserId, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is not RegistrationStatus.CANCELLED

    @property
    def team_size(self) -> int:
        return 1 + len(self.member_ids)


@dataclass(frozen=True)
class RegistrationDraft:
    """A validated registration ready to be written."""

    user_id: UserId
    program: Program
    house_id: HouseId
    is_group: bool
    group_name: str | None
    status: RegistrationStatus
    member_ids: tuple[UserId, ...] = ()


@dataclass(frozen=True)
class RegistrationRequest:
    """One program a user asks to be admitted to."""

    program_id: ProgramId
    is_group: bool = False
    group_name: str | None = None
    member_ids: tuple[UserId, ...] = ()


@dataclass(frozen=True)
class QuotaCounts:
    """Non-cancelled registrations held by a user, per quota bucket."""

    on_stage_solo: int = 0
    on_stage_group: int = 0
    off_stage_total: int = 0

    def for_bucket(self, bucket: QuotaBucket) -> int:
        return {
            QuotaBucket.ON_STAGE_SOLO: self.on_stage_solo,
            QuotaBucket.ON_STAGE_GROUP: self.on_stage_group,
            QuotaBucket.OFF_STAGE_TOTAL: self.off_stage_total,
        }[bucket]


@dataclass(frozen=True)
class QuotaLimits:
    """Configured maximum per quota bucket."""

    max_on_stage_solo: int = 0
    max_on_stage_group: int = 0
    max_off_stage_total: int = 0

    def for_bucket(self, bucket: QuotaBucket) -> int:
        return {
            QuotaBucket.ON_STAGE_SOLO: self.max_on_stage_solo,
            QuotaBucket.ON_STAGE_GROUP: self.max_on_stage_group,
            QuotaBucket.OFF_STAGE_TOTAL: self.max_off_stage_total,
        }[bucket]


@dataclass(frozen=True)
class QuotaSummary:
    counts: QuotaCounts
    limits: QuotaLimits


@dataclass(frozen=True)
class HouseScore:
    """A house and the points it has accumulated."""

    house: House
    score: int


@dataclass(frozen=True)
class RankedHouse:
    """A house with the ordinal it holds in a ranking."""

    rank: int
    house: House
    score: int


@dataclass(frozen=True)
class Podium:
    """Dense-ranked podium: one tier per distinct top-three score."""

    rank1: tuple[HouseScore, ...] = ()
    rank2: tuple[HouseScore, ...] = ()
    rank3: tuple[HouseScore, ...] = ()
    rest: tuple[RankedHouse, ...] = ()


@dataclass(frozen=True)
class Leaderboard:
    """Both ranking views, derived from one list of house scores."""

    scores: tuple[HouseScore, ...]
    podium: Podium
    standings: tuple[RankedHouse, ...] = field(default_factory=tuple)
