from festival.domain.models import (
    House,
    HouseScore,
    Leaderboard,
    Member,
    Podium,
    Program,
    QuotaCounts,
    QuotaLimits,
    QuotaSummary,
    RankedHouse,
    Registration,
    RegistrationDraft,
    RegistrationRequest,
)
from festival.domain.outcomes import BatchRejection, BatchReport, Outcome
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

__all__ = [
    "House",
    "HouseScore",
    "Leaderboard",
    "Member",
    "Podium",
    "Program",
    "QuotaCounts",
    "QuotaLimits",
    "QuotaSummary",
    "RankedHouse",
    "Registration",
    "RegistrationDraft",
    "RegistrationRequest",
    "BatchRejection",
    "BatchReport",
    "Outcome",
    "Grade",
    "HouseId",
    "ProgramCategory",
    "ProgramId",
    "ProgramType",
    "QuotaBucket",
    "RegistrationId",
    "RegistrationStatus",
    "TeamSize",
    "UserId",
]
