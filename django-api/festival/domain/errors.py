"""Domain error codes for the festival module.

Errors carry a code and the structured detail needed to describe them.
Wording shown to users belongs to the handlers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from festival.domain.value_objects import QuotaBucket


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    HOUSE_NOT_ASSIGNED = "HOUSE_NOT_ASSIGNED"
    PROGRAM_UNAVAILABLE = "PROGRAM_UNAVAILABLE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    GROUP_NAME_REQUIRED = "GROUP_NAME_REQUIRED"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    NOTHING_NEW = "NOTHING_NEW"
    CROSS_HOUSE_MEMBER = "CROSS_HOUSE_MEMBER"
    TEAM_SIZE_OUT_OF_RANGE = "TEAM_SIZE_OUT_OF_RANGE"
    MEMBER_ALREADY_REGISTERED = "MEMBER_ALREADY_REGISTERED"
    MEMBER_ALREADY_ON_TEAM = "MEMBER_ALREADY_ON_TEAM"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    DUPLICATE_CONSTRAINT = "DUPLICATE_CONSTRAINT"
    NOT_OWNER = "NOT_OWNER"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and structured detail."""

    code: ErrorCode
    detail: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __str__(self) -> str:
        if not self.detail:
            return self.code.value
        parts = ", ".join(f"{key}={value}" for key, value in self.detail.items())
        return f"{self.code.value}: {parts}"


class NotFoundError(DomainError):
    """Raised when a user, program or registration does not exist."""

    def __init__(self, resource: str, resource_id: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            detail={"resource": resource, "id": str(resource_id)},
        )


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, resource: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ID, detail={"resource": resource})


class HouseNotAssignedError(DomainError):
    """Raised when a user without a house tries to register."""

    def __init__(self, user_id: object) -> None:
        super().__init__(
            code=ErrorCode.HOUSE_NOT_ASSIGNED,
            detail={"user_id": str(user_id)},
        )


class ProgramUnavailableError(DomainError):
    """Raised when the program is not open for registration."""

    def __init__(self, program_id: object) -> None:
        super().__init__(
            code=ErrorCode.PROGRAM_UNAVAILABLE,
            detail={"program_id": str(program_id)},
        )


class TypeMismatchError(DomainError):
    """Raised when a solo/group request does not match the program type."""

    def __init__(self, program_type: str, is_group: bool) -> None:
        super().__init__(
            code=ErrorCode.TYPE_MISMATCH,
            detail={"program_type": program_type, "is_group": is_group},
        )


class GroupNameRequiredError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.GROUP_NAME_REQUIRED)


class AlreadyRegisteredError(DomainError):
    """Raised when the user already holds an active registration for the program."""

    def __init__(self, program_id: object, as_member: bool = False) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            detail={"program_id": str(program_id), "as_member": as_member},
        )


class NothingNewError(DomainError):
    """Raised when every item of a batch is already covered."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.NOTHING_NEW)


class CrossHouseMemberError(DomainError):
    """Raised when a teammate is unknown or belongs to another house."""

    def __init__(self, member_ids: list[str]) -> None:
        super().__init__(
            code=ErrorCode.CROSS_HOUSE_MEMBER,
            detail={"member_ids": member_ids},
        )


class TeamSizeOutOfRangeError(DomainError):
    def __init__(self, size: int, minimum: int, maximum: int) -> None:
        super().__init__(
            code=ErrorCode.TEAM_SIZE_OUT_OF_RANGE,
            detail={"size": size, "min": minimum, "max": maximum},
        )


class MemberAlreadyRegisteredError(DomainError):
    """Raised when a teammate leads their own registration for the program."""

    def __init__(self, member_ids: list[str]) -> None:
        super().__init__(
            code=ErrorCode.MEMBER_ALREADY_REGISTERED,
            detail={"member_ids": member_ids},
        )


class MemberAlreadyOnTeamError(DomainError):
    """Raised when a teammate is already on another team for the program."""

    def __init__(self, member_ids: list[str]) -> None:
        super().__init__(
            code=ErrorCode.MEMBER_ALREADY_ON_TEAM,
            detail={"member_ids": member_ids},
        )


class LimitExceededError(DomainError):
    """Raised when admitting the program would cross a quota limit.

    ``member_ids`` names the teammates who have no room left; it is absent when
    the leader is the one at the limit.
    """

    def __init__(
        self, bucket: QuotaBucket, maximum: int, member_ids: list[str] | None = None
    ) -> None:
        detail = {"bucket": bucket.value, "max": maximum}
        if member_ids:
            detail["member_ids"] = member_ids
        super().__init__(code=ErrorCode.LIMIT_EXCEEDED, detail=detail)

    @property
    def bucket(self) -> QuotaBucket:
        return QuotaBucket(self.detail["bucket"])

    @property
    def maximum(self) -> int:
        return self.detail["max"]


class DuplicateRegistrationError(DomainError):
    """Raised by a store when the active-registration constraint fires on write."""

    def __init__(self, user_id: object, program_id: object) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_CONSTRAINT,
            detail={"user_id": str(user_id), "program_id": str(program_id)},
        )


class NotOwnerError(DomainError):
    """Raised when someone other than the leader changes a registration."""

    def __init__(self, registration_id: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_OWNER,
            detail={"registration_id": str(registration_id)},
        )
