"""Typed results returned by services instead of raised errors."""

from dataclasses import dataclass
from typing import Generic, Self, TypeVar

from festival.domain.errors import DomainError
from festival.domain.models import Registration
from festival.domain.value_objects import ProgramId

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the domain error that prevented it."""

    value: T | None = None
    error: DomainError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Self:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> Self:
        return cls(error=error)


@dataclass(frozen=True)
class BatchRejection:
    """A batch item that failed validation or could not be written."""

    index: int
    program_id: ProgramId
    error: DomainError


@dataclass(frozen=True)
class BatchReport:
    """What happened to each item of a batch registration, in request order."""

    created: tuple[Registration, ...] = ()
    skipped: tuple[ProgramId, ...] = ()
    rejected: tuple[BatchRejection, ...] = ()
