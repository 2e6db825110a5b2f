from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from team_pulse.domain.enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class Err:
    """A failed provider call; `error` is a short machine-readable code."""

    error: str
    kind: ErrorKind = ErrorKind.UPSTREAM_UNAVAILABLE
    ok: Literal[False] = False


ProviderResult = Union[Ok[T], Err]
