"""Generation outcome types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from relay.providers.base import UpstreamResult


class FailureKind(str, enum.Enum):
    SERVICE_UNAVAILABLE = "service_unavailable"
    ALL_QUOTAS_EXHAUSTED = "all_quotas_exhausted"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class Attempt:
    """One credential tried during a single execution."""

    index: int
    result: UpstreamResult


@dataclass(frozen=True)
class Succeeded:
    text: str
    attempts: tuple[Attempt, ...] = ()


@dataclass(frozen=True)
class Failed:
    kind: FailureKind
    message: str
    upstream_status: int | None = None
    attempts: tuple[Attempt, ...] = ()


Outcome = Union[Succeeded, Failed]


__all__ = ["Attempt", "Failed", "FailureKind", "Outcome", "Succeeded"]
