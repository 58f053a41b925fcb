"""Upstream adapter interfaces and result types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from relay.credentials.pool import Credential


@dataclass(frozen=True)
class UpstreamSuccess:
    text: str


@dataclass(frozen=True)
class QuotaExceeded:
    status: int = 429
    message: str = "Quota exceeded"


@dataclass(frozen=True)
class UpstreamFailure:
    status: int | None
    message: str


UpstreamResult = Union[UpstreamSuccess, QuotaExceeded, UpstreamFailure]


class ProviderAdapter:
    """Abstract upstream adapter.

    Implementations make exactly one upstream call per ``generate`` invocation and
    report every upstream condition as an ``UpstreamResult`` instead of raising.
    """

    provider_id: str

    async def generate(self, credential: Credential, prompt: str, model: str) -> UpstreamResult:
        raise NotImplementedError
