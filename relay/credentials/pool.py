"""Ordered pool of upstream API credentials."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger("relay.credentials")


@dataclass(frozen=True)
class Credential:
    key: str = field(repr=False)
    index: int
    source: str | None = None

    @property
    def hint(self) -> str:
        """Masked form of the key that is safe to log or display."""
        if len(self.key) <= 4:
            return "****"
        return f"...{self.key[-4:]}"


class CredentialPool:
    """Read-only, ordered collection of usable credentials.

    The order defines the failover sequence. An empty pool is a valid state.
    """

    def __init__(self, credentials: Iterable[Credential] = ()) -> None:
        self._credentials: tuple[Credential, ...] = tuple(credentials)

    @classmethod
    def from_keys(cls, keys: Iterable[str | None]) -> CredentialPool:
        return cls._build((None, key) for key in keys)

    @classmethod
    def from_env(
        cls, names: Iterable[str], environ: Mapping[str, str] | None = None
    ) -> CredentialPool:
        """Build a pool from environment variables, skipping unset or empty ones."""
        env = os.environ if environ is None else environ
        return cls._build((name, env.get(name)) for name in names)

    @classmethod
    def _build(cls, entries: Iterable[tuple[str | None, str | None]]) -> CredentialPool:
        seen: set[str] = set()
        credentials: list[Credential] = []
        for source, raw in entries:
            key = (raw or "").strip()
            if not key or key in seen:
                continue
            seen.add(key)
            credentials.append(Credential(key=key, index=len(credentials), source=source))
        return cls(credentials)

    def size(self) -> int:
        return len(self._credentials)

    def at(self, index: int) -> Credential:
        if not 0 <= index < len(self._credentials):
            raise IndexError(f"credential index {index} out of range")
        return self._credentials[index]

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self) -> Iterator[Credential]:
        return iter(self._credentials)


def load_credential_pool(names: Iterable[str]) -> CredentialPool:
    """Read the configured credential variables and log the resulting pool size."""
    names = list(names)
    pool = CredentialPool.from_env(names)
    if pool.size() == 0:
        logger.critical(
            "No upstream API keys found in environment variables (%s)",
            ", ".join(names),
            extra={"event": "credential_pool_loaded", "pool_size": 0},
        )
    else:
        logger.info(
            "Loaded upstream API keys",
            extra={
                "event": "credential_pool_loaded",
                "pool_size": pool.size(),
                "sources": [credential.source for credential in pool],
            },
        )
    return pool


__all__ = ["Credential", "CredentialPool", "load_credential_pool"]
