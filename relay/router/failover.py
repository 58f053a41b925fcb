"""Credential failover for upstream generation requests."""

from __future__ import annotations

import logging

from relay.core.config import DEFAULT_MODEL
from relay.core.outcomes import Attempt, Failed, FailureKind, Outcome, Succeeded
from relay.credentials.pool import CredentialPool
from relay.providers.base import ProviderAdapter, QuotaExceeded, UpstreamSuccess

logger = logging.getLogger("relay.router")

NO_CREDENTIALS_MESSAGE = "No API credentials are configured."
QUOTAS_EXHAUSTED_MESSAGE = "All API keys are currently exhausted. Please try again later."
UPSTREAM_ERROR_MESSAGE = "Failed to communicate with the AI model."


class FailoverExecutor:
    """Try each credential in pool order until one produces a usable result.

    Only quota-exhausted responses rotate to the next credential; any other
    upstream failure ends the execution. Nothing is carried between calls, so
    every execution starts again from the first credential.
    """

    def __init__(
        self,
        pool: CredentialPool,
        adapter: ProviderAdapter,
        default_model: str = DEFAULT_MODEL,
    ) -> None:
        self._pool = pool
        self._adapter = adapter
        self._default_model = default_model

    @property
    def pool(self) -> CredentialPool:
        return self._pool

    async def execute(self, prompt: str, model: str | None = None) -> Outcome:
        model_name = model or self._default_model

        if self._pool.size() == 0:
            logger.error(
                "No credentials configured",
                extra={"event": "request_error", "model": model_name},
            )
            return Failed(FailureKind.SERVICE_UNAVAILABLE, NO_CREDENTIALS_MESSAGE)

        attempts: list[Attempt] = []
        for index in range(self._pool.size()):
            credential = self._pool.at(index)
            if attempts:
                logger.info(
                    "Credential rotated",
                    extra={
                        "event": "credential_rotated",
                        "credential_from": attempts[-1].index,
                        "credential_to": index,
                        "model": model_name,
                    },
                )

            result = await self._adapter.generate(credential, prompt, model_name)
            attempts.append(Attempt(index=index, result=result))

            if isinstance(result, UpstreamSuccess):
                return Succeeded(text=result.text, attempts=tuple(attempts))

            if isinstance(result, QuotaExceeded):
                logger.warning(
                    "Attempt with key %d failed (%d quota exceeded), trying next key",
                    index,
                    result.status,
                    extra={
                        "event": "credential_attempt_failed",
                        "credential_index": index,
                        "credential_source": credential.source,
                        "provider_id": self._adapter.provider_id,
                        "model": model_name,
                        "status_code": result.status,
                        "error_message": result.message,
                    },
                )
                continue

            logger.warning(
                "Attempt with key %d failed (status %s), stopping rotation",
                index,
                result.status if result.status is not None else "unknown",
                extra={
                    "event": "credential_attempt_failed",
                    "credential_index": index,
                    "credential_source": credential.source,
                    "provider_id": self._adapter.provider_id,
                    "model": model_name,
                    "status_code": result.status,
                    "error_message": result.message,
                },
            )
            break

        last = attempts[-1].result
        if isinstance(last, QuotaExceeded):
            logger.error(
                "All credentials exhausted",
                extra={"event": "request_error", "model": model_name, "attempts": len(attempts)},
            )
            return Failed(
                FailureKind.ALL_QUOTAS_EXHAUSTED,
                QUOTAS_EXHAUSTED_MESSAGE,
                upstream_status=last.status,
                attempts=tuple(attempts),
            )

        status = last.status
        logger.error(
            "Upstream request failed",
            extra={
                "event": "request_error",
                "model": model_name,
                "attempts": len(attempts),
                "status_code": status,
            },
        )
        return Failed(
            FailureKind.UPSTREAM_ERROR,
            UPSTREAM_ERROR_MESSAGE,
            upstream_status=status,
            attempts=tuple(attempts),
        )


__all__ = ["FailoverExecutor"]
