import logging

import pytest
from relay.core.outcomes import Failed, FailureKind, Succeeded
from relay.credentials.pool import Credential, CredentialPool
from relay.providers.base import (
    ProviderAdapter,
    QuotaExceeded,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
)
from relay.router.failover import FailoverExecutor

EXPECTED_POOL_SIZE = 3


class _ScriptedAdapter(ProviderAdapter):
    provider_id = "scripted"

    def __init__(self, results: dict[str, UpstreamResult]) -> None:
        self.results = results
        self.calls: list[tuple[str, str, str]] = []

    async def generate(self, credential: Credential, prompt: str, model: str) -> UpstreamResult:
        self.calls.append((credential.key, prompt, model))
        return self.results[credential.key]


def _pool(*keys: str) -> CredentialPool:
    return CredentialPool.from_keys(keys)


@pytest.mark.asyncio
async def test_all_quota_exhausted_tries_every_credential_in_order():
    adapter = _ScriptedAdapter({key: QuotaExceeded() for key in ("k0", "k1", "k2")})
    executor = FailoverExecutor(_pool("k0", "k1", "k2"), adapter)

    outcome = await executor.execute("tell me a joke")

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.ALL_QUOTAS_EXHAUSTED
    assert "try again later" in outcome.message.lower()
    assert [key for key, _, _ in adapter.calls] == ["k0", "k1", "k2"]
    assert [attempt.index for attempt in outcome.attempts] == list(range(EXPECTED_POOL_SIZE))


@pytest.mark.asyncio
async def test_rotates_past_quota_and_stops_at_first_success():
    adapter = _ScriptedAdapter(
        {
            "k0": QuotaExceeded(),
            "k1": UpstreamSuccess(text="from key 1"),
            "k2": UpstreamSuccess(text="from key 2"),
        }
    )
    executor = FailoverExecutor(_pool("k0", "k1", "k2"), adapter)

    outcome = await executor.execute("hello")

    assert outcome == Succeeded(text="from key 1", attempts=outcome.attempts)
    assert [key for key, _, _ in adapter.calls] == ["k0", "k1"]


@pytest.mark.asyncio
async def test_non_quota_error_stops_rotation():
    adapter = _ScriptedAdapter(
        {
            "k0": UpstreamFailure(status=401, message="Provider error: UNAUTHENTICATED"),
            "k1": UpstreamSuccess(text="never reached"),
        }
    )
    executor = FailoverExecutor(_pool("k0", "k1"), adapter)

    outcome = await executor.execute("hello")

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.UPSTREAM_ERROR
    assert outcome.upstream_status == 401
    assert outcome.message == "Failed to communicate with the AI model."
    assert [key for key, _, _ in adapter.calls] == ["k0"]


@pytest.mark.asyncio
async def test_error_after_quota_is_reported_as_upstream_error():
    adapter = _ScriptedAdapter(
        {
            "k0": QuotaExceeded(),
            "k1": UpstreamFailure(status=None, message="Provider request failed"),
            "k2": UpstreamSuccess(text="never reached"),
        }
    )
    executor = FailoverExecutor(_pool("k0", "k1", "k2"), adapter)

    outcome = await executor.execute("hello")

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.UPSTREAM_ERROR
    assert outcome.upstream_status is None
    assert len(adapter.calls) == 2


@pytest.mark.asyncio
async def test_empty_pool_fails_without_calling_upstream():
    adapter = _ScriptedAdapter({})
    executor = FailoverExecutor(CredentialPool(), adapter)

    outcome = await executor.execute("hello")

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.SERVICE_UNAVAILABLE
    assert outcome.message
    assert outcome.attempts == ()
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_each_execution_restarts_from_first_credential():
    adapter = _ScriptedAdapter({"k0": UpstreamSuccess(text="ok"), "k1": UpstreamSuccess(text="no")})
    executor = FailoverExecutor(_pool("k0", "k1"), adapter)

    first = await executor.execute("same prompt")
    second = await executor.execute("same prompt")

    assert isinstance(first, Succeeded) and first.text == "ok"
    assert isinstance(second, Succeeded) and second.text == "ok"
    assert [key for key, _, _ in adapter.calls] == ["k0", "k0"]


@pytest.mark.asyncio
async def test_uses_default_model_unless_overridden():
    adapter = _ScriptedAdapter({"k0": UpstreamSuccess(text="ok")})
    executor = FailoverExecutor(_pool("k0"), adapter, default_model="gemini-default")

    await executor.execute("one")
    await executor.execute("two", model="gemini-other")

    assert [model for _, _, model in adapter.calls] == ["gemini-default", "gemini-other"]


@pytest.mark.asyncio
async def test_failed_attempts_are_logged_with_provider_and_source(caplog):
    adapter = _ScriptedAdapter({"k0": QuotaExceeded(), "k1": UpstreamFailure(status=500, message="boom")})
    executor = FailoverExecutor(CredentialPool.from_env(["A", "B"], {"A": "k0", "B": "k1"}), adapter)

    with caplog.at_level(logging.INFO, logger="relay.router"):
        await executor.execute("hello")

    failed = [r for r in caplog.records if getattr(r, "event", None) == "credential_attempt_failed"]
    assert [r.credential_source for r in failed] == ["A", "B"]
    assert all(r.provider_id == "scripted" for r in failed)
    assert all("k0" not in r.getMessage() and "k1" not in r.getMessage() for r in failed)
