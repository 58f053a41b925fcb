from types import SimpleNamespace

from relay.api import admin
from relay.core.config import AppConfig, CredentialsConfig
from relay.credentials.pool import CredentialPool


def _config() -> AppConfig:
    return AppConfig(credentials=CredentialsConfig(env=["KEY_A", "KEY_B", "KEY_C"]))


def test_list_credentials_masks_keys():
    pool = CredentialPool.from_env(
        ["KEY_A", "KEY_B", "KEY_C"],
        environ={"KEY_A": "alpha-secret-0001", "KEY_C": "gamma-secret-0003"},
    )
    executor = SimpleNamespace(pool=pool)

    result = admin.list_credentials(executor=executor, config=_config())

    assert result["count"] == 2
    assert result["configured_sources"] == ["KEY_A", "KEY_B", "KEY_C"]
    assert result["credentials"] == [
        {"index": 0, "source": "KEY_A", "hint": "...0001"},
        {"index": 1, "source": "KEY_C", "hint": "...0003"},
    ]
    assert "alpha-secret-0001" not in str(result)


def test_list_credentials_with_empty_pool():
    executor = SimpleNamespace(pool=CredentialPool())

    result = admin.list_credentials(executor=executor, config=_config())

    assert result["count"] == 0
    assert result["credentials"] == []
