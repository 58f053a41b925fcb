"""Admin/status endpoints for credential inspection."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from relay.api.dependencies import get_config, get_executor
from relay.core.config import AppConfig
from relay.router.failover import FailoverExecutor

router = APIRouter(prefix="/admin")


@router.get("/credentials")
def list_credentials(
    executor: Annotated[FailoverExecutor, Depends(get_executor)],
    config: Annotated[AppConfig, Depends(get_config)],
) -> dict:
    """Return the loaded credentials in failover order, with keys masked."""
    pool = executor.pool
    data = [
        {
            "index": credential.index,
            "source": credential.source,
            "hint": credential.hint,
        }
        for credential in pool
    ]
    return {
        "count": pool.size(),
        "configured_sources": list(config.credentials.env),
        "default_model": config.upstream.default_model,
        "credentials": data,
    }
