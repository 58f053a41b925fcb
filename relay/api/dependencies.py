"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from relay.core.config import AppConfig, load_config
from relay.router.failover import FailoverExecutor


def get_executor(request: Request) -> FailoverExecutor:
    return request.app.state.executor


def get_config() -> AppConfig:
    return load_config()
