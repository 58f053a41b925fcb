"""CLI entry point for running the relay with the default dev settings."""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
    """Run the relay application with host/port overrides from the environment."""
    host = os.getenv("UVICORN_HOST", os.getenv("HOST", "127.0.0.1"))
    port = int(os.getenv("UVICORN_PORT", os.getenv("PORT", "3000")))
    reload_enabled = os.getenv("UVICORN_RELOAD", os.getenv("RELOAD", "false")).lower() == "true"

    uvicorn.run("relay.main:app", host=host, port=port, reload=reload_enabled)


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    main()
