"""Helper utilities for provider adapters."""

from __future__ import annotations

from typing import Any

import httpx

MAX_ERROR_DETAIL_LENGTH = 300


def extract_error_detail(response: httpx.Response) -> str | None:
    """Return a compact, trimmed error detail from an upstream error response."""

    detail: str | None = None
    try:
        data = response.json()
    except ValueError:
        text_summary = (response.text or "").strip()
        if text_summary:
            detail = text_summary
    else:
        if isinstance(data, dict):
            error_obj = data.get("error")
            if isinstance(error_obj, dict):
                status = error_obj.get("status")
                message = error_obj.get("message")
                parts = [
                    part.strip()
                    for part in (status, message)
                    if isinstance(part, str) and part.strip()
                ]
                if parts:
                    detail = " - ".join(parts)
                elif error_obj:
                    detail = str(error_obj)
            elif isinstance(data.get("message"), str):
                detail = data["message"]
            elif data:
                detail = str(data)
        elif data:
            detail = str(data)

    if detail:
        compact = " ".join(detail.split())
        if len(compact) > MAX_ERROR_DETAIL_LENGTH:
            compact = f"{compact[: MAX_ERROR_DETAIL_LENGTH - 3]}..."
        return compact
    return None


def build_error_log(
    *,
    error_type: str,
    message: str,
    status_code: int | None = None,
) -> dict[str, Any]:
    """Assemble a consistent provider error log payload."""

    payload: dict[str, Any] = {
        "error_type": error_type,
        "error_message": message,
    }
    if status_code is not None:
        payload["status_code"] = status_code
    return payload


__all__ = ["MAX_ERROR_DETAIL_LENGTH", "build_error_log", "extract_error_detail"]
