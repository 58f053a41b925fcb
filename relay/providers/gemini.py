"""Gemini provider adapter."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

import httpx

from relay.core.config import UpstreamConfig
from relay.credentials.pool import Credential

from .base import ProviderAdapter, QuotaExceeded, UpstreamFailure, UpstreamResult, UpstreamSuccess
from .utils import build_error_log, extract_error_detail

logger = logging.getLogger("relay.providers.gemini")


class GeminiProvider(ProviderAdapter):
    provider_id = "gemini"

    def __init__(self, config: UpstreamConfig) -> None:
        self._base_url = config.base_url.rstrip("/")
        self._path = config.generate_path
        self._timeout = config.timeout_seconds

    async def generate(self, credential: Credential, prompt: str, model: str) -> UpstreamResult:
        model_slug = model.removeprefix("models/")
        url = f"{self._base_url}{self._path.format(model=model_slug)}"
        headers = {
            "x-goog-api-key": credential.key,
            "Content-Type": "application/json",
        }
        payload = self._build_payload(prompt)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.RequestError as exc:
            logger.warning(
                "Gemini request failed",
                extra={
                    "event": "upstream_network_error",
                    "provider_id": self.provider_id,
                    "credential_index": credential.index,
                    **build_error_log(error_type="network", message=str(exc) or type(exc).__name__),
                },
            )
            return UpstreamFailure(status=None, message="Provider request failed")

        if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
            detail = extract_error_detail(response)
            message = "Provider quota exhausted"
            if detail:
                message = f"{message}: {detail}"
            return QuotaExceeded(status=response.status_code, message=message)
        if response.is_error:
            detail = extract_error_detail(response)
            message = "Provider error"
            if detail:
                message = f"{message}: {detail}"
            return UpstreamFailure(status=response.status_code, message=message)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            return UpstreamFailure(status=None, message="Unexpected response format")
        return UpstreamSuccess(text=self._extract_text(data))

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

    def _extract_text(self, data: dict[str, Any]) -> str:
        candidate = self._select_candidate(data.get("candidates", []))
        if not candidate:
            return ""
        content = candidate.get("content")
        parts = content.get("parts", []) if isinstance(content, dict) else []
        return "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    def _select_candidate(self, candidates: Any) -> dict[str, Any] | None:
        if not isinstance(candidates, list):
            return None
        for candidate in candidates:
            if isinstance(candidate, dict):
                return candidate
        return None
