"""Application configuration loading utilities."""

from __future__ import annotations

import os
import pathlib
from functools import lru_cache
from typing import List

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = BASE_DIR.parent / "config" / "relay.yaml"

DEFAULT_MODEL = "gemini-2.5-flash"


class UpstreamConfig(BaseModel):
    base_url: str = "https://generativelanguage.googleapis.com"
    generate_path: str = "/v1beta/models/{model}:generateContent"
    default_model: str = DEFAULT_MODEL
    timeout_seconds: float = Field(default=30.0, gt=0)


class CredentialsConfig(BaseModel):
    env: List[str] = Field(
        default_factory=lambda: ["GEMINI_KEY_0", "GEMINI_KEY_1", "GEMINI_KEY_2"]
    )


class PromptsConfig(BaseModel):
    joke: str = "Generate a short, funny, family-friendly joke."
    motivation: str = (
        "Generate a concise, powerful motivational quote suitable for a tip of the day."
    )
    tip_of_the_day: str = "Provide one useful, actionable productivity tip for the day."


class AppConfig(BaseModel):
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)


def _config_path() -> pathlib.Path:
    configured = os.getenv("RELAY_CONFIG")
    return pathlib.Path(configured) if configured else DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def load_config(path: pathlib.Path | None = None) -> AppConfig:
    """Load relay configuration from YAML, falling back to defaults when absent."""
    load_dotenv()
    config_path = path or _config_path()
    if not config_path.exists():
        return AppConfig()
    raw = yaml.safe_load(config_path.read_text()) or {}
    return AppConfig(**raw)
