"""Pack settings: defaults, optional YAML file, environment overrides."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import httpx
import yaml

from openai_pack.common.errors import UserVisibleError

LOGGER = logging.getLogger("openai_pack.config")

DEFAULT_CFG_PATH = "configs/pack.yaml"

# env var -> settings field
ENV_OVERRIDES = {
    "OPENAI_API_KEY": "api_key",
    "OPENAI_BASE_URL": "base_url",
    "OPENAI_PACK_DEFAULT_MODEL": "default_model",
    "OPENAI_PACK_DEFAULT_CHAT_MODEL": "default_chat_model",
    "OPENAI_PACK_TIMEOUT": "timeout",
    "OPENAI_PACK_LOG_LEVEL": "log_level",
}


@dataclass(frozen=True)
class Settings:
    api_key: str | None = field(default=None, repr=False)
    base_url: str = "https://api.openai.com/v1"
    default_model: str = "text-ada-001"
    default_chat_model: str = "gpt-3.5-turbo"
    timeout: float = 120.0
    log_level: str = "INFO"


@dataclass
class ExecutionContext:
    """Per-call collaborators handed to formulas; ``client`` is the only fetcher."""
    client: httpx.Client
    settings: Settings = field(default_factory=Settings)


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(cfg_path: str | None = None) -> Settings:
    """
    Resolve settings from defaults, a YAML file and the environment.

    Args:
        cfg_path: YAML config path. Falls back to ``OPENAI_PACK_CONFIG`` and then
            ``configs/pack.yaml``; only an explicitly requested file must exist.
    """
    explicit = cfg_path or os.getenv("OPENAI_PACK_CONFIG")
    path = explicit or DEFAULT_CFG_PATH

    values: dict[str, Any] = {}
    if Path(path).exists():
        values.update(load_cfg(path))
    elif explicit:
        raise FileNotFoundError(f"Config file not found at {path}")

    for env_name, key in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            values[key] = env_value

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        LOGGER.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    kwargs = {k: v for k, v in values.items() if k in known}
    if "timeout" in kwargs:
        kwargs["timeout"] = float(kwargs["timeout"])
    return Settings(**kwargs)


def make_client(settings: Settings) -> httpx.Client:
    """Build the HTTP client used for every outbound call; requires an API key."""
    if not settings.api_key:
        raise UserVisibleError(
            "No OpenAI API key configured. Set OPENAI_API_KEY or api_key in the config file. "
            "Keys are available at https://platform.openai.com/account/api-keys"
        )
    return httpx.Client(
        base_url=settings.base_url.rstrip("/"),
        headers={
            "Authorization": f"Bearer {settings.api_key}",
            "Content-Type": "application/json",
        },
        timeout=settings.timeout,
    )


def make_context(settings: Settings) -> ExecutionContext:
    return ExecutionContext(client=make_client(settings), settings=settings)
