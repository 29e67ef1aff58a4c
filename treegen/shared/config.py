"""
Centralized configuration management for the tree generator.

Two layers:
- ``AppConfig``: process settings assembled from environment variables
  (12-factor, ``.env`` supported) with safe defaults.
- ``ProviderConfig``: the per-call provider selection supplied by the
  caller (or loaded from the config store). The engine never caches or
  mutates it.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    DEFAULT_OPENAI_MODEL,
    DEFAULT_TEMPERATURE,
    FALLBACK_DELAY_SECONDS,
    LLM_CALL_TIMEOUT_SECONDS,
    MOCK_DELAY_SECONDS,
)
from .models import as_bool


class ProviderName(str, Enum):
    """Backends a ProviderConfig may name."""
    MOCK = "mock"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable provider selection for one generation call."""
    provider: str = ProviderName.MOCK.value
    api_key: str = ""
    model: str = DEFAULT_OPENAI_MODEL
    endpoint: str = ""
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    save_to_local: bool = True  # persistence hint for the config store only

    @property
    def is_mock(self) -> bool:
        return self.provider == ProviderName.MOCK.value

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "apiKey": self.api_key,
            "model": self.model,
            "endpoint": self.endpoint,
            "temperature": self.temperature,
            "saveToLocal": self.save_to_local,
        }

    @classmethod
    def from_dict(cls, data: dict, defaults: Optional["ProviderConfig"] = None) -> "ProviderConfig":
        """Build from wire (camelCase) keys; absent keys keep ``defaults``."""
        base = defaults or cls()
        temperature = data.get("temperature", base.temperature)
        if temperature is not None:
            try:
                temperature = float(temperature)
            except (TypeError, ValueError):
                temperature = base.temperature
        provider = data.get("provider") or base.provider
        if isinstance(provider, ProviderName):
            provider = provider.value
        return cls(
            provider=str(provider).strip().lower(),
            api_key=data.get("apiKey", base.api_key) or "",
            model=data.get("model", base.model) or "",
            endpoint=data.get("endpoint", base.endpoint) or "",
            temperature=temperature,
            save_to_local=as_bool(data.get("saveToLocal"), base.save_to_local),
        )

    def masked(self) -> "ProviderConfig":
        """Copy that is safe to return to a dashboard."""
        if not self.api_key:
            return self
        hint = self.api_key[:3] + "..." + self.api_key[-4:] if len(self.api_key) > 8 else "***"
        return replace(self, api_key=hint)


@dataclass(frozen=True)
class AppConfig:
    """Root application configuration - assembled from environment."""
    default_provider: ProviderConfig = field(default_factory=ProviderConfig)
    config_store_path: str = "./data/llm_api_config.json"
    mock_delay_seconds: float = MOCK_DELAY_SECONDS
    fallback_delay_seconds: float = FALLBACK_DELAY_SECONDS
    llm_timeout_seconds: float = LLM_CALL_TIMEOUT_SECONDS
    cors_origins: tuple = ("*",)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    log_file_dir: str = ""  # Directory for timestamped log files; empty = no file logging
    environment: str = "production"


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.
    Defaults are used when env vars are missing or invalid.
    """
    load_dotenv()  # Load .env file if present

    provider_str = os.environ.get("LLM_PROVIDER", "mock").lower()
    try:
        provider = ProviderName(provider_str).value
    except ValueError:
        provider = ProviderName.MOCK.value  # Fail safe: demo mode

    default_provider = ProviderConfig(
        provider=provider,
        api_key=os.environ.get("LLM_API_KEY", ""),
        model=os.environ.get("LLM_MODEL", DEFAULT_OPENAI_MODEL),
        endpoint=os.environ.get("LLM_ENDPOINT", ""),
        temperature=_float_env("LLM_TEMPERATURE", DEFAULT_TEMPERATURE),
    )

    origins = os.environ.get("CORS_ORIGINS", "*")

    try:
        api_port = int(os.environ.get("API_PORT", "8000"))
    except ValueError:
        api_port = 8000

    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        log_level = "INFO"

    return AppConfig(
        default_provider=default_provider,
        config_store_path=os.environ.get("TREEGEN_CONFIG_PATH", "./data/llm_api_config.json"),
        mock_delay_seconds=_float_env("MOCK_DELAY_SECONDS", MOCK_DELAY_SECONDS),
        fallback_delay_seconds=_float_env("FALLBACK_DELAY_SECONDS", FALLBACK_DELAY_SECONDS),
        llm_timeout_seconds=_float_env("LLM_TIMEOUT_SECONDS", LLM_CALL_TIMEOUT_SECONDS),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        api_host=os.environ.get("API_HOST", "0.0.0.0"),
        api_port=api_port,
        log_level=log_level,
        log_file_dir=os.environ.get("LOG_FILE_DIR", ""),
        environment=os.environ.get("ENVIRONMENT", "production"),
    )
