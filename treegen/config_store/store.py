"""
JSON-file store for the provider configuration.
Implements IConfigStore: persisted values override defaults, and a
config with ``save_to_local`` off removes whatever was saved before.
"""

import asyncio
import json
import logging
import os
from typing import Optional

from treegen.shared.config import ProviderConfig
from treegen.shared.exceptions import ConfigLoadError
from treegen.shared.interfaces import IConfigStore

logger = logging.getLogger(__name__)


class JSONConfigStore(IConfigStore):
    """Persistent provider config backed by one JSON file."""

    def __init__(self, file_path: str, defaults: Optional[ProviderConfig] = None):
        self._file_path = file_path
        self._defaults = defaults or ProviderConfig()
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> str:
        return self._file_path

    def _read_raw(self) -> Optional[dict]:
        if not os.path.exists(self._file_path):
            return None
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(f"Cannot read {self._file_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigLoadError(f"{self._file_path} does not hold a JSON object")
        return data

    def _write_raw(self, data: dict) -> None:
        directory = os.path.dirname(self._file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    async def get_config(self) -> ProviderConfig:
        async with self._lock:
            try:
                data = self._read_raw()
            except ConfigLoadError as e:
                logger.error(f"Failed to load config: {e}")
                return self._defaults
            if data is None:
                return self._defaults
            return ProviderConfig.from_dict(data, defaults=self._defaults)

    async def set_config(self, config: ProviderConfig) -> None:
        async with self._lock:
            try:
                if config.save_to_local:
                    self._write_raw(config.to_dict())
                    logger.info(f"Config saved ({config.provider})")
                elif os.path.exists(self._file_path):
                    os.remove(self._file_path)
                    logger.info("Saved config cleared")
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
