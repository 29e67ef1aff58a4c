"""
Orchestrator - the single entry point for tree generation.
Implements ITreeGenerator: selects mock vs. live provider and degrades to
mock output when a live call fails.

Policy:
  provider == mock  -> simulated delay, mock synthesizer
  provider == live  -> adapter -> extractor -> DecisionNode
  live call fails   -> log, shorter delay, mock synthesizer

The engine is stateless between calls; config and context are supplied
by the caller each time and never retained.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from treegen.orchestrator.extractor import extract_json
from treegen.orchestrator.llm_client import create_provider_adapter
from treegen.orchestrator.mock_synthesizer import synthesize
from treegen.shared.config import AppConfig, ProviderConfig
from treegen.shared.constants import (
    CONNECTION_TEST_MOCK,
    CONNECTION_TEST_OK,
    CONNECTION_TEST_QUESTION,
)
from treegen.shared.exceptions import ProviderConnectionError
from treegen.shared.interfaces import IProviderAdapter, ITreeGenerator
from treegen.shared.models import DecisionNode, GenerationContext
from treegen.shared.prompts import build_system_prompt

logger = logging.getLogger(__name__)


class Orchestrator(ITreeGenerator):
    """Selects the generation path and applies the fallback-to-mock policy."""

    def __init__(
        self,
        config: AppConfig,
        adapter_factory: Callable[[str], IProviderAdapter] = create_provider_adapter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._config = config
        self._adapter_factory = adapter_factory
        self._sleep = sleep

    async def generate(
        self,
        question: str,
        config: ProviderConfig,
        context: Optional[GenerationContext] = None,
    ) -> DecisionNode:
        mode = "full-tree" if context is None else "incremental"

        if config.is_mock:
            logger.info(f"Mock generation ({mode})")
            await self._sleep(self._config.mock_delay_seconds)
            return synthesize(question, context)

        try:
            return await self._call_provider(question, config, context)
        except Exception as e:
            logger.error(f"LLM API call failed ({config.provider}, {mode}): {e!r}")
            logger.warning("Falling back to mock generation")
            await self._sleep(self._config.fallback_delay_seconds)
            return synthesize(question, context)

    async def test_connection(self, config: ProviderConfig) -> dict:
        """One live first-layer call, no fallback. Never raises."""
        if config.is_mock:
            return {"success": True, "message": CONNECTION_TEST_MOCK}

        try:
            await self._call_provider(
                CONNECTION_TEST_QUESTION,
                config,
                GenerationContext(is_first_level=True),
            )
        except Exception as e:
            logger.warning(f"Connection test failed ({config.provider}): {e!r}")
            return {"success": False, "message": str(e)}

        logger.info(f"Connection test succeeded ({config.provider})")
        return {"success": True, "message": CONNECTION_TEST_OK}

    async def _call_provider(
        self,
        question: str,
        config: ProviderConfig,
        context: Optional[GenerationContext],
    ) -> DecisionNode:
        """Adapter -> extractor -> schema. Raises on any failure."""
        adapter = self._adapter_factory(config.provider)
        system_prompt = build_system_prompt(question, context)
        timeout = self._config.llm_timeout_seconds
        try:
            raw = await asyncio.wait_for(
                adapter.send(question, system_prompt, config),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderConnectionError(
                f"{config.provider} call timed out after {timeout}s"
            ) from e

        data = extract_json(raw)
        first_level = context is not None and context.is_first_level
        return DecisionNode.from_dict(data, first_level=first_level)
