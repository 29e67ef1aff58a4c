"""
Abstract interfaces (Ports) for the tree generator.
Following Dependency Inversion Principle - depend on abstractions, not concretions.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .config import ProviderConfig
from .models import DecisionNode, GenerationContext


class IProviderAdapter(ABC):
    """Interface for one LLM backend."""

    @abstractmethod
    async def send(self, question: str, system_prompt: str, config: ProviderConfig) -> str:
        """Perform exactly one outbound call and return the reply text.

        Raises ProviderHttpError (or a subclass) on transport or HTTP failure.
        No retries at this layer.
        """


class IConfigStore(ABC):
    """Interface for persisted provider configuration."""

    @abstractmethod
    async def get_config(self) -> ProviderConfig:
        """Return the stored config, or defaults when unset or unreadable."""

    @abstractmethod
    async def set_config(self, config: ProviderConfig) -> None:
        """Persist the config, or clear it when ``save_to_local`` is false."""


class ITreeGenerator(ABC):
    """Interface for the generation entry point consumed by the HTTP layer."""

    @abstractmethod
    async def generate(
        self,
        question: str,
        config: ProviderConfig,
        context: Optional[GenerationContext] = None,
    ) -> DecisionNode:
        """Return a full tree (no context) or one layer (with context)."""

    @abstractmethod
    async def test_connection(self, config: ProviderConfig) -> dict:
        """Perform one live call and report ``{success, message}``."""
