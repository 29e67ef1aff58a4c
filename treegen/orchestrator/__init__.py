"""Core generation pipeline: provider adapters, JSON extraction, mock synthesis, orchestrator."""

__all__ = [
    "engine",
    "extractor",
    "llm_client",
    "mock_synthesizer",
]
