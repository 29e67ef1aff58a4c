"""Decision tree generation engine: LLM providers, JSON recovery, mock synthesis."""

__version__ = "1.0.0"
