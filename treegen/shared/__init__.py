"""Shared cross-cutting concerns: config, constants, errors, models, interfaces, prompts."""

__all__ = [
    "config",
    "constants",
    "exceptions",
    "interfaces",
    "models",
    "prompts",
]
