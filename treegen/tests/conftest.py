"""
Shared test fixtures for the tree generator test suite.
"""

import os
import sys
import tempfile

import pytest

# Ensure treegen is importable without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from treegen.shared.config import AppConfig, ProviderConfig


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def app_config(tmp_dir):
    """AppConfig with no simulated latency."""
    return AppConfig(
        config_store_path=os.path.join(tmp_dir, "data", "llm_api_config.json"),
        mock_delay_seconds=0,
        fallback_delay_seconds=0,
        llm_timeout_seconds=5,
        environment="test",
    )


@pytest.fixture
def mock_config():
    return ProviderConfig(provider="mock")


@pytest.fixture
def openai_config():
    return ProviderConfig(provider="openai", api_key="sk-test-key", model="gpt-4o")


@pytest.fixture
def anthropic_config():
    return ProviderConfig(provider="anthropic", api_key="sk-ant-test-key", model="")


@pytest.fixture
def custom_config():
    return ProviderConfig(
        provider="custom",
        api_key="custom-key",
        model="local-llm",
        endpoint="https://llm.example.com/v1/chat",
    )
