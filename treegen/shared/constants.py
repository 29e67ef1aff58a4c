"""
Named constants for the generation engine.

Provider endpoints, protocol versions, default models and the simulated
latencies used by demo mode live here so that adapters, the orchestrator
and the tests agree on one value.
"""

# ── Provider wire details ────────────────────────────────────

OPENAI_BASE_URL = "https://api.openai.com/v1"
"""Base URL for the OpenAI chat-completions API."""

ANTHROPIC_BASE_URL = "https://api.anthropic.com"
"""Base URL for the Anthropic messages API."""

ANTHROPIC_API_VERSION = "2023-06-01"
"""Value sent in the ``anthropic-version`` protocol header."""

ANTHROPIC_MAX_TOKENS = 4096
"""``max_tokens`` sent with every Anthropic request."""

DEFAULT_OPENAI_MODEL = "gpt-4"
DEFAULT_ANTHROPIC_MODEL = "claude-3-sonnet-20240229"

DEFAULT_TEMPERATURE = 0.7
"""Used only when a config carries no temperature at all."""

# ── Simulated latency (demo mode) ───────────────────────────

MOCK_DELAY_SECONDS = 1.5
"""Delay before returning mock output when the provider is ``mock``."""

FALLBACK_DELAY_SECONDS = 1.0
"""Shorter delay before returning mock output after a live call failed."""

LLM_CALL_TIMEOUT_SECONDS = 60
"""Upper bound for a single live provider call."""

# ── Connection test ──────────────────────────────────────────

CONNECTION_TEST_QUESTION = "测试连接"
CONNECTION_TEST_OK = "API 连接成功"
CONNECTION_TEST_MOCK = "演示模式无需测试"

# ── Error messages used when the provider body carries none ──

OPENAI_FAILURE_MESSAGE = "OpenAI API 调用失败"
ANTHROPIC_FAILURE_MESSAGE = "Anthropic API 调用失败"
CUSTOM_FAILURE_MESSAGE = "自定义 API 调用失败"
UNRECOGNIZED_RESPONSE_MESSAGE = "无法解析 API 响应"
