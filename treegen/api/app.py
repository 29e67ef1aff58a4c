"""
FastAPI application - HTTP boundary for the decision tree generator.
Dispatches generation and connection-test requests to the orchestrator
and exposes the stored provider config to the UI.
"""

import contextvars
import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware

from treegen.config_store.store import JSONConfigStore
from treegen.orchestrator.engine import Orchestrator
from treegen.shared.config import AppConfig, ProviderConfig, load_config
from treegen.shared.models import GenerationContext

logger = logging.getLogger(__name__)

# ── Request ID tracking via ContextVar ────────────────────────────────────────
_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


class RequestIDFilter(logging.Filter):
    """Injects the current request ID into every log record."""
    def filter(self, record):
        record.request_id = _request_id_ctx.get("-")
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generates a unique request ID, stores it in ContextVar, adds to response header."""
    async def dispatch(self, request: Request, call_next):
        request_id = uuid.uuid4().hex[:12]
        _request_id_ctx.set(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


# Global references set during lifespan
_orchestrator: Optional[Orchestrator] = None
_config_store: Optional[JSONConfigStore] = None
_config: Optional[AppConfig] = None


LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s:%(message)s"

# uvicorn loggers don't propagate to root
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def _log_file_handler(log_dir: str) -> logging.FileHandler:
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    return logging.FileHandler(os.path.join(log_dir, f"treegen_{timestamp}.log"), encoding="utf-8")


def configure_logging(config: AppConfig) -> None:
    """Request-id aware formatting for the root and uvicorn loggers, plus an optional log file."""
    log_level = getattr(logging, config.log_level)
    rid_filter = RequestIDFilter()
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler())

    file_handler = _log_file_handler(config.log_file_dir) if config.log_file_dir else None
    targets = [root_logger] + [logging.getLogger(name) for name in _UVICORN_LOGGERS]

    for target in targets:
        target.addFilter(rid_filter)
        if file_handler is not None:
            target.addHandler(file_handler)
        for handler in target.handlers:
            handler.setLevel(log_level)
            handler.setFormatter(formatter)
            handler.addFilter(rid_filter)

    if file_handler is not None:
        logger.info(f"Logging to file: {file_handler.baseFilename}")


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    """Application startup and shutdown."""
    global _orchestrator, _config_store, _config

    _config = load_config()
    configure_logging(_config)

    _config_store = JSONConfigStore(_config.config_store_path, defaults=_config.default_provider)
    _orchestrator = Orchestrator(_config)

    logger.info(f"Tree generator started (default provider: {_config.default_provider.provider})")
    yield
    logger.info("Tree generator shutdown")


_startup_config = load_config()

app = FastAPI(
    title="TreeGen",
    description="Decision tree generation from natural-language questions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_startup_config.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestIDMiddleware)


# --- Pydantic models for request validation ---

class ProviderConfigBody(BaseModel):
    """Wire shape of a provider config; omitted fields keep server defaults."""
    provider: Optional[str] = None
    apiKey: Optional[str] = None
    model: Optional[str] = None
    endpoint: Optional[str] = None
    temperature: Optional[float] = None
    saveToLocal: Optional[bool] = None

    def to_config(self, defaults: ProviderConfig) -> ProviderConfig:
        return ProviderConfig.from_dict(self.model_dump(exclude_unset=True), defaults=defaults)


class ContextBody(BaseModel):
    isFirstLevel: bool = False
    previousChoices: List[str] = Field(default_factory=list)
    currentQuestion: str = ""
    selectedOption: str = ""

    def to_context(self) -> GenerationContext:
        return GenerationContext.from_dict(self.model_dump())


class GenerateRequest(BaseModel):
    question: str = Field(min_length=1)
    config: Optional[ProviderConfigBody] = None
    context: Optional[ContextBody] = None


class ConnectionTestRequest(BaseModel):
    config: Optional[ProviderConfigBody] = None


class SaveConfigRequest(BaseModel):
    config: ProviderConfigBody


def _default_provider() -> ProviderConfig:
    return _config.default_provider if _config else ProviderConfig()


async def _resolve_provider_config(body: Optional[ProviderConfigBody]) -> ProviderConfig:
    """Request config wins; otherwise whatever the store holds."""
    if body is not None:
        return body.to_config(_default_provider())
    if _config_store:
        return await _config_store.get_config()
    return _default_provider()


# --- API Endpoints ---

@app.get("/api/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/api/generate")
async def generate(req: GenerateRequest):
    if not _orchestrator:
        raise HTTPException(503, "Orchestrator not initialized")
    if not req.question.strip():
        raise HTTPException(422, "question must not be blank")

    config = await _resolve_provider_config(req.config)
    context = req.context.to_context() if req.context is not None else None
    node = await _orchestrator.generate(req.question, config, context)
    return node.to_dict()


@app.post("/api/test")
async def test_connection(req: ConnectionTestRequest):
    if not _orchestrator:
        raise HTTPException(503, "Orchestrator not initialized")
    config = await _resolve_provider_config(req.config)
    return await _orchestrator.test_connection(config)


@app.get("/api/config")
async def get_config():
    """Return the stored provider config with the API key masked."""
    if not _config_store:
        raise HTTPException(503, "Not ready")
    config = await _config_store.get_config()
    return config.masked().to_dict()


@app.post("/api/config")
async def save_config(req: SaveConfigRequest):
    if not _config_store:
        raise HTTPException(503, "Not ready")
    config = req.config.to_config(_default_provider())
    await _config_store.set_config(config)
    return config.masked().to_dict()
