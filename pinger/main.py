import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from pinger.api_schemas import CheckResponse, ConfigResponse, HealthResponse
from pinger.checks.ping_check import execute_check
from pinger.config import settings

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Pinger",
    version="1.0.0",
    description=(
        "Minimal uptime monitor: probes the configured TARGET_ENDPOINT once per "
        "request and reports whether a parseable response came back."
    ),
)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health Check",
    description="Liveness endpoint used by probes and orchestration.",
)
def health():
    return {"status": "ok"}


@app.get(
    "/config",
    response_model=ConfigResponse,
    tags=["system"],
    summary="Current Effective Config",
    description="Returns non-secret runtime config values.",
)
def config():
    return {
        "target_configured": bool(
            settings.TARGET_ENDPOINT and settings.TARGET_ENDPOINT.strip()
        ),
        "poll_interval_s": settings.POLL_INTERVAL_S,
    }


@app.get(
    "/check",
    response_model=CheckResponse,
    tags=["check"],
    summary="Run Ping Check",
    description=(
        "Issues one GET to TARGET_ENDPOINT. Answers 200 when the target replied "
        "with parseable JSON (whatever its status code) and 500 otherwise."
    ),
    responses={500: {"model": CheckResponse, "description": "Check failed or not configured"}},
)
def check():
    # Sync handler: runs in FastAPI's threadpool, off the event loop.
    result, status_code = execute_check()
    logger.info("Check finished success=%s status=%s", result.success, status_code)
    return JSONResponse(status_code=status_code, content=result.to_dict())
