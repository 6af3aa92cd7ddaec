from __future__ import annotations

import logging

from pinger.checks.results import CheckResult
from pinger.clients.target_client import UpstreamCallError, fetch_target_json
from pinger.config import ConfigurationError, require_target_endpoint

logger = logging.getLogger(__name__)

MESSAGE_NOT_CONFIGURED = "TARGET_ENDPOINT not defined"
MESSAGE_SUCCESS = "Ping successful"
MESSAGE_FAILED = "Ping failed"


def http_status_for(result: CheckResult) -> int:
    return 200 if result.success else 500


def execute_check(target_address: str | None = None) -> tuple[CheckResult, int]:
    """
    Probe the configured target once and classify the outcome.
    Returns the result together with the HTTP status /check should answer with.
    """
    try:
        target = require_target_endpoint(target_address)
    except ConfigurationError:
        logger.error("Check requested but TARGET_ENDPOINT is not configured")
        result = CheckResult(success=False, message=MESSAGE_NOT_CONFIGURED)
        return result, http_status_for(result)

    try:
        data = fetch_target_json(target)
    except UpstreamCallError as exc:
        logger.warning("Ping to %s failed: %s", target, exc)
        result = CheckResult(success=False, message=MESSAGE_FAILED, error=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error while pinging %s", target)
        result = CheckResult(
            success=False,
            message=MESSAGE_FAILED,
            error=f"{exc.__class__.__name__}: {exc}",
        )
    else:
        result = CheckResult(success=True, message=MESSAGE_SUCCESS, data=data)

    return result, http_status_for(result)
