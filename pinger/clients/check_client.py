from __future__ import annotations

import requests

from pinger.checks.results import CheckResult


class LocalTransportError(RuntimeError):
    pass


def fetch_check(url: str) -> CheckResult:
    """Call the local /check endpoint and decode its body.

    A 500 from /check still carries a well-formed result, so the status code
    is not treated as a transport failure.
    """
    try:
        resp = requests.get(url)
    except requests.RequestException as exc:
        raise LocalTransportError(
            f"Failed to reach check endpoint: {exc.__class__.__name__}: {exc}"
        ) from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise LocalTransportError(
            f"Check endpoint returned HTTP {resp.status_code} without JSON"
        ) from exc

    try:
        return CheckResult.from_payload(payload)
    except ValueError as exc:
        raise LocalTransportError(f"Unexpected check payload: {exc}") from exc
