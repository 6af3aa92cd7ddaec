from __future__ import annotations

from typing import Any

import requests


class UpstreamCallError(RuntimeError):
    pass


def _reject_constant(token: str) -> Any:
    # NaN/Infinity are not JSON and cannot be re-encoded in the /check body.
    raise ValueError(f"non-standard JSON constant {token!r}")


def fetch_target_json(url: str) -> Any:
    # No timeout and no retry: the probe waits as long as the transport does.
    try:
        resp = requests.get(url)
    except requests.RequestException as exc:
        raise UpstreamCallError(f"{exc.__class__.__name__}: {exc}") from exc

    # Status code is ignored; any parseable body counts as a response.
    try:
        return resp.json(parse_constant=_reject_constant)
    except ValueError as exc:
        snippet = resp.text[:240].replace("\n", "\\n")
        raise UpstreamCallError(
            f"invalid JSON from target (HTTP {resp.status_code}): {exc}: {snippet}"
        ) from exc
