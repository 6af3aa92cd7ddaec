from __future__ import annotations

import json

from pinger.state import MonitorSnapshot


def format_time(snapshot: MonitorSnapshot) -> str | None:
    if snapshot.last_checked_at is None:
        return None
    return snapshot.last_checked_at.astimezone().strftime("%H:%M:%S")


def format_result(snapshot: MonitorSnapshot) -> tuple[str, str]:
    """
    Render the last result as (headline, body).
    The body is the pretty-printed /check payload.
    """
    result = snapshot.last_result
    if result is None:
        return "No ping yet", ""

    # Headline
    number = snapshot.check_count
    if result.success:
        headline = f"✓ Ping #{number} successful"
    else:
        headline = f"✗ Ping #{number} failed"
    if snapshot.last_latency_ms is not None:
        headline += f" ({snapshot.last_latency_ms}ms)"

    # Body
    body = json.dumps(result.to_dict(), indent=2, default=str)
    return headline, body


def format_status(snapshot: MonitorSnapshot) -> str:
    lines = [
        f"Monitoring: {'ON' if snapshot.enabled else 'OFF'}",
        f"Total pings: {snapshot.check_count}",
    ]
    last = format_time(snapshot)
    if last is not None:
        lines.append(f"Last: {last}")
    if snapshot.in_flight:
        lines.append("Ping in progress...")
    return "\n".join(lines)
