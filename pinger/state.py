from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from pinger.checks.results import CheckResult


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MonitorSnapshot:
    enabled: bool
    last_result: CheckResult | None
    check_count: int
    scheduled_in_flight: bool
    manual_in_flight: bool
    last_checked_at: datetime | None
    last_latency_ms: int | None

    @property
    def in_flight(self) -> bool:
        return self.scheduled_in_flight or self.manual_in_flight


@dataclass
class MonitorState:
    enabled: bool = True
    last_result: CheckResult | None = None
    check_count: int = 0
    scheduled_in_flight: bool = False
    manual_in_flight: bool = False
    last_checked_at: datetime | None = None
    last_latency_ms: int | None = None

    def record(self, result: CheckResult, latency_ms: int) -> None:
        # Last writer wins when both trigger paths complete close together.
        self.check_count += 1
        self.last_result = result
        self.last_latency_ms = latency_ms
        self.last_checked_at = utcnow()

    def snapshot(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            enabled=self.enabled,
            last_result=self.last_result,
            check_count=self.check_count,
            scheduled_in_flight=self.scheduled_in_flight,
            manual_in_flight=self.manual_in_flight,
            last_checked_at=self.last_checked_at,
            last_latency_ms=self.last_latency_ms,
        )
