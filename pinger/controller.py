from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Awaitable, Callable, Coroutine

from pinger.checks.results import CheckResult
from pinger.clients.check_client import LocalTransportError, fetch_check
from pinger.config import settings
from pinger.state import MonitorSnapshot, MonitorState

logger = logging.getLogger(__name__)

MESSAGE_UNREACHABLE = "Failed to reach endpoint."

Fetcher = Callable[[], Awaitable[CheckResult]]
Subscriber = Callable[[MonitorSnapshot], None]


class MonitorController:
    """
    Owns the monitor state and the two trigger paths that feed it.

    The scheduled path fires immediately when armed and then every
    ``interval_s`` seconds while enabled. The manual path fires on demand,
    whatever the enabled flag says. Both paths write into the same
    last_result/check_count pair and are not serialized against each other.
    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        fetch: Fetcher | None = None,
        *,
        endpoint_url: str | None = None,
        interval_s: float | None = None,
        enabled: bool = True,
        stop_grace_s: float = 5.0,
    ) -> None:
        self.endpoint_url = endpoint_url or settings.CHECK_ENDPOINT_URL
        self.interval_s = settings.POLL_INTERVAL_S if interval_s is None else interval_s
        self.stop_grace_s = stop_grace_s
        self._fetch = fetch or self._fetch_from_endpoint
        self._state = MonitorState(enabled=enabled)
        self._timer: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> MonitorSnapshot:
        return self._state.snapshot()

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None and not self._timer.done()

    # Observers

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._state.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Monitor subscriber %r failed", callback)

    # Lifecycle

    def start(self) -> None:
        if self._state.enabled:
            self._arm_timer()

    def set_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._state.enabled:
            return
        self._state.enabled = enabled
        logger.info("Monitoring %s", "enabled" if enabled else "disabled")
        if enabled:
            self._arm_timer()
        else:
            # Checks already in flight are left to finish.
            self._cancel_timer()
        self._notify()

    async def wait_for_pending(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self, grace_s: float | None = None) -> None:
        timer = self._cancel_timer()
        if timer is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        if not self._pending:
            return
        grace_s = self.stop_grace_s if grace_s is None else grace_s
        _, left_behind = await asyncio.wait(list(self._pending), timeout=grace_s)
        if left_behind:
            # Checks have no timeout; abandon them rather than block teardown.
            logger.warning(
                "Stopping with %d check(s) still in flight after %.1fs",
                len(left_behind),
                grace_s,
            )

    # Trigger paths

    async def run_scheduled_check(self) -> CheckResult | None:
        if not self._state.enabled:
            return None
        if self._state.scheduled_in_flight:
            logger.debug("Scheduled check still in flight; skipping tick")
            return None
        return await self._run_check(manual=False)

    async def run_manual_check(self) -> CheckResult | None:
        if self._state.manual_in_flight:
            logger.debug("Manual check already in flight; ignoring trigger")
            return None
        return await self._run_check(manual=True)

    def trigger_manual_check(self) -> asyncio.Task | None:
        """Fire-and-forget variant of run_manual_check for UI callbacks."""
        if self._state.manual_in_flight:
            return None
        return self._spawn(self.run_manual_check())

    # Internals

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _arm_timer(self) -> None:
        if self.timer_armed:
            return
        self._spawn(self.run_scheduled_check())
        self._timer = asyncio.create_task(self._tick_forever())

    def _cancel_timer(self) -> asyncio.Task | None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        return timer

    async def _tick_forever(self) -> None:
        # Ticks that land while the previous scheduled check is outstanding are
        # skipped, so the scheduled path never overlaps itself.
        while True:
            await asyncio.sleep(self.interval_s)
            self._spawn(self.run_scheduled_check())

    def _set_in_flight(self, manual: bool, value: bool) -> None:
        if manual:
            self._state.manual_in_flight = value
        else:
            self._state.scheduled_in_flight = value

    async def _run_check(self, manual: bool) -> CheckResult:
        self._set_in_flight(manual, True)
        self._notify()
        try:
            result, latency_ms = await self._call_endpoint()
        finally:
            self._set_in_flight(manual, False)
        self._state.record(result, latency_ms)
        self._notify()
        return result

    async def _fetch_from_endpoint(self) -> CheckResult:
        return await asyncio.to_thread(fetch_check, self.endpoint_url)

    async def _call_endpoint(self) -> tuple[CheckResult, int]:
        start = time.perf_counter()
        try:
            result = await self._fetch()
        except LocalTransportError as exc:
            logger.warning("Check endpoint unreachable: %s", exc)
            result = CheckResult(success=False, message=MESSAGE_UNREACHABLE)
        except Exception:
            logger.exception("Unexpected error calling check endpoint")
            result = CheckResult(success=False, message=MESSAGE_UNREACHABLE)
        latency_ms = int((time.perf_counter() - start) * 1000)
        return result, latency_ms
