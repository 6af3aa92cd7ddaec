from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from pinger.config import settings
from pinger.controller import MonitorController
from pinger.formatting import format_result, format_status
from pinger.state import MonitorSnapshot

HELP_TEXT = "commands: p|ping  on  off  s|status  q|quit"


class ConsoleRenderer:
    """Prints pending state and every new result the controller records."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self._seen_count = 0
        self._was_in_flight = False

    def _write(self, text: str) -> None:
        out = self.out or sys.stdout
        out.write(text + "\n")
        out.flush()

    def __call__(self, snapshot: MonitorSnapshot) -> None:
        if snapshot.in_flight and not self._was_in_flight:
            self._write("PING target... waiting for response")
        self._was_in_flight = snapshot.in_flight

        if snapshot.check_count != self._seen_count:
            self._seen_count = snapshot.check_count
            headline, body = format_result(snapshot)
            self._write(headline)
            if body:
                self._write(body)


def handle_command(controller: MonitorController, line: str, out: TextIO) -> bool:
    """Apply one console command. Returns False when the session should end."""
    command = line.strip().lower()
    if not command:
        return True

    if command in {"q", "quit", "exit"}:
        return False
    if command in {"p", "ping"}:
        if controller.trigger_manual_check() is None:
            out.write("Manual ping already running\n")
    elif command == "on":
        controller.set_enabled(True)
        out.write("Monitoring: ON\n")
    elif command == "off":
        controller.set_enabled(False)
        out.write("Monitoring: OFF\n")
    elif command in {"s", "status"}:
        out.write(format_status(controller.state) + "\n")
    else:
        out.write(HELP_TEXT + "\n")
    out.flush()
    return True


async def run_console(
    controller: MonitorController,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> None:
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    unsubscribe = controller.subscribe(ConsoleRenderer(out))
    out.write(HELP_TEXT + "\n")
    controller.start()
    try:
        while True:
            line = await asyncio.to_thread(stdin.readline)
            if not line:
                break
            if not handle_command(controller, line, out):
                break
    finally:
        await controller.stop()
        unsubscribe()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pinger",
        description="Poll the pinger /check endpoint and trigger manual pings.",
    )
    parser.add_argument(
        "--endpoint",
        default=settings.CHECK_ENDPOINT_URL,
        help="URL of the /check endpoint (default: %(default)s)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.POLL_INTERVAL_S,
        help="Seconds between scheduled checks (default: %(default)s)",
    )
    parser.add_argument(
        "--disabled",
        action="store_true",
        help="Start with scheduled monitoring switched off",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.interval <= 0:
        parser.error("--interval must be positive")

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    controller = MonitorController(
        endpoint_url=args.endpoint,
        interval_s=args.interval,
        enabled=not args.disabled,
    )
    try:
        asyncio.run(run_console(controller))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
