"""Launcher for `python -m gui`.

Runs the startup bootstrap once, prints a JSON summary of the dependency
bundle and releases it again. Useful to check a data directory (version
migration, session validity, SRI) without starting a UI.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from config import settings
from gui.app.bootstrap import AppDependencies, BootstrapError, app_dependencies
from gui.app.timing import TimingLogger
from gui.services.logging_service import LoggingService, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chess-client", description=__doc__)
    parser.add_argument("--data-dir", default=settings.DATA_DIR, help="application data directory")
    parser.add_argument("--sounds-dir", default=settings.SOUNDS_DIR, help="sound theme directory")
    parser.add_argument("--timing-json", help="write startup step timings to this file")
    parser.add_argument("--log-jsonl", help="write log records captured during startup to this file")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def summarize(deps: AppDependencies) -> dict[str, Any]:
    _pool, sound_ids = deps.sound_pool
    session = deps.user_session
    return {
        "version": deps.package_info.version,
        "device": deps.device_info.as_dict(),
        "sri": deps.sri,
        "user": session.user.id if session is not None else None,
        "sounds": sorted(s.value for s in sound_ids),
        "engine_max_memory_mb": deps.engine_max_memory_mb,
    }


async def _run(args: argparse.Namespace, timing: TimingLogger) -> dict[str, Any]:
    app_dependencies.configure(data_dir=args.data_dir, sounds_dir=args.sounds_dir, timing=timing)
    try:
        deps = await app_dependencies.get()
        return summarize(deps)
    finally:
        await app_dependencies.teardown()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    log_capture = LoggingService()
    log_capture.attach_root()
    timing = TimingLogger()
    try:
        summary = asyncio.run(_run(args, timing))
    except BootstrapError as exc:
        logging.getLogger(__name__).critical("Startup failed: %s", exc, exc_info=True)
        return 1
    finally:
        log_capture.detach_root()
        if args.log_jsonl:
            log_capture.export_jsonl(args.log_jsonl)
    summary["warnings"] = [e.message for e in log_capture.at_least(logging.WARNING)]
    summary["startup_timing"] = timing.as_dict()
    if args.timing_json:
        with open(args.timing_json, "w", encoding="utf-8") as f:
            json.dump(timing.as_dict(), f, indent=2, sort_keys=True)
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
