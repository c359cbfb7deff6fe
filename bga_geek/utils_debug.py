# bga_geek/utils_debug.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

_DEBUG = os.getenv("BGA_GEEK_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}
_LOG_PATH = os.getenv("BGA_GEEK_DEBUG_LOG", "").strip()

# (message, severity) with severity in info | success | warn | error
LogSink = Callable[[str, str], None]

SEVERITIES = ("info", "success", "warn", "error")

_ANSI = {
    "info": "\033[37m",
    "success": "\033[32m",
    "warn": "\033[33m",
    "error": "\033[31m",
}
_RESET = "\033[0m"


def _ts() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _append(line: str) -> bool:
    if not _LOG_PATH:
        return False
    try:
        Path(_LOG_PATH).parent.mkdir(parents=True, exist_ok=True)
        with open(_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        return True
    except OSError:
        return False


def dbg(tag: str, **kv: Any) -> None:
    if not _DEBUG:
        return

    parts = [f"{_ts()} [{tag}]"]
    for k, v in kv.items():
        parts.append(f"{k}={v!r}")
    line = " ".join(parts)

    if not _append(line):
        # If file logging fails (or is off), fall back to stdout
        print(line)


def console_log(message: str, severity: str = "info") -> None:
    """
    Default log sink: colored "[BGG] ..." line on stdout.

    Mirrored into BGA_GEEK_DEBUG_LOG when that is set.
    """
    if severity not in SEVERITIES:
        severity = "info"
    print(f"{_ANSI[severity]}[BGG] {message}{_RESET}")
    _append(f"{_ts()} [{severity}] {message}")
