"""padchain.logging_utils
=========================

Simple logging utilities, mainly for recording rejected codes so a batch can
be re-run after the input is fixed.
"""

from __future__ import annotations

import json
from pathlib import Path

from .constants import FAIL_LOG


def log_malformed(code: str, reason: str, log_path: str | None = None) -> None:
    """Append a JSON line describing a rejected ``code`` to :data:`FAIL_LOG`."""

    entry = {"code": code, "reason": reason}
    with Path(log_path or FAIL_LOG).open("a") as handle:
        handle.write(json.dumps(entry) + "\n")


__all__ = ["log_malformed"]
