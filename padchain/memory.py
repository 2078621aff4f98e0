"""padchain.memory
==================

Persistence helpers for carrying the cost table between runs. Entries are
only valid for the keypad layouts they were computed with, so the payload
stores a fingerprint of both layouts and is ignored when it does not match.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict

from .constants import COST_CACHE_DB
from .keypad import DIRECTIONAL_LAYOUT, NUMERIC_LAYOUT, KeypadLayout


def layout_fingerprint(*layouts: KeypadLayout) -> str:
    """Stable hash of the given layouts used to validate stored caches."""

    layouts = layouts or (NUMERIC_LAYOUT, DIRECTIONAL_LAYOUT)
    payload = [
        {"name": layout.name, "gap": list(layout.gap), "positions": {k: list(v) for k, v in layout.positions.items()}}
        for layout in layouts
    ]
    return hashlib.md5(json.dumps(payload, sort_keys=True).encode()).hexdigest()


def load_cost_cache(path: str | None = None) -> Dict[str, int]:
    """Load the stored memo table, or an empty one if missing or stale."""

    db_path = Path(path or COST_CACHE_DB)
    if not db_path.exists():
        return {}
    raw: Any = json.loads(db_path.read_text())
    if not isinstance(raw, dict) or raw.get("fingerprint") != layout_fingerprint():
        print(f"[WARN] ignoring cost cache {db_path}: layout fingerprint mismatch")
        return {}
    entries = raw.get("entries", {})
    return {str(key): int(value) for key, value in entries.items()}


def save_cost_cache(entries: Dict[str, int], path: str | None = None) -> None:
    """Persist ``entries`` with the current layout fingerprint."""

    payload = {"fingerprint": layout_fingerprint(), "entries": entries}
    Path(path or COST_CACHE_DB).write_text(json.dumps(payload, indent=2, sort_keys=True))


__all__ = ["layout_fingerprint", "load_cost_cache", "save_cost_cache"]
