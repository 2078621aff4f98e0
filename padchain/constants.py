"""padchain.constants
=====================

Chain depths for the two standard scenarios, the witness depth limit and the
default locations of the cost cache and the rejected-code log.
"""

from __future__ import annotations

DEFAULT_LAYERS = 2
PART_LAYERS = {1: 2, 2: 25}
# Above this depth a concrete press sequence is too long to be worth building.
MAX_WITNESS_LAYERS = 4

COST_CACHE_DB = "cost_cache.json"
FAIL_LOG = "malformed_codes.jsonl"

__all__ = [
    "DEFAULT_LAYERS",
    "PART_LAYERS",
    "MAX_WITNESS_LAYERS",
    "COST_CACHE_DB",
    "FAIL_LOG",
]
