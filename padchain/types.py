"""padchain.types
=================

Type aliases and the fixed key alphabets shared by every module in the
package. Keys and moves are single-character strings so that paths print the
same way they are written on the keypads themselves.

No functions live here; importing the module has no side effects.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Core representations
# ---------------------------------------------------------------------------
Key = str
Move = str
Coord = Tuple[int, int]
Path = Tuple[Move, ...]
MemoKey = Tuple[Path, int]

UP = "^"
DOWN = "v"
LEFT = "<"
RIGHT = ">"
ACTIVATE = "A"

# Unit offsets in (row, col) order. Rows grow downwards.
OFFSETS: Dict[Move, Coord] = {
    UP: (-1, 0),
    DOWN: (1, 0),
    LEFT: (0, -1),
    RIGHT: (0, 1),
}

NUMERIC_KEYS: FrozenSet[Key] = frozenset("0123456789" + ACTIVATE)
DIRECTIONAL_KEYS: FrozenSet[Key] = frozenset((UP, DOWN, LEFT, RIGHT, ACTIVATE))


__all__ = [
    "Key",
    "Move",
    "Coord",
    "Path",
    "MemoKey",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "ACTIVATE",
    "OFFSETS",
    "NUMERIC_KEYS",
    "DIRECTIONAL_KEYS",
]
