"""padchain.keypad
=================

Keypad topology. A layout is described once as a small text grid and turned
into an immutable coordinate table; neighbour lookup, single steps and arm
simulation are all derived from that table, so the numeric and the
directional keypad share one code path.

Layouts::

    numeric          directional
    +---+---+---+        +---+---+
    | 7 | 8 | 9 |        | ^ | A |
    +---+---+---+    +---+---+---+
    | 4 | 5 | 6 |    | < | v | > |
    +---+---+---+    +---+---+---+
    | 1 | 2 | 3 |
    +---+---+---+
        | 0 | A |
        +---+---+
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np

from .errors import IllegalMove
from .types import ACTIVATE, OFFSETS, Coord, Key, Move

GAP = "#"


@dataclass(frozen=True, eq=False)
class KeypadLayout:
    """Immutable key to coordinate table for one keypad.

    Parameters
    ----------
    name:
        ``"numeric"`` or ``"directional"``. Used in error messages and as the
        cache namespace for enumerated paths.
    positions:
        Mapping of every key to its ``(row, col)`` cell. Stored as a
        read-only view; layouts compare and hash by identity.
    gap:
        The cell that no arm may ever point at.
    height, width:
        Grid dimensions.
    """

    name: str
    positions: Mapping[Key, Coord]
    gap: Coord
    height: int
    width: int
    _by_coord: Mapping[Coord, Key] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_coord = {coord: key for key, coord in self.positions.items()}
        if len(by_coord) != len(self.positions):
            raise ValueError(f"{self.name} layout maps two keys to the same cell")
        if self.gap in by_coord:
            raise ValueError(f"{self.name} layout places key {by_coord[self.gap]!r} on the gap")
        if len(by_coord) + 1 != self.height * self.width:
            raise ValueError(f"{self.name} layout leaves cells without a key")
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))
        object.__setattr__(self, "_by_coord", MappingProxyType(by_coord))

    @classmethod
    def from_rows(cls, name: str, rows: Sequence[str]) -> "KeypadLayout":
        """Build a layout from equal-width text rows, ``#`` marking the gap."""

        if not rows or len({len(row) for row in rows}) != 1:
            raise ValueError(f"{name} layout rows must be non-empty and rectangular")
        grid = np.array([list(row) for row in rows])
        gaps = np.argwhere(grid == GAP)
        if len(gaps) != 1:
            raise ValueError(f"{name} layout must contain exactly one gap, found {len(gaps)}")
        positions: Dict[Key, Coord] = {}
        for row, col in np.argwhere(grid != GAP):
            key = str(grid[row, col])
            if key in positions:
                raise ValueError(f"{name} layout repeats key {key!r}")
            positions[key] = (int(row), int(col))
        height, width = grid.shape
        return cls(
            name=name,
            positions=positions,
            gap=(int(gaps[0][0]), int(gaps[0][1])),
            height=int(height),
            width=int(width),
        )

    @property
    def keys(self) -> List[Key]:
        return list(self.positions)

    def position(self, key: Key) -> Coord:
        """Lookup the cell of ``key`` with a helpful error."""

        try:
            return self.positions[key]
        except KeyError as exc:
            raise KeyError(f"Unknown key {key!r} for the {self.name} keypad. Keys: {sorted(self.positions)}") from exc

    def key_at(self, coord: Coord) -> Key | None:
        """Return the key at ``coord`` or ``None`` for the gap and off-grid cells."""

        return self._by_coord.get(coord)


NUMERIC_LAYOUT = KeypadLayout.from_rows("numeric", ["789", "456", "123", "#0A"])
DIRECTIONAL_LAYOUT = KeypadLayout.from_rows("directional", ["#^A", "<v>"])


def neighbors(layout: KeypadLayout, key: Key) -> Dict[Move, Key]:
    """Return every legal unit move from ``key`` and the key it lands on."""

    row, col = layout.position(key)
    out: Dict[Move, Key] = {}
    for move, (d_row, d_col) in OFFSETS.items():
        target = layout.key_at((row + d_row, col + d_col))
        if target is not None:
            out[move] = target
    return out


def step(layout: KeypadLayout, key: Key, move: Move) -> Key:
    """Move the arm one cell, raising :class:`IllegalMove` if it cannot."""

    target = neighbors(layout, key).get(move)
    if target is None:
        raise IllegalMove(layout.name, key, move)
    return target


def manhattan(layout: KeypadLayout, start: Key, end: Key) -> int:
    """Grid distance between two keys, ignoring the gap."""

    delta = np.subtract(layout.position(start), layout.position(end))
    return int(np.abs(delta).sum())


def type_sequence(layout: KeypadLayout, presses: Iterable[Move], start: Key = ACTIVATE) -> str:
    """Drive an arm resting on ``start`` with ``presses`` and return what it types.

    Every ``A`` press emits the key under the arm; any other press moves the
    arm. Moving into the gap or off the grid raises :class:`IllegalMove`.
    """

    current = start
    emitted: List[Key] = []
    for press in presses:
        if press == ACTIVATE:
            emitted.append(current)
        else:
            current = step(layout, current, press)
    return "".join(emitted)


__all__ = [
    "GAP",
    "KeypadLayout",
    "NUMERIC_LAYOUT",
    "DIRECTIONAL_LAYOUT",
    "neighbors",
    "step",
    "manhattan",
    "type_sequence",
]
