"""padchain.paths
================

Enumeration of every shortest way to move an arm between two keys.

The search is a plain depth-first walk over simple paths (no cell visited
twice). Keypads have at most a dozen cells, so exhaustive enumeration is cheap
and lets us keep the whole tie-break set: which of several equally short
paths is best is only known once the layers above have been costed.
"""

from __future__ import annotations

from typing import FrozenSet, List, Set

from .errors import UnreachablePair
from .keypad import KeypadLayout, neighbors
from .types import ACTIVATE, Key, Move, Path


def _walks(layout: KeypadLayout, current: Key, end: Key, visited: Set[Key], prefix: List[Move], out: List[Path]) -> None:
    if current == end:
        out.append(tuple(prefix))
        return
    for move, target in neighbors(layout, current).items():
        if target in visited:
            continue
        visited.add(target)
        prefix.append(move)
        _walks(layout, target, end, visited, prefix, out)
        prefix.pop()
        visited.remove(target)


def all_walks(layout: KeypadLayout, start: Key, end: Key) -> List[Path]:
    """Return the move sequences of every simple walk from ``start`` to ``end``."""

    layout.position(end)
    out: List[Path] = []
    _walks(layout, start, end, {start}, [], out)
    return out


def shortest_paths(layout: KeypadLayout, start: Key, end: Key) -> FrozenSet[Path]:
    """Return all minimal-length paths ``start`` to ``end``, each ending in ``A``.

    Raises
    ------
    UnreachablePair
        If no walk connects the two keys. With the built-in layouts this
        indicates a broken layout definition.
    """

    walks = all_walks(layout, start, end)
    if not walks:
        raise UnreachablePair(layout.name, start, end)
    shortest = min(len(walk) for walk in walks)
    return frozenset(walk + (ACTIVATE,) for walk in walks if len(walk) == shortest)


__all__ = ["all_walks", "shortest_paths"]
