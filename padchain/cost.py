"""padchain.cost
===============

Layered cost evaluation. ``minimal_keystrokes(path, n)`` answers: how many
presses must the human make so that the arm ``n`` directional keypads away
types ``path``? Every arm rests on ``A`` between commands, so a path splits
into independent transitions that each start from the previous press.

The memo table is owned by a :class:`CostEvaluator` instance rather than held
at module level. A run builds one evaluator, shares it across every code it
scores and drops it at the end; worker processes each build their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple

from .keypad import DIRECTIONAL_LAYOUT, KeypadLayout
from .paths import shortest_paths
from .types import ACTIVATE, DIRECTIONAL_KEYS, Key, MemoKey, Path


@dataclass
class CostStats:
    hits: int = 0
    misses: int = 0
    path_enumerations: int = 0


def _encode_memo_key(memo_key: MemoKey) -> str:
    path, layers = memo_key
    return f"{''.join(path)}|{layers}"


def _decode_memo_key(raw: str) -> MemoKey:
    moves, _, layers = raw.rpartition("|")
    return tuple(moves), int(layers)


class CostEvaluator:
    """Memoised minimum-keystroke calculator for a chain of directional keypads."""

    def __init__(self, directional: KeypadLayout = DIRECTIONAL_LAYOUT) -> None:
        self.directional = directional
        self.cache: Dict[MemoKey, int] = {}
        self._paths: Dict[Tuple[str, Key, Key], FrozenSet[Path]] = {}
        self.stats = CostStats()

    def paths(self, layout: KeypadLayout, start: Key, end: Key) -> FrozenSet[Path]:
        """Tie-break set of shortest paths, enumerated once per key pair."""

        cache_key = (layout.name, start, end)
        found = self._paths.get(cache_key)
        if found is None:
            found = shortest_paths(layout, start, end)
            self._paths[cache_key] = found
            self.stats.path_enumerations += 1
        return found

    def minimal_keystrokes(self, path: Iterable[str], remaining_layers: int) -> int:
        """Return the human keystrokes needed to make ``path`` appear ``remaining_layers`` keypads down.

        Parameters
        ----------
        path:
            Presses on a directional keypad, normally ending in ``A``.
        remaining_layers:
            Directional keypads still separating the human from the arm
            that must type ``path``. At ``0`` the human types it directly.
        """

        if remaining_layers < 0:
            raise ValueError(f"remaining_layers must be >= 0, got {remaining_layers}")
        path = tuple(path)
        memo_key = (path, remaining_layers)
        cached = self.cache.get(memo_key)
        if cached is not None:
            self.stats.hits += 1
            return cached

        unknown = sorted(set(path) - DIRECTIONAL_KEYS)
        if unknown:
            raise ValueError(f"path {''.join(path)!r} has presses outside the directional keypad: {unknown}")
        self.stats.misses += 1
        if remaining_layers == 0:
            cost = len(path)
        else:
            cost = 0
            current = ACTIVATE
            for press in path:
                cost += self.transition_cost(self.directional, current, press, remaining_layers - 1)
                current = press
        self.cache[memo_key] = cost
        return cost

    def transition_cost(self, layout: KeypadLayout, start: Key, end: Key, remaining_layers: int) -> int:
        """Cheapest way to move ``layout``'s arm from ``start`` to ``end`` and press it."""

        return min(self.minimal_keystrokes(path, remaining_layers) for path in self.paths(layout, start, end))

    # ------------------------------------------------------------------
    # Concrete sequences
    # ------------------------------------------------------------------
    def best_path(self, layout: KeypadLayout, start: Key, end: Key, remaining_layers: int) -> Path:
        """One optimal member of the tie-break set, stable across runs."""

        candidates = sorted(self.paths(layout, start, end))
        return min(candidates, key=lambda path: self.minimal_keystrokes(path, remaining_layers))

    def expand_path(self, path: Iterable[str], remaining_layers: int) -> str:
        """Return a human press string of length ``minimal_keystrokes(path, remaining_layers)``.

        The string grows roughly 2.5x per layer, so this is only meant for
        shallow chains.
        """

        path = tuple(path)
        if remaining_layers == 0:
            return "".join(path)
        parts = []
        current = ACTIVATE
        for press in path:
            best = self.best_path(self.directional, current, press, remaining_layers - 1)
            parts.append(self.expand_path(best, remaining_layers - 1))
            current = press
        return "".join(parts)

    def witness(self, layout: KeypadLayout, start: Key, end: Key, remaining_layers: int) -> str:
        best = self.best_path(layout, start, end, remaining_layers)
        return self.expand_path(best, remaining_layers)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------
    def clear(self) -> None:
        self.cache.clear()
        self._paths.clear()
        self.stats = CostStats()

    def export_cache(self) -> Dict[str, int]:
        """JSON-friendly copy of the memo table."""

        return {_encode_memo_key(memo_key): cost for memo_key, cost in self.cache.items()}

    def load_cache(self, payload: Mapping[str, int]) -> int:
        """Merge entries produced by :meth:`export_cache`; returns how many were added."""

        added = 0
        for raw, cost in payload.items():
            memo_key = _decode_memo_key(raw)
            if memo_key not in self.cache:
                self.cache[memo_key] = int(cost)
                added += 1
        return added


__all__ = ["CostStats", "CostEvaluator"]
