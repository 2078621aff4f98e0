"""padchain.errors
==================

Exception hierarchy. ``IllegalMove`` and ``UnreachablePair`` signal defects in
the keypad definitions or the path search and are never caught inside the
package. ``MalformedCode`` is an input problem and is handled per code by the
batch scorer.
"""

from __future__ import annotations


class PadchainError(Exception):
    """Base class for every error raised by :mod:`padchain`."""


class IllegalMove(PadchainError):
    """A step would leave the grid or land on the gap."""

    def __init__(self, layout_name: str, key: str, move: str) -> None:
        super().__init__(f"Move {move!r} is illegal from key {key!r} on the {layout_name} keypad")
        self.layout_name = layout_name
        self.key = key
        self.move = move


class UnreachablePair(PadchainError):
    """No walk exists between two keys that should be connected."""

    def __init__(self, layout_name: str, start: str, end: str) -> None:
        super().__init__(f"No path from {start!r} to {end!r} on the {layout_name} keypad")
        self.layout_name = layout_name
        self.start = start
        self.end = end


class MalformedCode(PadchainError, ValueError):
    """An input code is empty or uses characters outside the numeric keypad."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Malformed code {code!r}: {reason}")
        self.code = code
        self.reason = reason


__all__ = ["PadchainError", "IllegalMove", "UnreachablePair", "MalformedCode"]
