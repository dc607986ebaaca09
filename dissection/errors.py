"""Exception types raised by the dissection generator."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Raised when a generation parameter is out of its valid range."""


class ExactCoverError(RuntimeError):
    """Raised when an exact-cover problem is registered incorrectly.

    This signals a programming error in the caller, not an unsolvable problem.
    """


class InvalidRandomValue(ValueError):
    """Raised when a random source yields something outside [0, 1)."""


__all__ = ["InvalidConfiguration", "ExactCoverError", "InvalidRandomValue"]
