"""Process-wide defaults for puzzle generation."""

from __future__ import annotations

import math
from typing import Optional

from .errors import InvalidConfiguration

# Base of the merge score. Values above e favour absorbing small fragments
# (more small pieces survive); values below e flatten the size preference.
DEFAULT_EVALUATION_BASE = 3.0

_evaluation_base = DEFAULT_EVALUATION_BASE


def validate_evaluation_base(base: float) -> float:
    try:
        value = float(base)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Evaluation base must be a number, got {base!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfiguration(f"Evaluation base must be positive and finite, got {base!r}")
    return value


def get_evaluation_base() -> float:
    """Return the process-wide evaluation base."""

    return _evaluation_base


def set_evaluation_base(base: float) -> None:
    """Replace the process-wide evaluation base (must be > 0)."""

    global _evaluation_base
    _evaluation_base = validate_evaluation_base(base)


def resolve_evaluation_base(base: Optional[float] = None) -> float:
    """Return ``base`` validated, or the process-wide value when ``None``."""

    if base is None:
        return _evaluation_base
    return validate_evaluation_base(base)


__all__ = [
    "DEFAULT_EVALUATION_BASE",
    "get_evaluation_base",
    "set_evaluation_base",
    "resolve_evaluation_base",
    "validate_evaluation_base",
]
