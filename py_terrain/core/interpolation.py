"""
Scalar easing helpers shared by the generation stages.

All helpers accept floats or NumPy arrays and mirror the usual game-engine
semantics: ``inverse_lerp`` and ``smoothstep`` clamp their parameter to
[0, 1], ``lerp`` does not.
"""

from typing import Union

import numpy as np

Scalar = Union[float, np.ndarray]


def clamp01(value: Scalar) -> Scalar:
    """Clamp to the unit interval."""
    return np.clip(value, 0.0, 1.0)


def lerp(a: Scalar, b: Scalar, t: Scalar) -> Scalar:
    """Linear interpolation from a to b."""
    return a + (b - a) * t


def inverse_lerp(a: float, b: float, value: Scalar) -> Scalar:
    """Position of value between a and b, clamped to [0, 1]."""
    if a == b:
        return np.zeros_like(value, dtype=np.float64) if isinstance(value, np.ndarray) else 0.0
    return clamp01((value - a) / (b - a))


def smoothstep(t: Scalar) -> Scalar:
    """Hermite ease 0 -> 1 with zero slope at both ends."""
    t = clamp01(t)
    return t * t * (3.0 - 2.0 * t)
