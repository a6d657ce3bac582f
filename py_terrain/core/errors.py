"""Exceptions raised by terrain generation."""

from typing import Optional


class TerrainGenerationError(ValueError):
    """Base class for all terrain generation failures."""


class InvalidParameter(TerrainGenerationError):
    """A generation parameter is outside its valid domain."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class UnsupportedLayerCount(TerrainGenerationError):
    """The layer list cannot be weighted by the active layer policy."""

    def __init__(self, layer_count: int, expected: Optional[int] = None):
        self.layer_count = layer_count
        self.expected = expected
        message = f"Cannot compute splatmap for {layer_count} layers without roles"
        if expected is not None:
            message += f" (expected {expected} or explicit layer roles)"
        super().__init__(message)


class PlacementExhausted(TerrainGenerationError):
    """A decoration slot used up its retry budget without an accepted sample."""

    def __init__(self, kind: str, slot: int, attempts: int, threshold: float):
        self.kind = kind
        self.slot = slot
        self.attempts = attempts
        self.threshold = threshold
        super().__init__(
            f"Could not place {kind} #{slot} above elevation {threshold} "
            f"after {attempts} attempts"
        )
