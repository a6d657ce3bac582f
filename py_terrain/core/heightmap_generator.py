"""
Height field synthesis.

Builds a normalized height grid by cross-fading three latitude bands along
the z axis (beach in the south, plains in the middle, a mountain ridge in
the north) and adding a small seeded jitter for micro-roughness.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog
from scipy import ndimage

from .alea_prng import AleaPRNG
from .errors import InvalidParameter
from .interpolation import clamp01, inverse_lerp, lerp, smoothstep
from .noise_field import NoiseField

logger = structlog.get_logger()


@dataclass
class HeightmapConfig:
    """Band layout and amplitudes of the height synthesis."""

    # Band ranges along normalized z
    beach_range: tuple = (0.0, 0.25)
    plain_range: tuple = (0.25, 0.6)
    mountain_range: tuple = (0.6, 1.0)

    # Noise frequencies (multiplied into normalized coordinates)
    low_frequency: float = 3.0
    high_frequency: float = 6.0
    low_noise_amplitude: float = 0.02
    high_noise_amplitude: float = 0.08

    # Beach: lerp(low, high, beach weight) + 40% of low-frequency noise
    beach_low: float = 0.02
    beach_high: float = 0.06
    beach_noise_share: float = 0.4

    # Plain: flat base + 80% of low-frequency noise
    plain_base: float = 0.08
    plain_noise_share: float = 0.8

    # Mountain: base raised by a north-south ridge peaking at nx = 0.5
    mountain_base: float = 0.15
    ridge_height: float = 0.6
    ridge_falloff: float = 2.8

    # Total jitter span, drawn as (u - 0.5) * span
    jitter_span: float = 0.003


class HeightGrid:
    """
    Immutable square grid of normalized heights, indexed [z, x].

    The wrapped array is marked read-only; every value lies in [0, 1].
    """

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=np.float64)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise InvalidParameter("heights", values.shape, "height grid must be square")
        if values.shape[0] < 2:
            raise InvalidParameter("heights", values.shape, "height grid needs resolution >= 2")
        values.setflags(write=False)
        self._values = values

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def resolution(self) -> int:
        return self._values.shape[0]

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other):
        if not isinstance(other, HeightGrid):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    __hash__ = None

    def sample_normalized(self, u, v):
        """
        Bilinearly interpolate at normalized coordinates.

        Args:
            u: Position(s) along x in [0, 1]
            v: Position(s) along z in [0, 1]

        Returns:
            Interpolated normalized height(s); coordinates outside [0, 1]
            are clamped to the border.
        """
        scale = self.resolution - 1
        cols = np.clip(np.asarray(u, dtype=np.float64), 0.0, 1.0) * scale
        rows = np.clip(np.asarray(v, dtype=np.float64), 0.0, 1.0) * scale
        rows, cols = np.broadcast_arrays(rows, cols)
        result = ndimage.map_coordinates(
            self._values, [rows.ravel(), cols.ravel()], order=1, mode="nearest"
        )
        if rows.ndim == 0:
            return float(result[0])
        return result.reshape(rows.shape)

    def to_list(self) -> List[List[float]]:
        """Row-major nested lists for hand-off to engine glue."""
        return self._values.tolist()


class HeightmapGenerator:
    """
    Synthesizes band-blended height grids.

    Noise is evaluated for the whole grid at once with NumPy; the per-cell
    jitter is drawn from the PRNG up front in row-major order (z outer,
    x inner) so the result does not depend on how the arithmetic is
    vectorized.
    """

    def __init__(self, noise: NoiseField, prng: AleaPRNG, config: Optional[HeightmapConfig] = None):
        """
        Initialize the height synthesizer.

        Args:
            noise: Scalar noise field in [0, 1]
            prng: Random source for the per-cell jitter
            config: Band layout; defaults to HeightmapConfig()
        """
        self.noise = noise
        self.prng = prng
        self.config = config or HeightmapConfig()

    def band_weights(self, nz):
        """Smoothstep memberships of the beach, plain and mountain bands."""
        cfg = self.config
        beach = smoothstep(inverse_lerp(*cfg.beach_range, nz))
        plain = smoothstep(inverse_lerp(*cfg.plain_range, nz))
        mountain = smoothstep(inverse_lerp(*cfg.mountain_range, nz))
        return beach, plain, mountain

    def ridge_factor(self, nx):
        """Triangular ridge profile peaking at the horizontal centre line."""
        return clamp01(1.0 - np.abs(nx - 0.5) * self.config.ridge_falloff)

    def compose(self, nx, nz, low_noise, high_noise):
        """
        Blend the three band heights before jitter.

        Args:
            nx: Normalized x coordinate(s)
            nz: Normalized z coordinate(s)
            low_noise: Low-frequency noise in [0, 1]
            high_noise: High-frequency noise in [0, 1]

        Returns:
            Unclamped blended height(s)
        """
        cfg = self.config
        beach_w, plain_w, mountain_w = self.band_weights(nz)

        low = low_noise * cfg.low_noise_amplitude
        beach_h = lerp(cfg.beach_low, cfg.beach_high, beach_w) + low * cfg.beach_noise_share
        plain_h = cfg.plain_base + low * cfg.plain_noise_share

        mountain_h = (
            cfg.mountain_base
            + self.ridge_factor(nx) * cfg.ridge_height
            + high_noise * cfg.high_noise_amplitude
        )

        # Plain first so the mountain blend has the final say in the north
        height = lerp(beach_h, plain_h, plain_w)
        return lerp(height, mountain_h, mountain_w)

    def height_at(self, nx: float, nz: float, jitter: float = 0.0) -> float:
        """Height at one normalized coordinate, with an explicit jitter."""
        cfg = self.config
        low = self.noise.sample(nx * cfg.low_frequency, nz * cfg.low_frequency)
        high = self.noise.sample(nx * cfg.high_frequency, nz * cfg.high_frequency)
        return float(clamp01(self.compose(nx, nz, low, high) + jitter))

    def generate(self, resolution: int) -> HeightGrid:
        """
        Build a resolution x resolution height grid.

        Args:
            resolution: Samples per side, at least 2

        Returns:
            Immutable HeightGrid indexed [z, x]
        """
        if resolution < 2:
            raise InvalidParameter("heightmap_resolution", resolution, "must be an integer >= 2")

        cfg = self.config
        coords = np.arange(resolution, dtype=np.float64) / (resolution - 1)
        nx = coords[np.newaxis, :]
        nz = coords[:, np.newaxis]

        low_noise = self.noise.sample_grid(coords * cfg.low_frequency, coords * cfg.low_frequency)
        high_noise = self.noise.sample_grid(coords * cfg.high_frequency, coords * cfg.high_frequency)

        heights = self.compose(nx, nz, low_noise, high_noise)

        draws = np.array(self.prng.draw_many(resolution * resolution), dtype=np.float64)
        jitter = (draws.reshape(resolution, resolution) - 0.5) * cfg.jitter_span

        grid = HeightGrid(clamp01(heights + jitter))
        logger.debug(
            "Heightmap generated",
            resolution=resolution,
            min_height=float(grid.values.min()),
            max_height=float(grid.values.max()),
        )
        return grid
