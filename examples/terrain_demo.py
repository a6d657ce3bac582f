#!/usr/bin/env python3
"""
Simple demo script showing terrain generation capabilities.
"""

import numpy as np
from py_terrain.config import configure_logging, list_layer_presets, settings
from py_terrain.core import TerrainExtent, TerrainSession


def main():
    """Demonstrate terrain generation."""
    configure_logging("WARNING", "plain")

    print("Py-Terrain Generation Demo")
    print("=" * 40)

    session = TerrainSession()
    params = settings.default_generation_params(
        heightmap_resolution=129,
        alphamap_resolution=64,
        extent=TerrainExtent(500, 120, 500),
    )

    print(f"\nGenerating terrain (seed {params.seed}, {params.heightmap_resolution}x{params.heightmap_resolution})...")
    terrain = session.generate_if_needed(params)
    summary = terrain.summary()

    print(f"  Height range: {summary['height_min']:.3f}-{summary['height_max']:.3f}")
    print(f"  Average height: {summary['height_mean']:.3f}")
    print(f"  Steepest slope: {summary['slope_max'] * 90:.1f} degrees")

    # Show height distribution
    heights = terrain.heights.values
    bins = [0.0, 0.05, 0.1, 0.2, 0.4, 0.6, 0.8, 1.0]
    hist, _ = np.histogram(heights, bins=bins)
    print("  Height distribution:")
    for i in range(len(bins) - 1):
        bar = '#' * int(hist[i] / max(hist) * 20)
        print(f"    {bins[i]:.2f}-{bins[i+1]:.2f}: {bar} ({hist[i]})")

    print("\n  Layer coverage:")
    for name, share in summary["layer_coverage"].items():
        print(f"    {name:18s} {share * 100:5.1f}%")

    print(f"\n  Trees placed: {summary['tree_count']} / {params.tree_count}")
    print(f"  Grass placed: {summary['grass_count']} / {params.grass_count}")

    # Same parameters reuse the session terrain
    assert session.generate_if_needed(params) is terrain

    print("\nRegenerating with another seed...")
    other = session.regenerate(settings.default_generation_params(
        seed=params.seed + 1,
        heightmap_resolution=129,
        alphamap_resolution=64,
    ))
    changed = np.mean(np.abs(other.heights.values - heights))
    print(f"  Mean height change: {changed:.4f}")

    print("\nAvailable layer presets:")
    for name in list_layer_presets():
        print(f"  - {name}")


if __name__ == "__main__":
    main()
