"""HTTP interface for terrain generation."""
