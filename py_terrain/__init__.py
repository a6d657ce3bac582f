"""
Deterministic procedural terrain synthesis.
"""

__version__ = "0.1.0"
