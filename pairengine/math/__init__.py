"""Mathematical utilities for the pair engine.

This package provides fixed-point primitives for price accumulation:
- UQ112x112: unsigned Q112.112 fixed-point encoding and division
"""

from pairengine.math.uq112x112 import Q112, encode, uqdiv

__all__ = ["Q112", "encode", "uqdiv"]
