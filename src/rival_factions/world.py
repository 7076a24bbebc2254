# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
world.py — Hex coordinate keys and distance queries.

Territory tiles are stored as ``"row,col"`` string keys on an odd-q offset
hex layout.  Distances are measured by converting to cube coordinates.

Public API:
    tile_key(row, col)                      → str
    parse_key(key)                          → (int, int) | None
    hex_distance(key_a, key_b)              → int
    hex_neighbours(key)                     → list[str]
    HexGrid(width, height)                  — default distance provider
    nearest_distance(provider, a, b)        → int | float('inf')
"""
from __future__ import annotations

import numpy as np

from .authorities import DistanceProvider


def tile_key(row: int, col: int) -> str:
    return f"{row},{col}"


def parse_key(key: str) -> tuple | None:
    try:
        row, col = key.split(',')
        return int(row), int(col)
    except (AttributeError, ValueError):
        return None


def _to_cube(q: int, r: int) -> tuple:
    x = q
    z = r - (q - (q & 1)) // 2
    return x, -x - z, z


def hex_distance(key_a: str, key_b: str) -> int:
    qa, ra = parse_key(key_a)
    qb, rb = parse_key(key_b)
    xa, ya, za = _to_cube(qa, ra)
    xb, yb, zb = _to_cube(qb, rb)
    return max(abs(xa - xb), abs(ya - yb), abs(za - zb))


def _cube_array(keys) -> np.ndarray:
    """N×3 int array of cube coordinates for an iterable of tile keys."""
    coords = np.array([parse_key(k) for k in keys], dtype=np.int64).reshape(-1, 2)
    q, r = coords[:, 0], coords[:, 1]
    x = q
    z = r - (q - (q & 1)) // 2
    return np.stack([x, -x - z, z], axis=1)


# ══════════════════════════════════════════════════════════════════════════
# Distance provider
# ══════════════════════════════════════════════════════════════════════════

class HexGrid(DistanceProvider):
    """Bounded odd-q hex map used as the default distance provider.

    ``min_distance`` answers the nearest-tile query between two territories
    in one vectorised pass instead of a Python double loop.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}×{height}")
        self.width  = width
        self.height = height

    def in_bounds(self, key: str) -> bool:
        pos = parse_key(key)
        return pos is not None and 0 <= pos[0] < self.height and 0 <= pos[1] < self.width

    def distance(self, key_a: str, key_b: str) -> int:
        return hex_distance(key_a, key_b)

    def min_distance(self, tiles_a, tiles_b) -> int | float:
        if not tiles_a or not tiles_b:
            return float('inf')
        ca = _cube_array(tiles_a)
        cb = _cube_array(tiles_b)
        diff = np.abs(ca[:, None, :] - cb[None, :, :]).max(axis=2)
        return int(diff.min())


def nearest_distance(provider, tiles_a, tiles_b) -> int | float:
    """Minimum distance between any tile of *tiles_a* and any tile of *tiles_b*.

    Uses the provider's own ``min_distance`` when it has one; otherwise
    falls back to pairwise ``distance`` calls.  Empty territory → inf.
    """
    if not tiles_a or not tiles_b:
        return float('inf')
    fast = getattr(provider, 'min_distance', None)
    if fast is not None:
        return fast(tiles_a, tiles_b)
    return min(provider.distance(a, b) for a in tiles_a for b in tiles_b)


def hex_neighbours(key: str) -> list:
    """Keys of the six tiles at distance 1 from *key* (unbounded)."""
    row, col = parse_key(key)
    out = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == dc == 0:
                continue
            cand = tile_key(row + dr, col + dc)
            if hex_distance(key, cand) == 1:
                out.append(cand)
    return out
