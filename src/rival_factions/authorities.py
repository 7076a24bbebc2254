# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
authorities.py — Contracts for the collaborators the faction core consumes.

Geometry, technology and building mechanics live outside this package.
The core only talks to them through the three narrow interfaces below.

Contracts
─────────
  DistanceProvider   distance(key_a, key_b) -> int
  TechAuthority      can_research(tech) / start_research(tech) / is_tech_researched(tech)
  BuildingAuthority  can_place_building(type, tile) / place_building(type, tile)

Default implementations
───────────────────────
  world.HexGrid      — distance provider (see world.py)
  TechTree           — shared research registry honouring prerequisites
  BuildingRegistry   — one building per tile, optional bounds check
"""
from __future__ import annotations

import abc

from .tables import BUILDINGS, TECHS


class DistanceProvider(abc.ABC):

    @abc.abstractmethod
    def distance(self, key_a: str, key_b: str) -> int:
        """Hex distance between two tile keys."""


class TechAuthority(abc.ABC):

    @abc.abstractmethod
    def can_research(self, tech: str) -> bool:
        """True if *tech* may be started right now."""

    @abc.abstractmethod
    def start_research(self, tech: str) -> bool:
        """Start (and in the default registry, complete) *tech*.  False if refused."""

    @abc.abstractmethod
    def is_tech_researched(self, tech: str) -> bool:
        """True once *tech* is known."""


class BuildingAuthority(abc.ABC):

    @abc.abstractmethod
    def can_place_building(self, building: str, tile: str) -> bool:
        """True if *building* may be placed on *tile*."""

    @abc.abstractmethod
    def place_building(self, building: str, tile: str) -> bool:
        """Place *building* on *tile*.  False if refused."""


# ══════════════════════════════════════════════════════════════════════════
# Default in-process implementations
# ══════════════════════════════════════════════════════════════════════════

class TechTree(TechAuthority):
    """Shared research registry.

    Research is committed the moment ``start_research`` accepts it; agents
    pay for research in turns of accumulated progress before calling it.
    """

    def __init__(self, researched=None):
        self.researched: set = set(researched or ())

    def can_research(self, tech: str) -> bool:
        info = TECHS.get(tech)
        if info is None or tech in self.researched:
            return False
        return all(req in self.researched for req in info['requires'])

    def start_research(self, tech: str) -> bool:
        if not self.can_research(tech):
            return False
        self.researched.add(tech)
        return True

    def is_tech_researched(self, tech: str) -> bool:
        return tech in self.researched


class BuildingRegistry(BuildingAuthority):
    """Tile → building map; at most one building per tile."""

    def __init__(self, grid=None):
        self.grid = grid                 # optional HexGrid for bounds checks
        self.placed: dict = {}           # tile key → building type

    def can_place_building(self, building: str, tile: str) -> bool:
        if building not in BUILDINGS or tile in self.placed:
            return False
        if self.grid is not None and not self.grid.in_bounds(tile):
            return False
        return True

    def place_building(self, building: str, tile: str) -> bool:
        if not self.can_place_building(building, tile):
            return False
        self.placed[tile] = building
        return True
