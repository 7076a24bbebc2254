"""
conftest.py — shared fakes and builders for the rival-faction test suite.
"""

import pytest

from rival_factions.agent import FactionAgent
from rival_factions.authorities import BuildingAuthority, DistanceProvider, TechAuthority
from rival_factions.director import FactionDirector
from rival_factions.world import HexGrid, hex_distance


# ─────────────────────────────────────────────────────
# Collaborator fakes
# ─────────────────────────────────────────────────────

class ScriptedRNG:
    """Returns the given draws in order, cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class PairwiseDistance(DistanceProvider):
    """Distance provider without a vectorised min_distance."""

    def distance(self, key_a, key_b):
        return hex_distance(key_a, key_b)


class OpenTechs(TechAuthority):
    """Accepts any tech not yet researched; ignores prerequisites."""

    def __init__(self, researched=()):
        self.researched = set(researched)
        self.started = []

    def can_research(self, tech):
        return tech not in self.researched

    def start_research(self, tech):
        if tech in self.researched:
            return False
        self.researched.add(tech)
        self.started.append(tech)
        return True

    def is_tech_researched(self, tech):
        return tech in self.researched


class OpenBuildings(BuildingAuthority):
    """Accepts every placement unless the tile is listed in ``blocked``."""

    def __init__(self, blocked=()):
        self.blocked = set(blocked)
        self.placed = []

    def can_place_building(self, building, tile):
        return tile not in self.blocked

    def place_building(self, building, tile):
        if tile in self.blocked:
            return False
        self.placed.append((building, tile))
        self.blocked.add(tile)
        return True


# ─────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────

def faction_config(fid, personality, start=(0, 0), resources=None, **overrides):
    entry = {
        'id':                  fid,
        'name':                f'Faction {fid}',
        'personality':         personality,
        'start':               start,
        'resources':           dict(resources or {}),
        'population':          10,
        'military_aggression': 0.8 if personality == 'AGGRESSIVE' else 0.3,
        'economic_focus':      0.5,
        'research_focus':      0.5,
        'diplomatic_tendency': 0.8 if personality == 'DIPLOMATIC' else 0.1,
    }
    entry.update(overrides)
    return entry


RICH = {kind: (1000, 0, 0) for kind in
        ('food', 'wood', 'stone', 'gold', 'metal', 'fuel', 'techPoints')}


@pytest.fixture
def techs():
    return OpenTechs()


@pytest.fixture
def buildings():
    return OpenBuildings()


@pytest.fixture
def make_agent(techs, buildings):
    def _make(fid='a1', personality='DIPLOMATIC', start=(0, 0), resources=None,
              lookup=None, evaluator=None, **overrides):
        entry = faction_config(fid, personality, start, resources, **overrides)
        return FactionAgent(entry, techs, buildings, lookup=lookup, evaluator=evaluator)
    return _make


@pytest.fixture
def make_director(techs, buildings):
    def _make(configs, rng=None, distance=None, **kwargs):
        return FactionDirector(distance if distance is not None else HexGrid(20, 20),
                               techs, buildings, configs=configs, rng=rng, **kwargs)
    return _make
