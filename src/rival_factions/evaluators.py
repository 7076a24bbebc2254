# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
evaluators.py — Pluggable behavioural-state evaluation for faction agents.

Architecture
────────────
  FactionView     — read-only snapshot of one faction and its neighbours,
                    built fresh for every evaluation.
  StateEvaluator  — abstract base; ``threats``, ``opportunities`` and
                    ``resource_needs`` each return a (possibly empty) list
                    of Finding objects.
  NullEvaluator   — every query returns [], so agents always fall back to
                    EXPLORING.
  HeuristicEvaluator — reads relations, strengths and the ledger.

The agent maps the findings to a state in fixed priority order:
  threats → DEFENDING, else opportunities → EXPANDING,
  else resource needs → DEVELOPING, else EXPLORING.

Example
───────
  class BorderWatch(StateEvaluator):
      def threats(self, view):
          return [Finding('border', fid) for fid, st in view.relations.items()
                  if st == WAR]
      def opportunities(self, view):
          return []
      def resource_needs(self, view):
          return []
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import List

from . import config
from .tables import ALLIED, FRIENDLY, HOSTILE, WAR


@dataclass(frozen=True)
class Finding:
    """One reason for a state change: what kind, about whom, how strongly."""
    kind:    str
    subject: str
    weight:  float = 1.0


# ══════════════════════════════════════════════════════════════════════════
# FactionView: read-only snapshot
# ══════════════════════════════════════════════════════════════════════════

class FactionView:
    """Snapshot of one faction handed to an evaluator.

    Scalars and ledger numbers are copied at construction; evaluators cannot
    write back through this object.  Counterpart strengths are looked up
    lazily through the same read-only lookup the agent was given.
    """

    def __init__(self, agent, lookup=None) -> None:
        self._id         = agent.id
        self._population = agent.population
        self._territory  = frozenset(agent.territory)
        self._military   = agent.military_strength
        self._economic   = agent.economic_strength
        self._amounts    = {k: r.amount for k, r in agent.resources.items()}
        self._net        = {k: r.net for k, r in agent.resources.items()}
        self._relations  = dict(agent.relations)
        self._lookup     = lookup

    @property
    def faction_id(self) -> str:
        return self._id

    @property
    def population(self) -> int:
        return self._population

    @property
    def territory(self) -> frozenset:
        return self._territory

    @property
    def military_strength(self) -> float:
        return self._military

    @property
    def economic_strength(self) -> float:
        return self._economic

    @property
    def amounts(self) -> dict:
        """Copy of resource kind → amount."""
        return dict(self._amounts)

    @property
    def net_production(self) -> dict:
        """Copy of resource kind → per-turn net change."""
        return dict(self._net)

    @property
    def relations(self) -> dict:
        """Copy of counterpart id → status."""
        return dict(self._relations)

    def military_of(self, faction_id: str) -> float | None:
        if self._lookup is None:
            return None
        other = self._lookup.get_faction(faction_id)
        return None if other is None else other.military_strength


# ══════════════════════════════════════════════════════════════════════════
# StateEvaluator: abstract base
# ══════════════════════════════════════════════════════════════════════════

class StateEvaluator(abc.ABC):

    @abc.abstractmethod
    def threats(self, view: FactionView) -> List[Finding]:
        """Dangers that should push the faction into DEFENDING."""

    @abc.abstractmethod
    def opportunities(self, view: FactionView) -> List[Finding]:
        """Openings that should push the faction into EXPANDING."""

    @abc.abstractmethod
    def resource_needs(self, view: FactionView) -> List[Finding]:
        """Shortfalls that should push the faction into DEVELOPING."""


class NullEvaluator(StateEvaluator):
    """Finds nothing; the faction stays EXPLORING."""

    def threats(self, view):
        return []

    def opportunities(self, view):
        return []

    def resource_needs(self, view):
        return []


class HeuristicEvaluator(StateEvaluator):
    """Relation- and ledger-driven evaluation.

    threats       — counterparts at WAR/HOSTILE with a stronger military
    opportunities — FRIENDLY/ALLIED counterparts; room to grow while food
                    production is in surplus
    resource_needs — stock under ``low_stock`` with no positive net flow;
                     food below what the population eats
    """

    def __init__(self, low_stock: float = 20, tiles_per_capacity: int = 10):
        self.low_stock          = low_stock
        self.tiles_per_capacity = tiles_per_capacity

    def threats(self, view):
        found = []
        for fid, status in view.relations.items():
            if status not in (WAR, HOSTILE):
                continue
            theirs = view.military_of(fid)
            if theirs is not None and theirs > view.military_strength:
                found.append(Finding('hostile_neighbour', fid,
                                     theirs - view.military_strength))
        return found

    def opportunities(self, view):
        found = [Finding('friendly_neighbour', fid)
                 for fid, status in view.relations.items()
                 if status in (FRIENDLY, ALLIED)]
        capacity = len(view.territory) * self.tiles_per_capacity
        if view.net_production.get('food', 0) > 0 and view.population < capacity:
            found.append(Finding('room_to_grow', view.faction_id,
                                 capacity - view.population))
        return found

    def resource_needs(self, view):
        amounts = view.amounts
        found = [Finding('low_stock', kind, self.low_stock - amounts[kind])
                 for kind, net in view.net_production.items()
                 if net <= 0 and amounts[kind] < self.low_stock]
        needed = view.population * config.FOOD_PER_PERSON
        if amounts.get('food', 0) < needed:
            found.append(Finding('hunger', 'food', needed - amounts.get('food', 0)))
        return found


EVALUATORS = {
    'null':      NullEvaluator,
    'heuristic': HeuristicEvaluator,
}
