# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
director.py — Owns every rival faction, drives the turn and drifts their relations.

Call order per tick (FactionDirector.update):
    for each agent:  agent.update(turn)
    update_relations()          — one random draw per ordered pair (A, B)
    catalog.update_events()     — age effects, purge lapsed events
    turn += 1

Relation drift
──────────────
  probability  = proximity term   (+0.2 if nearest tiles < 3 apart, −0.1 if > 8)
               + compatibility × 0.3
               + military balance × 0.2   (only when |balance| > 0.5)
               + economic balance × 0.1   (only when |balance| > 0.5)
  A draw below |probability| moves the pair one rung: up when the
  probability is positive, down when it is negative.  Realised moves to
  FRIENDLY or ALLIED then try to materialise the matching treaty, paid by A.
"""
from __future__ import annotations

import random

from . import config
from .agent import FactionAgent
from .catalog import DiplomaticEventCatalog
from .relations import FactionLookup, RelationTable
from .tables import (AGGRESSIVE, ALLIED, COMPATIBILITY, DIPLOMATIC, FRIENDLY,
                     HOSTILE, NEGOTIATED_EFFECTS, NEUTRAL, PERSONALITIES, WAR,
                     next_status, status_rank)
from .world import nearest_distance

_STATUS_GLYPH = {
    WAR:      '⚔',
    HOSTILE:  '😠',
    NEUTRAL:  '⚖',
    FRIENDLY: '🤝',
    ALLIED:   '🛡',
}


def initial_status(personality_a: str, personality_b: str) -> str:
    """Starting relation for a pair of personalities."""
    if AGGRESSIVE in (personality_a, personality_b):
        return HOSTILE
    if personality_a == personality_b == DIPLOMATIC:
        return FRIENDLY
    return NEUTRAL


def _balance(ours: float, theirs: float) -> float:
    total = ours + theirs
    if total == 0:
        return 0.0
    return (ours - theirs) / total


class FactionDirector(FactionLookup):
    """Creates the factions from ``configs`` and runs them turn by turn.

    ``distance``, ``techs`` and ``buildings`` are required collaborators.
    ``rng`` is anything with a ``random()`` method returning floats in
    [0, 1); pass ``random.Random(seed)`` for reproducible runs.
    ``evaluator_factory`` maps a faction config entry to a StateEvaluator.
    """

    def __init__(self, distance, techs, buildings, configs=None, rng=None,
                 evaluator_factory=None, metrics=None):
        for label, dep in (('distance provider', distance),
                           ('tech authority', techs),
                           ('building authority', buildings)):
            if dep is None:
                raise ValueError(f"FactionDirector needs a {label}")
        self.distance  = distance
        self.techs     = techs
        self.buildings = buildings
        self.configs   = list(config.FACTION_CONFIGS if configs is None else configs)
        self._check_configs(self.configs)

        self.rng               = rng if rng is not None else random.Random()
        self.evaluator_factory = evaluator_factory
        self.metrics           = metrics

        self.relations = RelationTable()
        self.catalog   = DiplomaticEventCatalog(self.relations)
        self.factions: dict = {}
        self.event_log: list = []
        self.turn = 0
        self.initialize_factions()

    @staticmethod
    def _check_configs(configs: list) -> None:
        seen = set()
        for entry in configs:
            fid = entry.get('id')
            if not isinstance(fid, str) or not fid:
                raise ValueError(f"faction config without a usable id: {entry!r}")
            if fid in seen:
                raise ValueError(f"duplicate faction id {fid!r}")
            if entry.get('personality') not in PERSONALITIES:
                raise ValueError(f"faction {fid!r} has unknown personality "
                                 f"{entry.get('personality')!r}")
            seen.add(fid)

    # ── Setup ─────────────────────────────────────────────────────────────

    def initialize_factions(self) -> None:
        """(Re)create every faction and seed the relation table."""
        self.reset()
        for entry in self.configs:
            evaluator = (self.evaluator_factory(entry)
                         if self.evaluator_factory is not None else None)
            agent = FactionAgent(entry, self.techs, self.buildings,
                                 lookup=self, evaluator=evaluator)
            agent.event_log = self.event_log
            agent.metrics   = self.metrics
            for other in self.factions.values():
                self.relations.set(agent.id, other.id,
                                   initial_status(agent.personality, other.personality))
            self.factions[agent.id] = agent

    def reset(self) -> None:
        self.factions.clear()
        self.relations.clear()
        self.catalog = DiplomaticEventCatalog(self.relations)
        self.turn    = 0

    # ── FactionLookup ─────────────────────────────────────────────────────

    def get_faction(self, faction_id: str):
        return self.factions.get(faction_id)

    def status_between(self, a: str, b: str) -> str:
        return self.relations.get(a, b)

    def counterparts_of(self, faction_id: str) -> dict:
        return self.relations.counterparts(faction_id)

    def negotiate(self, source_id: str, target_id: str) -> str | None:
        """Improve the pair one rung on the source's initiative.

        The matching treaty (if any) is charged to the source, and both sides
        take the standing multipliers of the new status.  Returns the
        resulting status, or None for unknown or identical ids.
        """
        source = self.factions.get(source_id)
        target = self.factions.get(target_id)
        if source is None or target is None or source is target:
            return None
        current = self.relations.get(source_id, target_id)
        new     = next_status(current, improve=True)
        if new != current:
            self._apply_transition(source, target, current, new)
            for agent in (source, target):
                for effect_type, factor in NEGOTIATED_EFFECTS[new]:
                    agent.scale_modifier(effect_type, factor)
        return self.relations.get(source_id, target_id)

    # ── Accessors ─────────────────────────────────────────────────────────

    def get_factions(self) -> dict:
        return dict(self.factions)

    def get_turn(self) -> int:
        return self.turn

    def get_event_catalog(self) -> DiplomaticEventCatalog:
        return self.catalog

    # ══════════════════════════════════════════════════════════════════════
    # Turn
    # ══════════════════════════════════════════════════════════════════════

    def update(self) -> None:
        for agent in self.factions.values():
            agent.update(self.turn)
        self.update_relations()
        for ev in self.catalog.update_events():
            self._log(f"⌛ TREATY LAPSED: {ev.type.replace('_', ' ').lower()} "
                      f"between {ev.source} and {ev.target}")
            self._record('event_expired', ev.source, ev.target, ev.type)
        self.turn += 1

    def update_relations(self) -> None:
        """One draw per ordered pair; a hit moves the pair exactly one rung."""
        agents = list(self.factions.values())
        for a in agents:
            for b in agents:
                if a is b:
                    continue
                current = self.relations.get(a.id, b.id)
                prob    = self.transition_probability(a, b)
                if self.rng.random() >= abs(prob):
                    continue
                new = next_status(current, improve=prob > 0)
                if new != current:
                    self._apply_transition(a, b, current, new)

    # ── Drift signals ─────────────────────────────────────────────────────

    def calculate_proximity(self, a, b) -> float:
        return nearest_distance(self.distance, a.territory, b.territory)

    @staticmethod
    def calculate_compatibility(a, b) -> float:
        return COMPATIBILITY[a.personality][b.personality]

    @staticmethod
    def calculate_military_balance(a, b) -> float:
        return _balance(a.military_strength, b.military_strength)

    @staticmethod
    def calculate_economic_balance(a, b) -> float:
        return _balance(a.economic_strength, b.economic_strength)

    def transition_probability(self, a, b) -> float:
        prob = 0.0
        proximity = self.calculate_proximity(a, b)
        if proximity < config.PROXIMITY_NEAR:
            prob += config.PROXIMITY_NEAR_BONUS
        elif proximity > config.PROXIMITY_FAR:
            prob -= config.PROXIMITY_FAR_PENALTY

        prob += self.calculate_compatibility(a, b) * config.COMPATIBILITY_WEIGHT

        military = self.calculate_military_balance(a, b)
        if abs(military) > config.BALANCE_THRESHOLD:
            prob += military * config.MILITARY_WEIGHT
        economic = self.calculate_economic_balance(a, b)
        if abs(economic) > config.BALANCE_THRESHOLD:
            prob += economic * config.ECONOMIC_WEIGHT
        return prob

    # ── Realised changes ──────────────────────────────────────────────────

    def _apply_transition(self, a, b, current: str, new: str) -> None:
        # Every status write goes through the shared table, then the treaty.
        self.relations.set(a.id, b.id, new)
        if new == WAR:
            self._log(f"⚔ WAR DECLARED: {a.name} and {b.name}")
        else:
            verb = 'warm' if status_rank(new) > status_rank(current) else 'cool'
            self._log(f"{_STATUS_GLYPH[new]} RELATIONS {verb.upper()}: "
                      f"{a.name} / {b.name}  {current} → {new}")
        self._record('status_change', a.id, b.id, f"{current}->{new}")

        if new == NEUTRAL:
            return
        event_type = self.catalog.event_type_for(new)
        if event_type is None:
            return
        event = self.catalog.create_event(event_type, a, b, new)
        if event is None or not self.catalog.execute_event(event, a, b):
            return
        self._log(f"📜 TREATY: {a.name} and {b.name} sign a "
                  f"{event_type.replace('_', ' ').lower()} ({event.id})")
        self._record('event_executed', a.id, b.id, event_type)

    def _log(self, msg: str) -> None:
        line = f"Tick {self.turn:04d}: {msg}"
        self.event_log.append(line)
        print(line)

    def _record(self, event_type: str, actor: str = '', target: str = '',
                detail: str = '') -> None:
        if self.metrics is not None:
            self.metrics.record_event(self.turn, event_type, actor, target, detail)

    # ══════════════════════════════════════════════════════════════════════
    # Persistence
    # ══════════════════════════════════════════════════════════════════════

    def serialize(self) -> dict:
        return {
            'turn':      self.turn,
            'factions':  {fid: agent.serialize() for fid, agent in self.factions.items()},
            'relations': self.relations.to_list(),
            'catalog':   self.catalog.serialize(),
        }

    def deserialize(self, data) -> bool:
        """Restore a serialize() blob.

        Everything is validated before anything changes; on malformed input
        the director is left as it was and False is returned.  Blobs and
        relation rows for unknown faction ids are ignored.
        """
        if not isinstance(data, dict):
            return False
        turn = data.get('turn')
        if isinstance(turn, bool) or not isinstance(turn, int) or turn < 0:
            return False
        blobs = data.get('factions')
        if not isinstance(blobs, dict):
            return False

        parsed = {}
        for fid, blob in blobs.items():
            agent = self.factions.get(fid)
            if agent is None:
                continue
            values = agent.validate_blob(blob)
            if values is None:
                return False
            parsed[fid] = values

        triples = RelationTable.parse(data.get('relations'))
        if triples is None:
            return False

        staged = DiplomaticEventCatalog(self.relations)
        if not staged.deserialize(data.get('catalog'), self.factions):
            return False

        for fid, values in parsed.items():
            self.factions[fid].apply_blob(values)
        self.relations.clear()
        for a, b, status in triples:
            if a in self.factions and b in self.factions:
                self.relations.set(a, b, status)
        self.catalog = staged
        self.turn    = turn
        return True
