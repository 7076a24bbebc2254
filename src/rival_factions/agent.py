# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
agent.py — One autonomous rival faction: ledger, population, research and decisions.

Per-turn order inside FactionAgent.update(turn):
  1. ledger tick           (production × multiplier − consumption, clamp ≥ 0)
  2. population            (grow on surplus food, shrink on shortfall)
  3. epoch check          (all techs of the current epoch known, by anyone)
  4. decision cycle        (only when turn − last_action_turn ≥ action_cooldown)
       evaluate_state → generate_decisions → execute_best_decision,
       then pick a background research target if none is set
  5. research progress     (only while a research target is set)

Agents never hold the director.  They receive a FactionLookup for reading
relations and asking for negotiations, plus the shared tech and building
authorities.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from . import config
from .authorities import BuildingAuthority, TechAuthority
from .evaluators import FactionView, NullEvaluator
from .ledger import (Resource, can_afford, deduct, ledger_from_dict,
                     ledger_to_dict, make_ledger, tick_ledger, total_cost)
from .tables import (AGGRESSIVE, ALLIED, BUILD, BUILDING_BOOST, BUILDINGS,
                     BUILDING_SCORES, DEFENDING, DEVELOPING, DIPLOMACY,
                     DIPLOMACY_MULTIPLIER, DIPLOMATIC, ECONOMY, EPOCHS,
                     EXPANDING, EXPLORING, FRIENDLY, HOSTILE, ISOLATIONIST,
                     MILITARY, NEUTRAL, PERSONALITIES, RESEARCH, STATES,
                     TECH_BOOST, TECH_TARGET_RESOURCE, TECHS, TRADER, WAR,
                     epoch_rank, tech_base_score)
from .world import hex_neighbours, parse_key, tile_key


@dataclass
class Decision:
    """A scored candidate action.  Rebuilt every decision cycle, never saved."""
    kind:             str
    target:           str
    priority:         int
    cost:             float
    expected_benefit: float


# Diplomacy priority adjustments
_STATE_DIPLOMACY_BONUS = {
    EXPLORING:  1,
    EXPANDING:  2,
    DEVELOPING: 1,
    DEFENDING: -1,
}

_FLOAT_FIELDS = ('tech_progress', 'military_strength', 'economic_strength',
                 'research_speed', 'growth_multiplier', 'exploration_speed')


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class FactionAgent:
    """A computer-controlled faction.

    ``config`` is one FACTION_CONFIGS entry.  ``techs`` and ``buildings`` are
    the shared authorities; ``lookup`` is the director's read-only view;
    ``evaluator`` decides the behavioural state (NullEvaluator if omitted).
    """

    def __init__(self, config_entry: dict, techs: TechAuthority,
                 buildings: BuildingAuthority, lookup=None, evaluator=None):
        if techs is None:
            raise ValueError("FactionAgent needs a tech authority")
        if buildings is None:
            raise ValueError("FactionAgent needs a building authority")
        personality = config_entry.get('personality')
        if personality not in PERSONALITIES:
            raise ValueError(f"unknown personality {personality!r}")

        self.id:          str = config_entry['id']
        self.name:        str = config_entry.get('name', self.id)
        self.personality: str = personality
        self.state:       str = EXPLORING
        self.epoch:       str = EPOCHS[0]

        self.resources  = make_ledger(config_entry.get('resources'))
        self.population = int(config_entry.get('population', 10))
        row, col        = config_entry.get('start', (0, 0))
        self.territory  = {tile_key(row, col)}

        self.tech_progress:     float = 0.0
        self.military_strength: float = 0.0
        self.economic_strength: float = 0.0
        self.research_speed:    float = 1.0
        self.growth_multiplier: float = 1.0
        self.exploration_speed: float = 1.0
        self.current_research         = None

        self.last_action_turn = 0
        self.action_cooldown  = config.ACTION_COOLDOWN

        self.military_aggression = config_entry.get('military_aggression', 0.5)
        self.economic_focus      = config_entry.get('economic_focus', 0.5)
        self.research_focus      = config_entry.get('research_focus', 0.5)
        self.diplomatic_tendency = config_entry.get('diplomatic_tendency', 0.5)

        self.techs     = techs
        self.buildings = buildings
        self.lookup    = lookup
        self.evaluator = evaluator if evaluator is not None else NullEvaluator()

        self.decisions: list = []
        self.event_log: list = []     # the director swaps in its shared log
        self.metrics         = None   # optional MetricsLogger
        self._turn           = 0

    def __repr__(self) -> str:
        return f"FactionAgent({self.id!r}, {self.personality}, {self.state})"

    # ── Relations (read-only; writes go through the director) ────────────

    @property
    def relations(self) -> dict:
        if self.lookup is None:
            return {}
        return self.lookup.counterparts_of(self.id)

    def relation_with(self, other_id: str) -> str | None:
        """Status towards ``other_id``; None if the director does not know it."""
        if self.lookup is None:
            return NEUTRAL
        if self.lookup.get_faction(other_id) is None:
            return None
        return self.lookup.status_between(self.id, other_id)

    # ── Logging ───────────────────────────────────────────────────────────

    def _log(self, msg: str) -> None:
        line = f"Tick {self._turn:04d}: {msg}"
        self.event_log.append(line)
        print(line)

    def _record(self, event_type: str, target: str = '', detail: str = '') -> None:
        if self.metrics is not None:
            self.metrics.record_event(self._turn, event_type, self.id, target, detail)

    # ══════════════════════════════════════════════════════════════════════
    # Per-turn update
    # ══════════════════════════════════════════════════════════════════════

    def update(self, turn: int) -> None:
        self._turn = turn
        self.update_resources()
        self.update_population()
        self._maybe_advance_epoch()

        if turn - self.last_action_turn >= self.action_cooldown:
            self.evaluate_state()
            self.generate_decisions()
            self.execute_best_decision()
            if self.current_research is None:
                self._pick_background_research()
            self.last_action_turn = turn

        if self.current_research is not None:
            self.update_research()

    def update_resources(self) -> None:
        tick_ledger(self.resources)

    def update_population(self) -> None:
        food   = self.resources['food'].amount
        needed = self.population * config.FOOD_PER_PERSON
        if food >= needed:
            self.population += math.floor(
                (food - needed) * config.GROWTH_RATE * self.growth_multiplier)
        else:
            self.population = max(0, math.floor(self.population * (food / needed)))

    def evaluate_state(self) -> str:
        view = FactionView(self, self.lookup)
        if self.evaluator.threats(view):
            self.state = DEFENDING
        elif self.evaluator.opportunities(view):
            self.state = EXPANDING
        elif self.evaluator.resource_needs(view):
            self.state = DEVELOPING
        else:
            self.state = EXPLORING
        return self.state

    # ══════════════════════════════════════════════════════════════════════
    # Decision generation
    # ══════════════════════════════════════════════════════════════════════

    def generate_decisions(self) -> list:
        """Rebuild the candidate list, highest priority first.

        Equal priorities keep generation order: buildings, research, diplomacy.
        """
        decisions = []
        decisions.extend(self._building_decisions())
        decisions.extend(self._research_decisions())
        decisions.extend(self._diplomacy_decisions())
        decisions.extend(self._military_decisions())
        decisions.sort(key=lambda d: d.priority, reverse=True)
        self.decisions = decisions
        return decisions

    def _building_decisions(self) -> list:
        out = []
        rank = epoch_rank(self.epoch)
        boosted, mult = BUILDING_BOOST[self.personality]
        scores = BUILDING_SCORES.get(self.state, {})
        for btype, info in BUILDINGS.items():
            if epoch_rank(info['epoch']) > rank:
                continue
            if not can_afford(self.resources, info['cost']):
                continue
            benefit, priority = scores.get(btype, (0, 1))
            if info['category'] in boosted:
                benefit *= mult
            if benefit < config.BUILD_BENEFIT_THRESHOLD:
                continue
            out.append(Decision(BUILD, btype, priority,
                                total_cost(info['cost']), benefit))
        return out

    def _research_decisions(self) -> list:
        # One target at a time; progress is never thrown away mid-study.
        if self.current_research is not None:
            return []
        out = []
        rank = epoch_rank(self.epoch)
        boost_key, mult = TECH_BOOST[self.personality]
        for tech, info in TECHS.items():
            if epoch_rank(info['epoch']) > rank:
                continue
            if not self.techs.can_research(tech):
                continue
            benefit, priority = tech_base_score(self.state, info['effects'])
            for kind, _value, target in info['effects']:
                if (kind, target) == boost_key:
                    benefit *= mult
            if benefit < config.RESEARCH_BENEFIT_THRESHOLD:
                continue
            out.append(Decision(RESEARCH, tech, priority, float(info['cost']), benefit))
        return out

    def _diplomacy_priority(self) -> int:
        priority = 5.0
        if self.personality == AGGRESSIVE:
            priority += self.military_aggression * 2
        elif self.personality == DIPLOMATIC:
            priority += self.diplomatic_tendency * 3
        elif self.personality == ISOLATIONIST:
            priority -= self.diplomatic_tendency * 2
        elif self.personality == TRADER:
            priority += self.economic_focus
        priority += _STATE_DIPLOMACY_BONUS.get(self.state, 0)
        return max(1, min(10, int(round(priority))))

    def _diplomacy_decisions(self) -> list:
        out = []
        priority = self._diplomacy_priority()
        food     = self.resources['food'].amount
        for other_id, status in sorted(self.relations.items()):
            benefit, cost = 0.0, 0.0
            if status == WAR:
                if food < 50 or self.military_strength < 30:
                    benefit, cost = 8.0, 20.0
            elif status == HOSTILE:
                if self.military_strength < 40:
                    benefit, cost = 6.0, 15.0
            elif status == NEUTRAL:
                if self.personality in (DIPLOMATIC, TRADER):
                    benefit, cost = 4.0, 10.0
            elif status == FRIENDLY:
                if self.personality == DIPLOMATIC and self.state == DEVELOPING:
                    benefit, cost = 7.0, 25.0
            elif status == ALLIED:
                continue
            benefit *= DIPLOMACY_MULTIPLIER[self.personality]
            if benefit < config.DIPLOMACY_BENEFIT_THRESHOLD or food < cost:
                continue
            out.append(Decision(DIPLOMACY, other_id, priority, cost, benefit))
        return out

    def _military_decisions(self) -> list:
        # Military planning is not modelled; no candidates.
        return []

    # ══════════════════════════════════════════════════════════════════════
    # Decision execution
    # ══════════════════════════════════════════════════════════════════════

    def execute_best_decision(self) -> Decision | None:
        """Carry out the top candidate.  Returns it, or None if there was none."""
        if not self.decisions:
            return None
        best = self.decisions[0]
        if best.kind == BUILD:
            self._execute_build(best)
        elif best.kind == RESEARCH:
            self._execute_research(best)
        elif best.kind == DIPLOMACY:
            self._execute_diplomacy(best)
        elif best.kind in (MILITARY, ECONOMY):
            self._log(f"⚙ {self.name} considers a {best.kind.lower()} action "
                      f"({best.target}); nothing to do yet")
        return best

    def _build_sites(self):
        """Owned tiles first, then their neighbours, each in sorted order."""
        owned = sorted(self.territory)
        yield from owned
        seen = set(owned)
        for key in owned:
            for cand in sorted(hex_neighbours(key)):
                if cand not in seen:
                    seen.add(cand)
                    yield cand

    def _execute_build(self, decision: Decision) -> bool:
        btype = decision.target
        info  = BUILDINGS.get(btype)
        if info is None or not can_afford(self.resources, info['cost']):
            return False
        site = next((t for t in self._build_sites()
                     if self.buildings.can_place_building(btype, t)), None)
        if site is None or not self.buildings.place_building(btype, site):
            return False

        deduct(self.resources, info['cost'])
        for kind, amount in info['production'].items():
            res = self.resources.setdefault(kind, Resource())
            res.production_rate += amount
        if info['category'] == 'defense':
            self.military_strength += config.DEFENSE_MILITARY_GAIN
        self.economic_strength += sum(info['production'].values())
        self.add_territory(site)

        self._log(f"🏗 {self.name} builds a {info['name']} at ({site})")
        self._record('building_placed', site, btype)
        return True

    def _execute_research(self, decision: Decision) -> bool:
        if not self.techs.can_research(decision.target):
            return False
        if decision.target != self.current_research:
            self.tech_progress = 0.0
        self.current_research = decision.target
        self._log(f"🔬 {self.name} begins researching "
                  f"{TECHS[decision.target]['name']}")
        return True

    def _pick_background_research(self) -> str | None:
        """Research runs alongside whatever action won the cycle.

        Takes the best-ranked research candidate from this cycle's list, or
        failing that the cheapest tech open to the current epoch.
        """
        tech = next((d.target for d in self.decisions if d.kind == RESEARCH), None)
        if tech is None:
            rank = epoch_rank(self.epoch)
            open_techs = [t for t, info in TECHS.items()
                          if epoch_rank(info['epoch']) <= rank
                          and self.techs.can_research(t)]
            if not open_techs:
                return None
            tech = min(open_techs, key=lambda t: TECHS[t]['cost'])
        decision = Decision(RESEARCH, tech, 1, float(TECHS[tech]['cost']), 0.0)
        return tech if self._execute_research(decision) else None

    def _execute_diplomacy(self, decision: Decision) -> str | None:
        if self.lookup is None:
            return None
        before = self.relation_with(decision.target)
        after  = self.lookup.negotiate(self.id, decision.target)
        if after is not None and after != before:
            self._log(f"🕊 {self.name} wins over {decision.target}: "
                      f"{before} → {after}")
        return after

    # ══════════════════════════════════════════════════════════════════════
    # Research
    # ══════════════════════════════════════════════════════════════════════

    def update_research(self) -> None:
        if self.current_research is None:
            return
        # Someone else finished it first.
        if self.techs.is_tech_researched(self.current_research):
            self.cancel_research()
            return
        points = self.resources.get('techPoints')
        amount = points.amount if points is not None else 0.0
        speed  = self.research_speed * (0.5 + self.research_focus * 0.5)
        self.tech_progress += amount * config.RESEARCH_RATE * speed
        if self.tech_progress < config.RESEARCH_GOAL:
            return

        tech = self.current_research
        if self.techs.start_research(tech):
            self._apply_tech(tech)
            self.current_research = None
            self._log(f"💡 TECH DISCOVERED: {self.name} masters {TECHS[tech]['name']}")
            self._record('research_completed', detail=tech)
            self._maybe_advance_epoch()
        self.tech_progress = 0.0

    def cancel_research(self) -> None:
        self.current_research = None
        self.tech_progress    = 0.0

    def _apply_tech(self, tech: str) -> None:
        for kind, value, target in TECHS[tech]['effects']:
            if kind == 'PRODUCTION':
                if target == 'ALL':
                    for res in self.resources.values():
                        res.production_multiplier *= value
                else:
                    res = self.resources.get(TECH_TARGET_RESOURCE.get(target, ''))
                    if res is not None:
                        res.production_multiplier *= value
            elif kind == 'POPULATION' and target == 'GROWTH':
                self.growth_multiplier *= value

    def _maybe_advance_epoch(self) -> bool:
        rank = epoch_rank(self.epoch)
        if rank + 1 >= len(EPOCHS):
            return False
        current = [t for t, info in TECHS.items() if info['epoch'] == self.epoch]
        if not all(self.techs.is_tech_researched(t) for t in current):
            return False
        self.epoch = EPOCHS[rank + 1]
        self._log(f"🌅 NEW EPOCH: {self.name} enters the {self.epoch.replace('_', ' ').title()} age")
        self._record('epoch_advanced', detail=self.epoch)
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Territory and timed modifiers
    # ══════════════════════════════════════════════════════════════════════

    def add_territory(self, key: str) -> None:
        self.territory.add(key)

    def remove_territory(self, key: str) -> None:
        self.territory.discard(key)

    def scale_modifier(self, effect_type: str, factor: float) -> bool:
        """Multiply the scalar an effect type acts on.  False for unknown types."""
        if effect_type == 'RESEARCH_SPEED':
            self.research_speed *= factor
        elif effect_type == 'ECONOMIC_STRENGTH':
            self.economic_strength *= factor
        elif effect_type == 'MILITARY_STRENGTH':
            self.military_strength *= factor
        elif effect_type == 'POPULATION_GROWTH':
            self.growth_multiplier *= factor
        elif effect_type == 'RESOURCE_PRODUCTION':
            for res in self.resources.values():
                res.production_multiplier *= factor
        elif effect_type == 'EXPLORATION_SPEED':
            self.exploration_speed *= factor
        else:
            return False
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Persistence
    # ══════════════════════════════════════════════════════════════════════

    def serialize(self) -> dict:
        return {
            'id':                self.id,
            'name':              self.name,
            'personality':       self.personality,
            'state':             self.state,
            'epoch':             self.epoch,
            'resources':         ledger_to_dict(self.resources),
            'population':        self.population,
            'territory':         sorted(self.territory),
            'relations':         dict(sorted(self.relations.items())),
            'tech_progress':     self.tech_progress,
            'military_strength': self.military_strength,
            'economic_strength': self.economic_strength,
            'research_speed':    self.research_speed,
            'growth_multiplier': self.growth_multiplier,
            'exploration_speed': self.exploration_speed,
            'last_action_turn':  self.last_action_turn,
            'action_cooldown':   self.action_cooldown,
        }

    def validate_blob(self, data) -> dict | None:
        """Parsed field values for *data*, or None when anything is off.

        The relation snapshot is informational; relation state is restored
        by the director from its own table.
        """
        if not isinstance(data, dict):
            return None
        if data.get('id') != self.id or data.get('personality') != self.personality:
            return None
        if data.get('state') not in STATES or data.get('epoch') not in EPOCHS:
            return None
        ledger = ledger_from_dict(data.get('resources'))
        if ledger is None or 'food' not in ledger:
            return None
        population = data.get('population')
        if isinstance(population, bool) or not isinstance(population, int) or population < 0:
            return None
        territory = data.get('territory')
        if not isinstance(territory, list) or any(
                not isinstance(k, str) or parse_key(k) is None for k in territory):
            return None
        parsed = {'resources': ledger, 'population': population,
                  'territory': set(territory),
                  'state': data['state'], 'epoch': data['epoch']}
        for name in _FLOAT_FIELDS:
            value = data.get(name, getattr(self, name))
            if not _is_number(value) or value < 0:
                return None
            parsed[name] = float(value)
        for name in ('last_action_turn', 'action_cooldown'):
            value = data.get(name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return None
            parsed[name] = value
        if isinstance(data.get('name'), str):
            parsed['name'] = data['name']
        return parsed

    def apply_blob(self, parsed: dict) -> None:
        for name, value in parsed.items():
            setattr(self, name, value)
        self.current_research = None
        self.decisions        = []

    def deserialize(self, data) -> bool:
        parsed = self.validate_blob(data)
        if parsed is None:
            return False
        self.apply_blob(parsed)
        return True
