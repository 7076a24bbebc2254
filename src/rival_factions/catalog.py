# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
catalog.py — Diplomatic event templates, the active-event registry and timed effects.

Call order each tick (after the director's relation pass):
    catalog.update_events()

Public API used by the director:
    create_event(type, source, target, status)  → DiplomaticEvent | None
    execute_event(event, source, target)        → bool
    event_type_for(status)                      → str | None
    get_active_effects(faction_id)              → [Effect]

Lifetimes are counted in catalog ticks only.  An event created on tick t
with duration d is purged by the first aging pass where  tick - t >= d.
Each active effect loses one turn per aging pass; when it reaches zero it
is dropped and its multiplier is divided back out of the faction.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace

from .ledger import can_afford, deduct
from .relations import RelationTable
from .tables import ALLIED, FRIENDLY, HOSTILE, NEUTRAL, STATUS_LADDER, WAR

# ══════════════════════════════════════════════════════════════════════════
# Event and effect types
# ══════════════════════════════════════════════════════════════════════════

TRADE_AGREEMENT     = 'TRADE_AGREEMENT'
RESEARCH_PACT       = 'RESEARCH_PACT'
MILITARY_ALLIANCE   = 'MILITARY_ALLIANCE'
RESOURCE_SHARING    = 'RESOURCE_SHARING'
PEACE_TREATY        = 'PEACE_TREATY'
NON_AGGRESSION_PACT = 'NON_AGGRESSION_PACT'
CULTURAL_EXCHANGE   = 'CULTURAL_EXCHANGE'
JOINT_EXPLORATION   = 'JOINT_EXPLORATION'

RESEARCH_SPEED      = 'RESEARCH_SPEED'
ECONOMIC_STRENGTH   = 'ECONOMIC_STRENGTH'
MILITARY_STRENGTH   = 'MILITARY_STRENGTH'
POPULATION_GROWTH   = 'POPULATION_GROWTH'
RESOURCE_PRODUCTION = 'RESOURCE_PRODUCTION'
EXPLORATION_SPEED   = 'EXPLORATION_SPEED'
EFFECT_TYPES = (RESEARCH_SPEED, ECONOMIC_STRENGTH, MILITARY_STRENGTH,
                POPULATION_GROWTH, RESOURCE_PRODUCTION, EXPLORATION_SPEED)

# Which statuses each event may be created under
VALID_STATUSES = {
    TRADE_AGREEMENT:     frozenset({NEUTRAL, FRIENDLY}),
    RESEARCH_PACT:       frozenset({FRIENDLY}),
    MILITARY_ALLIANCE:   frozenset({ALLIED}),
    RESOURCE_SHARING:    frozenset({ALLIED}),
    PEACE_TREATY:        frozenset({WAR, HOSTILE}),
    NON_AGGRESSION_PACT: frozenset({NEUTRAL}),
    CULTURAL_EXCHANGE:   frozenset({FRIENDLY}),
    JOINT_EXPLORATION:   frozenset({NEUTRAL, FRIENDLY}),
}

# Status reached by a realised transition → event materialised for it
_STATUS_EVENT = {
    ALLIED:   MILITARY_ALLIANCE,
    FRIENDLY: TRADE_AGREEMENT,
}


@dataclass
class Effect:
    type:        str
    value:       float
    duration:    int          # turns remaining
    description: str = ''


@dataclass
class DiplomaticEvent:
    id:           str
    type:         str
    source:       str
    target:       str
    status:       str
    cost:         dict
    duration:     int
    effects:      list = field(default_factory=list)
    description:  str = ''
    created_tick: int = 0


# ══════════════════════════════════════════════════════════════════════════
# Templates: cost is paid by the source only
# ══════════════════════════════════════════════════════════════════════════

EVENT_TEMPLATES: dict[str, dict] = {
    TRADE_AGREEMENT: {
        'cost':        {'gold': 10, 'food': 20},
        'duration':    10,
        'effects':     [(ECONOMIC_STRENGTH, 0.1, 10,
                         'Increased economic strength from trade')],
        'description': 'Establish trade routes between civilizations',
    },
    RESEARCH_PACT: {
        'cost':        {'techPoints': 15, 'gold': 20},
        'duration':    15,
        'effects':     [(RESEARCH_SPEED, 0.15, 15,
                         'Faster research through knowledge sharing')],
        'description': 'Share knowledge and research findings',
    },
    MILITARY_ALLIANCE: {
        'cost':        {'metal': 30, 'food': 40},
        'duration':    20,
        'effects':     [(MILITARY_STRENGTH, 0.2, 20,
                         'Enhanced military capabilities through alliance')],
        'description': 'Form a military alliance for mutual defense',
    },
    RESOURCE_SHARING: {
        'cost':        {'food': 30, 'wood': 20, 'stone': 15},
        'duration':    12,
        'effects':     [(RESOURCE_PRODUCTION, 0.1, 12,
                         'Improved resource production through sharing')],
        'description': 'Share resources and production capabilities',
    },
    PEACE_TREATY: {
        'cost':        {'gold': 50, 'food': 40},
        'duration':    25,
        'effects':     [(ECONOMIC_STRENGTH, 0.15, 25,
                         'Economic recovery from peace')],
        'description': 'End hostilities and establish peace',
    },
    NON_AGGRESSION_PACT: {
        'cost':        {'gold': 20, 'food': 15},
        'duration':    15,
        'effects':     [(ECONOMIC_STRENGTH, 0.05, 15,
                         'Slight economic boost from stability')],
        'description': 'Agree to maintain peaceful relations',
    },
    CULTURAL_EXCHANGE: {
        'cost':        {'gold': 15, 'food': 10},
        'duration':    10,
        'effects':     [(POPULATION_GROWTH, 0.1, 10,
                         'Population growth from cultural exchange')],
        'description': 'Exchange cultural knowledge and traditions',
    },
    JOINT_EXPLORATION: {
        'cost':        {'food': 25, 'wood': 15},
        'duration':    12,
        'effects':     [(EXPLORATION_SPEED, 0.2, 12,
                         'Faster exploration through cooperation')],
        'description': 'Collaborate on map exploration',
    },
}


def is_valid_for_status(event_type: str, status: str) -> bool:
    return status in VALID_STATUSES.get(event_type, ())


def _whole(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _effect_from(raw) -> Effect:
    """Rebuild an Effect from its dict form; ValueError/TypeError if malformed."""
    effect = Effect(**raw)
    if (effect.type not in EFFECT_TYPES or not _whole(effect.duration)
            or isinstance(effect.value, bool)
            or not isinstance(effect.value, (int, float))):
        raise ValueError(f"bad effect {raw!r}")
    return effect


def _event_from(raw) -> DiplomaticEvent:
    raw = dict(raw)
    raw['effects'] = [_effect_from(e) for e in raw.get('effects', [])]
    event = DiplomaticEvent(**raw)
    if (event.type not in EVENT_TEMPLATES or event.status not in STATUS_LADDER
            or not isinstance(event.id, str) or not isinstance(event.cost, dict)
            or not _whole(event.duration) or not _whole(event.created_tick)):
        raise ValueError(f"bad event {raw!r}")
    return event


# ══════════════════════════════════════════════════════════════════════════
# Catalog
# ══════════════════════════════════════════════════════════════════════════

class DiplomaticEventCatalog:
    """Creates, executes and ages diplomatic events.

    ``relations`` is the shared RelationTable; executing an event writes the
    event's status for the pair through it.
    """

    def __init__(self, relations: RelationTable | None = None) -> None:
        self.relations       = relations if relations is not None else RelationTable()
        self.events:  dict   = {}     # event id → DiplomaticEvent
        self.active_effects: dict = {}  # faction id → [Effect]
        self.tick:    int    = 0
        self._seq:    int    = 0
        self._factions: dict = {}     # faction id → agent that carries its effects

    # ── Lookups ───────────────────────────────────────────────────────────

    @staticmethod
    def event_type_for(status: str) -> str | None:
        return _STATUS_EVENT.get(status)

    def get_active_effects(self, faction_id: str) -> list:
        return list(self.active_effects.get(faction_id, []))

    def get_event(self, event_id: str) -> DiplomaticEvent | None:
        return self.events.get(event_id)

    # ── Create / execute ─────────────────────────────────────────────────

    def create_event(self, event_type: str, source, target,
                     status: str) -> DiplomaticEvent | None:
        """Fill an event from its template, or None if invalid or unaffordable.

        Only the source's ledger is checked.
        """
        template = EVENT_TEMPLATES.get(event_type)
        if template is None or not is_valid_for_status(event_type, status):
            return None
        if not can_afford(source.resources, template['cost']):
            return None
        self._seq += 1
        event = DiplomaticEvent(
            id=f"{event_type}_{source.id}_{target.id}_{self._seq}",
            type=event_type,
            source=source.id,
            target=target.id,
            status=status,
            cost=dict(template['cost']),
            duration=template['duration'],
            effects=[Effect(*spec) for spec in template['effects']],
            description=template['description'],
            created_tick=self.tick,
        )
        self.events[event.id] = event
        return event

    def execute_event(self, event: DiplomaticEvent, source, target) -> bool:
        """Charge the source, apply every effect to both sides, set the status.

        False (and nothing changes) if the source can no longer pay.
        """
        if not deduct(source.resources, event.cost):
            return False
        for faction in (source, target):
            self._factions[faction.id] = faction
            carried = self.active_effects.setdefault(faction.id, [])
            for effect in event.effects:
                faction.scale_modifier(effect.type, 1.0 + effect.value)
                carried.append(replace(effect))
        self.relations.set(source.id, target.id, event.status)
        return True

    # ── Aging ─────────────────────────────────────────────────────────────

    def update_events(self) -> list:
        """Advance one tick: purge lapsed events, then age every active effect.

        Returns the purged events.
        """
        self.tick += 1
        expired = [ev for ev in self.events.values()
                   if self.tick - ev.created_tick >= ev.duration]
        for ev in expired:
            del self.events[ev.id]

        for fid, effects in self.active_effects.items():
            kept = []
            for effect in effects:
                effect.duration -= 1
                if effect.duration > 0:
                    kept.append(effect)
                    continue
                faction = self._factions.get(fid)
                if faction is not None:
                    faction.scale_modifier(effect.type, 1.0 / (1.0 + effect.value))
            effects[:] = kept
        return expired

    # ── Persistence ──────────────────────────────────────────────────────

    def serialize(self) -> dict:
        return {
            'tick':    self.tick,
            'seq':     self._seq,
            'events':  [asdict(ev) for ev in self.events.values()],
            'effects': {fid: [asdict(e) for e in effects]
                        for fid, effects in self.active_effects.items()},
        }

    def deserialize(self, data, factions: dict) -> bool:
        """Restore events and effects; *factions* maps id → agent.

        Validates everything first; returns False and keeps the current
        state when the blob is malformed.
        """
        if not isinstance(data, dict):
            return False
        tick, seq = data.get('tick'), data.get('seq')
        events, effects = data.get('events'), data.get('effects')
        if (not _whole(tick) or not _whole(seq)
                or not isinstance(events, list) or not isinstance(effects, dict)):
            return False
        try:
            parsed_events = {}
            for raw in events:
                ev = _event_from(raw)
                parsed_events[ev.id] = ev
            parsed_effects = {fid: [_effect_from(e) for e in lst]
                              for fid, lst in effects.items()}
        except (TypeError, ValueError):
            return False

        self.tick, self._seq = tick, seq
        self.events          = parsed_events
        self.active_effects  = parsed_effects
        self._factions       = {fid: factions[fid] for fid in parsed_effects
                                if fid in factions}
        return True
