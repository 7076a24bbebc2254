# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
tables.py — Static game knowledge shared by agents, director and catalog.

Everything here is plain data: name constants, ordered scales, the building
and technology tables, and the personality lookup tables.  Nothing in this
module mutates at runtime, so each table can be checked in isolation.

Ordered scales
──────────────
  Status : WAR < HOSTILE < NEUTRAL < FRIENDLY < ALLIED
  Epoch  : TRIBAL < AGRICULTURAL < INDUSTRIAL < SPACE_AGE
"""
from types import MappingProxyType

# ══════════════════════════════════════════════════════════════════════════
# Name constants
# ══════════════════════════════════════════════════════════════════════════

# ── Personality (fixed at creation) ──────────────────────────────────────
AGGRESSIVE   = 'AGGRESSIVE'
DIPLOMATIC   = 'DIPLOMATIC'
ISOLATIONIST = 'ISOLATIONIST'
TRADER       = 'TRADER'
PERSONALITIES = (AGGRESSIVE, DIPLOMATIC, ISOLATIONIST, TRADER)

# ── Behavioural state ────────────────────────────────────────────────────
EXPLORING  = 'EXPLORING'
EXPANDING  = 'EXPANDING'
DEVELOPING = 'DEVELOPING'
TRADING    = 'TRADING'
CONFLICT   = 'CONFLICT'
DEFENDING  = 'DEFENDING'
STATES = (EXPLORING, EXPANDING, DEVELOPING, TRADING, CONFLICT, DEFENDING)

# ── Diplomatic status, lowest rung first ─────────────────────────────────
WAR      = 'WAR'
HOSTILE  = 'HOSTILE'
NEUTRAL  = 'NEUTRAL'
FRIENDLY = 'FRIENDLY'
ALLIED   = 'ALLIED'
STATUS_LADDER = (WAR, HOSTILE, NEUTRAL, FRIENDLY, ALLIED)

# ── Epochs, earliest first ───────────────────────────────────────────────
TRIBAL       = 'TRIBAL'
AGRICULTURAL = 'AGRICULTURAL'
INDUSTRIAL   = 'INDUSTRIAL'
SPACE_AGE    = 'SPACE_AGE'
EPOCHS = (TRIBAL, AGRICULTURAL, INDUSTRIAL, SPACE_AGE)

# ── Decision kinds ───────────────────────────────────────────────────────
BUILD     = 'BUILD'
RESEARCH  = 'RESEARCH'
DIPLOMACY = 'DIPLOMACY'
MILITARY  = 'MILITARY'
ECONOMY   = 'ECONOMY'
DECISION_KINDS = (BUILD, RESEARCH, DIPLOMACY, MILITARY, ECONOMY)


def status_rank(status: str) -> int:
    return STATUS_LADDER.index(status)


def epoch_rank(epoch: str) -> int:
    return EPOCHS.index(epoch)


# ══════════════════════════════════════════════════════════════════════════
# Relation transitions: exactly one rung per realised change
# ══════════════════════════════════════════════════════════════════════════

# status → (improves to, worsens to)
TRANSITIONS = MappingProxyType({
    WAR:      (HOSTILE,  WAR),
    HOSTILE:  (NEUTRAL,  WAR),
    NEUTRAL:  (FRIENDLY, HOSTILE),
    FRIENDLY: (ALLIED,   NEUTRAL),
    ALLIED:   (ALLIED,   FRIENDLY),
})


def next_status(current: str, improve: bool) -> str:
    up, down = TRANSITIONS[current]
    return up if improve else down


# Standing multipliers both sides take when a negotiation lands on a status
NEGOTIATED_EFFECTS = MappingProxyType({
    ALLIED:   (('RESEARCH_SPEED', 1.2), ('ECONOMIC_STRENGTH', 1.1)),
    FRIENDLY: (('RESEARCH_SPEED', 1.1),),
    NEUTRAL:  (),
    HOSTILE:  (('MILITARY_STRENGTH', 1.1),),
    WAR:      (('MILITARY_STRENGTH', 1.2),),
})


# ══════════════════════════════════════════════════════════════════════════
# Personality tables
# ══════════════════════════════════════════════════════════════════════════

# Symmetric: COMPATIBILITY[a][b] == COMPATIBILITY[b][a]
COMPATIBILITY = MappingProxyType({
    AGGRESSIVE:   MappingProxyType({AGGRESSIVE: -0.5, DIPLOMATIC: -0.3,
                                    ISOLATIONIST: -0.2, TRADER: -0.1}),
    DIPLOMATIC:   MappingProxyType({AGGRESSIVE: -0.3, DIPLOMATIC:  0.5,
                                    ISOLATIONIST:  0.2, TRADER:  0.4}),
    ISOLATIONIST: MappingProxyType({AGGRESSIVE: -0.2, DIPLOMATIC:  0.2,
                                    ISOLATIONIST:  0.3, TRADER:  0.1}),
    TRADER:       MappingProxyType({AGGRESSIVE: -0.1, DIPLOMATIC:  0.4,
                                    ISOLATIONIST:  0.1, TRADER:  0.3}),
})

# personality → (boosted building categories, multiplier)
BUILDING_BOOST = MappingProxyType({
    AGGRESSIVE:   (frozenset({'defense'}),             1.5),
    DIPLOMATIC:   (frozenset({'workshop', 'research'}), 1.3),
    ISOLATIONIST: (frozenset({'farm', 'mine'}),         1.4),
    TRADER:       (frozenset({'factory', 'workshop'}),  1.3),
})

# personality → ((effect kind, effect target), multiplier)
TECH_BOOST = MappingProxyType({
    AGGRESSIVE:   (('PRODUCTION', 'METAL'),  1.5),
    DIPLOMATIC:   (('POPULATION', 'GROWTH'), 1.3),
    ISOLATIONIST: (('PRODUCTION', 'ALL'),    1.4),
    TRADER:       (('PRODUCTION', 'ALL'),    1.3),
})

DIPLOMACY_MULTIPLIER = MappingProxyType({
    AGGRESSIVE:   0.8,
    DIPLOMATIC:   1.5,
    ISOLATIONIST: 0.6,
    TRADER:       1.2,
})


# ══════════════════════════════════════════════════════════════════════════
# Buildings: 13 types across four epochs
# ══════════════════════════════════════════════════════════════════════════

BUILDINGS: dict[str, dict] = {

    # ── Tribal ───────────────────────────────────────────────────────────
    'HUT': {
        'name':       'Hut',
        'epoch':      TRIBAL,
        'category':   'housing',
        'cost':       {'wood': 20, 'stone': 10},
        'production': {},
    },
    'CAMPFIRE': {
        'name':       'Campfire',
        'epoch':      TRIBAL,
        'category':   'housing',
        'cost':       {'wood': 10, 'stone': 5},
        'production': {'food': 2},
    },
    'BASIC_DEFENSE': {
        'name':       'Basic Defense',
        'epoch':      TRIBAL,
        'category':   'defense',
        'cost':       {'wood': 15, 'stone': 20},
        'production': {},
    },

    # ── Agricultural ─────────────────────────────────────────────────────
    'FARM': {
        'name':       'Farm',
        'epoch':      AGRICULTURAL,
        'category':   'farm',
        'cost':       {'wood': 30, 'stone': 20, 'gold': 50},
        'production': {'food': 5},
    },
    'BARN': {
        'name':       'Barn',
        'epoch':      AGRICULTURAL,
        'category':   'storage',
        'cost':       {'wood': 40, 'stone': 30, 'gold': 100},
        'production': {},
    },
    'MINE': {
        'name':       'Mine',
        'epoch':      AGRICULTURAL,
        'category':   'mine',
        'cost':       {'wood': 50, 'stone': 40, 'gold': 150},
        'production': {'stone': 3, 'gold': 1},
    },
    'WORKSHOP': {
        'name':       'Workshop',
        'epoch':      AGRICULTURAL,
        'category':   'workshop',
        'cost':       {'wood': 60, 'stone': 50, 'gold': 200},
        'production': {'techPoints': 1},
    },

    # ── Industrial ───────────────────────────────────────────────────────
    'FACTORY': {
        'name':       'Factory',
        'epoch':      INDUSTRIAL,
        'category':   'factory',
        'cost':       {'wood': 100, 'stone': 80, 'gold': 500, 'metal': 200},
        'production': {'metal': 5, 'techPoints': 2},
    },
    'ADVANCED_MINE': {
        'name':       'Advanced Mine',
        'epoch':      INDUSTRIAL,
        'category':   'mine',
        'cost':       {'wood': 120, 'stone': 100, 'gold': 600, 'metal': 150},
        'production': {'stone': 8, 'gold': 3, 'metal': 4},
    },
    'POWER_PLANT': {
        'name':       'Power Plant',
        'epoch':      INDUSTRIAL,
        'category':   'power',
        'cost':       {'wood': 150, 'stone': 120, 'gold': 800, 'metal': 300},
        'production': {'techPoints': 3},
    },

    # ── Space age ────────────────────────────────────────────────────────
    'RESEARCH_LAB': {
        'name':       'Research Lab',
        'epoch':      SPACE_AGE,
        'category':   'research',
        'cost':       {'wood': 200, 'stone': 150, 'gold': 1000, 'metal': 400},
        'production': {'techPoints': 5},
    },
    'SPACEPORT': {
        'name':       'Spaceport',
        'epoch':      SPACE_AGE,
        'category':   'spaceport',
        'cost':       {'wood': 500, 'stone': 400, 'gold': 5000, 'metal': 2000},
        'production': {},
    },
    'ENERGY_GRID': {
        'name':       'Energy Grid',
        'epoch':      SPACE_AGE,
        'category':   'power',
        'cost':       {'wood': 300, 'stone': 200, 'gold': 2000, 'metal': 800},
        'production': {'techPoints': 8},
    },
}

# state → {building type: (expected benefit, priority)}
BUILDING_SCORES = MappingProxyType({
    EXPLORING:  {'HUT': (5, 8), 'CAMPFIRE': (5, 8)},
    EXPANDING:  {'BASIC_DEFENSE': (7, 9), 'FARM': (6, 7), 'MINE': (6, 7)},
    DEVELOPING: {'WORKSHOP': (8, 8), 'RESEARCH_LAB': (8, 8),
                 'FACTORY': (7, 7), 'POWER_PLANT': (7, 7)},
    DEFENDING:  {'BASIC_DEFENSE': (10, 10)},
})


# ══════════════════════════════════════════════════════════════════════════
# Technologies: 12 techs across four epochs
# ══════════════════════════════════════════════════════════════════════════

# Effect tuples are (kind, value, target); kind ∈ PRODUCTION | POPULATION | UNLOCK
TECHS: dict[str, dict] = {

    # ── Tribal ───────────────────────────────────────────────────────────
    'BASIC_TOOLS': {
        'name':     'Basic Tools',
        'epoch':    TRIBAL,
        'cost':     50,
        'requires': [],
        'effects':  [('PRODUCTION', 1.2, 'WOOD')],
    },
    'STONE_WORKING': {
        'name':     'Stone Working',
        'epoch':    TRIBAL,
        'cost':     100,
        'requires': ['BASIC_TOOLS'],
        'effects':  [('PRODUCTION', 1.2, 'STONE')],
    },
    'BASIC_SHELTER': {
        'name':     'Basic Shelter',
        'epoch':    TRIBAL,
        'cost':     150,
        'requires': ['BASIC_TOOLS'],
        'effects':  [('POPULATION', 1.2, 'GROWTH')],
    },

    # ── Agricultural ─────────────────────────────────────────────────────
    'AGRICULTURE': {
        'name':     'Agriculture',
        'epoch':    AGRICULTURAL,
        'cost':     200,
        'requires': ['BASIC_TOOLS'],
        'effects':  [('PRODUCTION', 1.5, 'FOOD')],
    },
    'IRRIGATION': {
        'name':     'Irrigation',
        'epoch':    AGRICULTURAL,
        'cost':     250,
        'requires': ['AGRICULTURE'],
        'effects':  [('PRODUCTION', 1.3, 'FOOD')],
    },
    'ANIMAL_HUSBANDRY': {
        'name':     'Animal Husbandry',
        'epoch':    AGRICULTURAL,
        'cost':     300,
        'requires': ['AGRICULTURE'],
        'effects':  [('PRODUCTION', 1.4, 'FOOD')],
    },

    # ── Industrial ───────────────────────────────────────────────────────
    'METALLURGY': {
        'name':     'Metallurgy',
        'epoch':    INDUSTRIAL,
        'cost':     400,
        'requires': ['STONE_WORKING'],
        'effects':  [('PRODUCTION', 1.5, 'METAL')],
    },
    'STEAM_POWER': {
        'name':     'Steam Power',
        'epoch':    INDUSTRIAL,
        'cost':     450,
        'requires': ['METALLURGY'],
        'effects':  [('PRODUCTION', 1.3, 'ALL')],
    },
    'COMBUSTION': {
        'name':     'Combustion',
        'epoch':    INDUSTRIAL,
        'cost':     500,
        'requires': ['STEAM_POWER'],
        'effects':  [('PRODUCTION', 1.5, 'FUEL')],
    },

    # ── Space age ────────────────────────────────────────────────────────
    'ROCKETRY': {
        'name':     'Rocketry',
        'epoch':    SPACE_AGE,
        'cost':     600,
        'requires': ['COMBUSTION'],
        'effects':  [('UNLOCK', 1, 'ROCKET')],
    },
    'SPACE_TECH': {
        'name':     'Space Technology',
        'epoch':    SPACE_AGE,
        'cost':     800,
        'requires': ['ROCKETRY'],
        'effects':  [('UNLOCK', 1, 'SPACEPORT')],
    },
    'LIFE_SUPPORT': {
        'name':     'Life Support Systems',
        'epoch':    SPACE_AGE,
        'cost':     700,
        'requires': ['ROCKETRY'],
        'effects':  [('POPULATION', 1.2, 'SPACE')],
    },
}

# Tech effect target → ledger resource kind
TECH_TARGET_RESOURCE = MappingProxyType({
    'FOOD':  'food',
    'WOOD':  'wood',
    'STONE': 'stone',
    'METAL': 'metal',
    'FUEL':  'fuel',
    'GOLD':  'gold',
})


def tech_base_score(state: str, effects: list) -> tuple:
    """(expected benefit, priority) for a tech in *state*; (0, 1) if nothing fits.

    Effects are scanned in order and a later matching effect overrides an
    earlier one.
    """
    benefit, priority = 0, 1
    for kind, _value, target in effects:
        if state == EXPLORING and kind == 'PRODUCTION':
            benefit, priority = 6, 7
        elif state == EXPANDING and kind == 'PRODUCTION' and target == 'ALL':
            benefit, priority = 7, 8
        elif state == DEVELOPING and kind == 'POPULATION' and target == 'GROWTH':
            benefit, priority = 8, 8
        elif state == DEFENDING and kind == 'PRODUCTION' and target == 'METAL':
            benefit, priority = 9, 9
    return benefit, priority
