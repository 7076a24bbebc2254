# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
config.py — Shared configuration constants for the rival-faction simulation.
"""

# ── Simulation length ───────────────────────────────────────────────────
TICKS = 200     # total number of ticks simulated by the CLI

# ── Agent scheduling ────────────────────────────────────────────────────
ACTION_COOLDOWN = 3     # turns between two decision cycles of one faction

# ── Decision thresholds (minimum expected benefit to keep a candidate) ──
BUILD_BENEFIT_THRESHOLD     = 5
RESEARCH_BENEFIT_THRESHOLD  = 5
DIPLOMACY_BENEFIT_THRESHOLD = 3

# ── Population / research rates ─────────────────────────────────────────
FOOD_PER_PERSON = 1
GROWTH_RATE     = 0.1    # fraction of surplus food turned into new population
RESEARCH_RATE   = 0.1    # progress per tech point per turn
RESEARCH_GOAL   = 100    # progress needed before research is handed off

# ── Relation drift ──────────────────────────────────────────────────────
PROXIMITY_NEAR      = 3     # closer than this → +PROXIMITY_NEAR_BONUS
PROXIMITY_FAR       = 8     # farther than this → -PROXIMITY_FAR_PENALTY
PROXIMITY_NEAR_BONUS  = 0.2
PROXIMITY_FAR_PENALTY = 0.1
COMPATIBILITY_WEIGHT  = 0.3
BALANCE_THRESHOLD     = 0.5
MILITARY_WEIGHT       = 0.2
ECONOMIC_WEIGHT       = 0.1

# ── Building side effects on strengths ──────────────────────────────────
DEFENSE_MILITARY_GAIN = 10

# ── Map ─────────────────────────────────────────────────────────────────
GRID_WIDTH  = 20
GRID_HEIGHT = 20

# ── Output locations ────────────────────────────────────────────────────
LOG_DIR               = 'logs'
METRICS_DIR           = 'data'
DASHBOARD_WRITE_EVERY = 10                      # write interval (ticks)
DASHBOARD_DATA_PATH   = 'dashboard_data.json'

# ── Starting ledger ─────────────────────────────────────────────────────
# kind → (amount, production rate, consumption rate)
DEFAULT_RESOURCES = {
    'food':       (100, 10, 5),
    'wood':       (50,  5,  2),
    'stone':      (30,  3,  1),
    'gold':       (0,   0,  0),
    'metal':      (0,   0,  0),
    'fuel':       (0,   0,  0),
    'techPoints': (0,   2,  0),
}

# ── Factions created at game start ──────────────────────────────────────
FACTION_CONFIGS = [
    {
        'id':                  'ai1',
        'name':                'The Aggressive Empire',
        'personality':         'AGGRESSIVE',
        'start':               (5, 5),
        'resources':           {},
        'population':          10,
        'military_aggression': 0.8,
        'economic_focus':      0.4,
        'research_focus':      0.3,
        'diplomatic_tendency': 0.2,
    },
    {
        'id':                  'ai2',
        'name':                'The Diplomatic Federation',
        'personality':         'DIPLOMATIC',
        'start':               (10, 10),
        'resources':           {},
        'population':          10,
        'military_aggression': 0.3,
        'economic_focus':      0.5,
        'research_focus':      0.4,
        'diplomatic_tendency': 0.8,
    },
    {
        'id':                  'ai3',
        'name':                'The Isolationist Kingdom',
        'personality':         'ISOLATIONIST',
        'start':               (15, 15),
        'resources':           {},
        'population':          10,
        'military_aggression': 0.4,
        'economic_focus':      0.6,
        'research_focus':      0.5,
        'diplomatic_tendency': 0.1,
    },
    {
        'id':                  'ai4',
        'name':                'The Merchant League',
        'personality':         'TRADER',
        'start':               (5, 15),
        'resources':           {'gold': (40, 2, 0)},
        'population':          10,
        'military_aggression': 0.2,
        'economic_focus':      0.9,
        'research_focus':      0.4,
        'diplomatic_tendency': 0.6,
    },
]
