"""
dashboard_bridge.py — Periodic JSON snapshot writer for the Streamlit live dashboard.

Call write_dashboard_snapshot() from sim.py every DASHBOARD_WRITE_EVERY ticks.
Uses an atomic rename-swap so the dashboard process never reads a half-written file.

No Streamlit dependency — this runs inside the main simulation process.
"""

import collections
import json
import os
import pathlib

from . import config
from .tables import STATUS_LADDER, status_rank

DASHBOARD_DATA_PATH: pathlib.Path = pathlib.Path(config.DASHBOARD_DATA_PATH)

_HISTORY_MAX = 120   # keep the last 120 snapshots of faction strengths

# ── Rolling strength history (module-level, survives across calls) ────────
_history: collections.deque = collections.deque(maxlen=_HISTORY_MAX)


# ──────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────

def _tick_rate(tick_times: list) -> float:
    """Ticks per second averaged over the last 30 recorded tick durations."""
    if not tick_times:
        return 0.0
    recent = tick_times[-30:]
    total  = sum(recent)
    return round(len(recent) / total, 2) if total > 0 else 0.0


def _relation_matrix(director, ids: list) -> list:
    """Square matrix of status ranks (0 = WAR … 4 = ALLIED); −1 on the diagonal."""
    return [
        [-1 if a == b else status_rank(director.status_between(a, b)) for b in ids]
        for a in ids
    ]


def clear_history() -> None:
    _history.clear()


# ──────────────────────────────────────────────────────────────────────────
# Main API
# ──────────────────────────────────────────────────────────────────────────

def write_dashboard_snapshot(director, tick_times: list,
                             path: pathlib.Path | None = None) -> None:
    """Serialise current director state and write it atomically.

    The write goes to a .tmp file first; os.replace() then performs an atomic
    rename so the dashboard reader never sees a partial JSON file.  Write
    failures are swallowed so the simulation keeps running.
    """
    target = pathlib.Path(path) if path is not None else DASHBOARD_DATA_PATH
    agents = list(director.get_factions().values())
    ids    = [a.id for a in agents]
    t      = director.get_turn()
    catalog = director.get_event_catalog()

    # ── Faction snapshots ─────────────────────────────────────────────────
    faction_data: list = []
    for a in agents:
        faction_data.append({
            'id':             a.id,
            'name':           a.name,
            'personality':    a.personality,
            'state':          a.state,
            'epoch':          a.epoch,
            'population':     a.population,
            'territory':      sorted(a.territory),
            'military':       round(a.military_strength, 3),
            'economic':       round(a.economic_strength, 3),
            'research_speed': round(a.research_speed, 4),
            'research':       a.current_research,
            'progress':       round(a.tech_progress, 2),
            'resources':      {k: round(r.amount, 2) for k, r in a.resources.items()},
            'effects':        [e.type for e in catalog.get_active_effects(a.id)],
        })

    # ── Append strength snapshot to rolling history ───────────────────────
    _history.append({
        'tick':       t,
        'military':   {a.id: a.military_strength for a in agents},
        'economic':   {a.id: a.economic_strength for a in agents},
        'population': {a.id: a.population for a in agents},
    })

    # ── Assemble snapshot ─────────────────────────────────────────────────
    snap = {
        'tick':          t,
        'tick_rate':     _tick_rate(tick_times),
        'statuses':      list(STATUS_LADDER),
        'faction_ids':   ids,
        'factions':      faction_data,
        'relations':     _relation_matrix(director, ids),
        'active_events': len(catalog.events),
        'history':       list(_history),
        'event_tail':    director.event_log[-40:],   # last 40 lines for the live feed
    }

    # ── Atomic write ──────────────────────────────────────────────────────
    try:
        tmp = target.with_suffix('.tmp')
        tmp.write_text(json.dumps(snap, separators=(',', ':')), encoding='utf-8')
        os.replace(tmp, target)
    except OSError:
        pass
