# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
sim.py — Command-line runner for the rival-faction simulation.

Run with:  python -m rival_factions [--seed N] [--ticks N] [--condition NAME]
                                    [--evaluator null|heuristic] [--no-metrics]

Per tick
────────
  director.update()        — agents act, relations drift, treaties age
  metrics.record_tick()    — one CSV row (unless --no-metrics)
  dashboard snapshot       — every DASHBOARD_WRITE_EVERY ticks
  progress line            — terminal only
"""

import argparse
import pathlib
import random
import sys
import time
from datetime import datetime

from . import config
from . import dashboard_bridge
from .authorities import BuildingRegistry, TechTree
from .director import FactionDirector
from .evaluators import EVALUATORS
from .metrics import MetricsLogger
from .world import HexGrid


# ══════════════════════════════════════════════════════════════════════════
# Logging: tees stdout to file; shows only notable lines on terminal
# ══════════════════════════════════════════════════════════════════════════

class _LogTee:
    """Every byte goes to the log file.  Only filtered lines reach the terminal."""

    # Keywords that earn a line a spot on the terminal during the run
    _SHOW = frozenset({
        'WAR DECLARED', 'RELATIONS WARM', 'RELATIONS COOL',
        'TREATY', 'TREATY LAPSED',
        'TECH DISCOVERED', 'NEW EPOCH',
        '[Simulation interrupted',
    })

    passthrough: bool = False   # True → show everything (used for final report)

    def __init__(self, log_fh, real_stdout):
        self._log  = log_fh
        self._real = real_stdout
        self._buf  = ''

    def write(self, text: str) -> None:
        self._log.write(text)
        self._log.flush()
        self._buf += text
        while '\n' in self._buf:
            line, self._buf = self._buf.split('\n', 1)
            show = self.passthrough or any(kw in line for kw in self._SHOW)
            if show:
                self._real.write(line + '\n')
                self._real.flush()

    def flush(self) -> None:
        self._log.flush()

    def fileno(self) -> int:          # lets sys.stderr etc. work
        return self._real.fileno()


# ══════════════════════════════════════════════════════════════════════════
# Setup
# ══════════════════════════════════════════════════════════════════════════

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='rival_factions',
        description='Run the rival-faction diplomacy simulation')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the relation-drift RNG (default: random)')
    parser.add_argument('--ticks', type=int, default=config.TICKS,
                        help=f'Ticks to simulate (default: {config.TICKS})')
    parser.add_argument('--condition', type=str, default='baseline',
                        help='Condition label written to run_summaries.csv')
    parser.add_argument('--evaluator', choices=sorted(EVALUATORS), default='heuristic',
                        help='State evaluator every faction uses (default: heuristic)')
    parser.add_argument('--no-metrics', action='store_true',
                        help='Skip the CSV metrics files')
    args = parser.parse_args(argv)
    if args.ticks < 1:
        parser.error('--ticks must be at least 1')
    return args


def build_director(seed=None, evaluator: str = 'heuristic', metrics=None,
                   configs=None) -> FactionDirector:
    """Director wired to the default in-process collaborators."""
    grid          = HexGrid(config.GRID_WIDTH, config.GRID_HEIGHT)
    evaluator_cls = EVALUATORS[evaluator]
    return FactionDirector(
        grid, TechTree(), BuildingRegistry(grid),
        configs=configs,
        rng=random.Random(seed),
        evaluator_factory=lambda _entry: evaluator_cls(),
        metrics=metrics,
    )


# ══════════════════════════════════════════════════════════════════════════
# Report
# ══════════════════════════════════════════════════════════════════════════

W = 72


def final_report(director: FactionDirector, ticks: int) -> None:
    sep = '═' * W
    agents = list(director.get_factions().values())
    print(f"\n{sep}")
    print(f"RIVAL FACTIONS SUMMARY — {ticks} ticks")
    print(sep)

    for a in agents:
        print(f"\n{a.name}  [{a.id} · {a.personality} · {a.epoch.title()}]")
        print(f"  state {a.state:<10}  pop {a.population:<6}  "
              f"tiles {len(a.territory):<3}  military {a.military_strength:7.1f}  "
              f"economy {a.economic_strength:7.1f}  research ×{a.research_speed:.2f}")
        ledger = '  '.join(f"{k} {r.amount:.0f}" for k, r in a.resources.items())
        print(f"  {ledger}")

    print("\nRelations:")
    for a_id, b_id, status in sorted(director.relations.items()):
        print(f"  {a_id} ↔ {b_id}: {status}")

    catalog = director.get_event_catalog()
    print(f"\nActive treaties: {len(catalog.events)}")
    for ev in catalog.events.values():
        remaining = ev.duration - (catalog.tick - ev.created_tick)
        print(f"  {ev.type:<20} {ev.source} → {ev.target}  ({remaining} turns left)")

    _KEY = ('WAR DECLARED', 'TREATY', 'TECH DISCOVERED', 'NEW EPOCH')
    key_events = [e for e in director.event_log if any(k in e for k in _KEY)]
    n_show = min(10, len(key_events))
    print(f"\nLast {n_show} key events:")
    for e in key_events[-10:]:
        print(f"  {e}")
    if len(key_events) > 10:
        print(f"  … ({len(key_events) - 10} more key events in log file)")


# ══════════════════════════════════════════════════════════════════════════
# Main loop
# ══════════════════════════════════════════════════════════════════════════

def run(argv=None) -> None:
    args  = parse_args(argv)
    seed  = args.seed if args.seed is not None else random.randrange(1 << 30)
    ticks = args.ticks

    # ── Set up file logging ────────────────────────────────────────────────
    pathlib.Path(config.LOG_DIR).mkdir(exist_ok=True)
    _ts       = datetime.now().strftime('%Y%m%d_%H%M%S')
    _log_path = f'{config.LOG_DIR}/run_{_ts}.txt'
    _log_fh   = open(_log_path, 'w', encoding='utf-8')
    _real     = sys.stdout
    _tee      = _LogTee(_log_fh, _real)
    sys.stdout = _tee

    _real.write(f"Log → {_log_path}\n")
    _real.write(f"Running {ticks}-tick simulation  seed={seed}  "
                f"evaluator={args.evaluator}\n\n")

    metrics  = None if args.no_metrics else MetricsLogger(seed, args.condition,
                                                          config.METRICS_DIR)
    director = build_director(seed, args.evaluator, metrics)
    dashboard_bridge.clear_history()

    _tick_times:  list = []
    _print_every: int  = 10 if ticks > 500 else 1

    try:
        for t in range(1, ticks + 1):
            _t0 = time.time()
            director.update()
            if metrics is not None:
                metrics.record_tick(t, director)
            if t % config.DASHBOARD_WRITE_EVERY == 0:
                dashboard_bridge.write_dashboard_snapshot(director, _tick_times)

            _tick_times.append(time.time() - _t0)

            if t % _print_every == 0:
                statuses = [s for _a, _b, s in director.relations.items()]
                _real.write(
                    f'  [{t:{len(str(ticks))}d}/{ticks}]  '
                    f'Allied:{statuses.count("ALLIED")}  '
                    f'Friendly:{statuses.count("FRIENDLY")}  '
                    f'Hostile:{statuses.count("HOSTILE")}  '
                    f'War:{statuses.count("WAR")}  '
                    f'Treaties:{len(director.get_event_catalog().events)}\n')
                _real.flush()

    except KeyboardInterrupt:
        print("\n\n[Simulation interrupted by user]\n")

    finally:
        _real.write('\n')
        _tee.passthrough = True
        final_report(director, director.get_turn())
        dashboard_bridge.write_dashboard_snapshot(director, _tick_times)
        if metrics is not None:
            metrics.finalize(director)
            metrics.close()
        sys.stdout = _real
        _log_fh.close()
        print(f"\nFull log saved → {_log_path}")


# ══════════════════════════════════════════════════════════════════════════
if __name__ == '__main__':
    run()
