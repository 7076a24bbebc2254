# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
metrics.py — Per-tick metrics logger for the rival-faction simulation.

Writes three CSV files into ``output_dir``:
  metrics_seed_<seed>.csv            one row per tick
  diplomacy_events_seed_<seed>.csv   one row per discrete event
  run_summaries.csv                  one row appended per finished run
"""

import csv
import os
import time
import tracemalloc
from pathlib import Path

_STATUSES = ('WAR', 'HOSTILE', 'NEUTRAL', 'FRIENDLY', 'ALLIED')


class MetricsLogger:
    """Collects per-tick simulation metrics and writes them to CSV."""

    def __init__(self, seed: int, condition: str, output_dir: str = "data"):
        self.seed = seed
        self.condition = condition
        self.output_dir = output_dir

        Path(output_dir).mkdir(parents=True, exist_ok=True)

        self._metrics_path = os.path.join(output_dir, f"metrics_seed_{seed}.csv")
        self._events_path = os.path.join(output_dir, f"diplomacy_events_seed_{seed}.csv")

        self._metrics_fh = open(self._metrics_path, 'w', newline='', encoding='utf-8')
        self._events_fh = open(self._events_path, 'w', newline='', encoding='utf-8')

        self._metrics_writer = csv.writer(self._metrics_fh)
        self._events_writer = csv.writer(self._events_fh)

        self._metrics_writer.writerow([
            'seed', 'tick',
            'war_pairs', 'hostile_pairs', 'neutral_pairs',
            'friendly_pairs', 'allied_pairs',
            'active_events', 'active_effects',
            'mean_military', 'mean_economic', 'mean_research_speed',
            'total_population', 'total_territory',
        ])
        self._metrics_fh.flush()

        self._events_writer.writerow([
            'seed', 'tick', 'event_type', 'actor', 'target', 'detail',
        ])
        self._events_fh.flush()

        # Cumulative counters
        self.status_changes = 0
        self.wars_declared = 0
        self.events_executed = 0
        self.events_expired = 0
        self.buildings_placed = 0
        self.techs_completed = 0
        self.epoch_advances = 0

        self._peak_population = 0
        self._ticks_recorded = 0

        self.start_time = time.time()
        tracemalloc.start()

    # ──────────────────────────────────────────────────────────────────────
    # Per-tick recording
    # ──────────────────────────────────────────────────────────────────────

    def record_tick(self, tick, director):
        """Called once per tick from the main loop.  Writes one CSV row."""
        try:
            agents = list(director.get_factions().values())
            counts = {s: 0 for s in _STATUSES}
            for _a, _b, status in director.relations.items():
                counts[status] += 1

            catalog = director.get_event_catalog()
            active_events = len(catalog.events)
            active_effects = sum(len(catalog.get_active_effects(a.id)) for a in agents)

            n = len(agents) or 1
            mean_mil = round(sum(a.military_strength for a in agents) / n, 4)
            mean_eco = round(sum(a.economic_strength for a in agents) / n, 4)
            mean_rs = round(sum(a.research_speed for a in agents) / n, 4)
            population = sum(a.population for a in agents)
            territory = sum(len(a.territory) for a in agents)

            self._peak_population = max(self._peak_population, population)
            self._ticks_recorded += 1

            self._metrics_writer.writerow([
                self.seed, tick,
                counts['WAR'], counts['HOSTILE'], counts['NEUTRAL'],
                counts['FRIENDLY'], counts['ALLIED'],
                active_events, active_effects,
                mean_mil, mean_eco, mean_rs,
                population, territory,
            ])

            if tick % 100 == 0:
                self._metrics_fh.flush()

        except Exception:
            pass  # Never crash the simulation

    # ──────────────────────────────────────────────────────────────────────
    # Discrete event recording
    # ──────────────────────────────────────────────────────────────────────

    def record_event(self, tick, event_type, actor="", target="", detail=""):
        """Write one event row and bump the matching counter.

        event_type is one of:
            'status_change', 'event_executed', 'event_expired',
            'building_placed', 'research_completed', 'epoch_advanced'
        """
        try:
            self._events_writer.writerow([
                self.seed, tick, event_type, actor, target, detail,
            ])
            self._events_fh.flush()

            if event_type == 'status_change':
                self.status_changes += 1
                if detail.endswith('->WAR'):
                    self.wars_declared += 1
            elif event_type == 'event_executed':
                self.events_executed += 1
            elif event_type == 'event_expired':
                self.events_expired += 1
            elif event_type == 'building_placed':
                self.buildings_placed += 1
            elif event_type == 'research_completed':
                self.techs_completed += 1
            elif event_type == 'epoch_advanced':
                self.epoch_advances += 1

        except Exception:
            pass

    # ──────────────────────────────────────────────────────────────────────
    # Finalize: run-level summary
    # ──────────────────────────────────────────────────────────────────────

    def finalize(self, director):
        """Append one row to run_summaries.csv.  Call once at the end of a run."""
        try:
            wall_clock = round(time.time() - self.start_time, 2)

            try:
                peak_ram = round(
                    tracemalloc.get_traced_memory()[1] / (1024 * 1024), 2
                )
            except Exception:
                peak_ram = 0.0

            try:
                tracemalloc.stop()
            except Exception:
                pass

            agents = list(director.get_factions().values())
            final_statuses = [s for _a, _b, s in director.relations.items()]
            allied = sum(1 for s in final_statuses if s == 'ALLIED')
            at_war = sum(1 for s in final_statuses if s == 'WAR')
            final_pop = sum(a.population for a in agents)

            summary_path = os.path.join(self.output_dir, "run_summaries.csv")
            file_exists = os.path.isfile(summary_path)
            with open(summary_path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                if not file_exists:
                    writer.writerow([
                        'seed', 'condition', 'ticks',
                        'final_population', 'peak_population',
                        'status_changes', 'wars_declared',
                        'events_executed', 'events_expired',
                        'buildings_placed', 'techs_completed',
                        'epoch_advances', 'final_allied_pairs',
                        'final_war_pairs',
                        'wall_clock_seconds', 'peak_ram_mb',
                    ])
                writer.writerow([
                    self.seed, self.condition, self._ticks_recorded,
                    final_pop, self._peak_population,
                    self.status_changes, self.wars_declared,
                    self.events_executed, self.events_expired,
                    self.buildings_placed, self.techs_completed,
                    self.epoch_advances, allied, at_war,
                    wall_clock, peak_ram,
                ])

        except Exception:
            pass

    # ──────────────────────────────────────────────────────────────────────
    # Cleanup
    # ──────────────────────────────────────────────────────────────────────

    def close(self):
        """Flush and close the CSV file handles.  Call after finalize()."""
        for fh in (self._metrics_fh, self._events_fh):
            try:
                fh.flush()
                fh.close()
            except Exception:
                pass
