"""
test_metrics.py — pytest suite for the CSV metrics logger and dashboard snapshots
=================================================================================
Covers: MetricsLogger rows and counters, run summary, and the atomic JSON
snapshot written for the live dashboard.
"""

import csv
import json

import pytest

from conftest import ScriptedRNG, faction_config
from rival_factions import dashboard_bridge
from rival_factions.metrics import MetricsLogger
from rival_factions.tables import STATUS_LADDER

ROSTER = [
    faction_config('ai1', 'AGGRESSIVE', (5, 5)),
    faction_config('ai2', 'DIPLOMATIC', (10, 10)),
    faction_config('ai3', 'TRADER', (5, 15)),
]


def _rows(path):
    with open(path, newline='', encoding='utf-8') as fh:
        return list(csv.DictReader(fh))


@pytest.fixture
def logger(tmp_path):
    metrics = MetricsLogger(seed=42, condition='unit', output_dir=str(tmp_path))
    yield metrics
    metrics.close()


class TestMetricsLogger:
    def test_files_created_with_headers(self, logger, tmp_path):
        assert (tmp_path / 'metrics_seed_42.csv').exists()
        assert (tmp_path / 'diplomacy_events_seed_42.csv').exists()

    def test_record_tick_counts_pairs(self, logger, tmp_path, make_director):
        director = make_director(ROSTER)
        logger.record_tick(1, director)
        logger._metrics_fh.flush()
        (row,) = _rows(tmp_path / 'metrics_seed_42.csv')
        assert row['tick'] == '1'
        assert row['hostile_pairs'] == '2'
        assert row['neutral_pairs'] == '1'
        assert row['total_population'] == '30'
        assert row['total_territory'] == '3'

    def test_record_event_bumps_counters(self, logger, tmp_path):
        logger.record_event(3, 'status_change', 'ai1', 'ai2', 'HOSTILE->WAR')
        logger.record_event(3, 'status_change', 'ai2', 'ai3', 'NEUTRAL->FRIENDLY')
        logger.record_event(4, 'event_executed', 'ai2', 'ai3', 'TRADE_AGREEMENT')
        logger.record_event(5, 'building_placed', 'ai1', '5,5', 'HUT')
        assert logger.status_changes == 2
        assert logger.wars_declared == 1
        assert logger.events_executed == 1
        assert logger.buildings_placed == 1
        rows = _rows(tmp_path / 'diplomacy_events_seed_42.csv')
        assert [r['event_type'] for r in rows] == [
            'status_change', 'status_change', 'event_executed', 'building_placed']

    def test_bad_director_does_not_raise(self, logger):
        logger.record_tick(1, object())

    def test_finalize_appends_summary(self, logger, tmp_path, make_director):
        director = make_director(ROSTER)
        logger.record_tick(1, director)
        logger.finalize(director)
        (row,) = _rows(tmp_path / 'run_summaries.csv')
        assert row['seed'] == '42'
        assert row['condition'] == 'unit'
        assert row['ticks'] == '1'
        assert row['final_population'] == '30'

    def test_director_reports_through_logger(self, logger, make_director):
        director = make_director(ROSTER, rng=ScriptedRNG([0.99]), metrics=logger)
        director.negotiate('ai2', 'ai3')
        assert logger.status_changes == 1


class TestDashboardSnapshot:
    def test_snapshot_shape(self, tmp_path, make_director):
        dashboard_bridge.clear_history()
        director = make_director(ROSTER)
        target = tmp_path / 'snap.json'
        dashboard_bridge.write_dashboard_snapshot(director, [0.5, 0.5], path=target)

        snap = json.loads(target.read_text(encoding='utf-8'))
        assert snap['tick'] == 0
        assert snap['tick_rate'] == 2.0
        assert snap['statuses'] == list(STATUS_LADDER)
        assert snap['faction_ids'] == ['ai1', 'ai2', 'ai3']
        assert [row[i] for i, row in enumerate(snap['relations'])] == [-1, -1, -1]
        assert snap['relations'][0][1] == STATUS_LADDER.index('HOSTILE')
        assert len(snap['history']) == 1
        assert not (tmp_path / 'snap.tmp').exists()

    def test_history_accumulates(self, tmp_path, make_director):
        dashboard_bridge.clear_history()
        director = make_director(ROSTER, rng=ScriptedRNG([0.99]))
        target = tmp_path / 'snap.json'
        for _ in range(3):
            director.update()
            dashboard_bridge.write_dashboard_snapshot(director, [], path=target)
        snap = json.loads(target.read_text(encoding='utf-8'))
        assert [h['tick'] for h in snap['history']] == [1, 2, 3]
        assert snap['tick_rate'] == 0.0

    def test_unwritable_target_is_ignored(self, tmp_path, make_director):
        director = make_director(ROSTER)
        missing = tmp_path / 'no' / 'such' / 'dir' / 'snap.json'
        dashboard_bridge.write_dashboard_snapshot(director, [], path=missing)
        assert not missing.exists()
