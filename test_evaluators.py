"""
test_evaluators.py — pytest suite for rival_factions.evaluators
===============================================================
Covers: FactionView snapshot semantics, NullEvaluator and HeuristicEvaluator
findings, and how an agent maps them onto its behavioural state.
"""

import pytest

from conftest import faction_config
from rival_factions.evaluators import (EVALUATORS, FactionView, HeuristicEvaluator,
                                       NullEvaluator, StateEvaluator)
from rival_factions.tables import DEFENDING, DEVELOPING, EXPANDING, FRIENDLY


@pytest.fixture
def rivals(make_director):
    director = make_director([faction_config('t', 'TRADER', (2, 2)),
                              faction_config('g', 'AGGRESSIVE', (12, 12))])
    return director, director.factions['t'], director.factions['g']


class TestFactionView:
    def test_copies_are_detached(self, rivals):
        director, t, _g = rivals
        view = FactionView(t, director)
        view.amounts['food'] = 0
        view.relations['g'] = FRIENDLY
        assert t.resources['food'].amount == 100
        assert director.status_between('t', 'g') != FRIENDLY

    def test_snapshot_does_not_follow_agent(self, rivals):
        director, t, _g = rivals
        view = FactionView(t, director)
        t.population = 99
        assert view.population == 10

    def test_net_production(self, rivals):
        director, t, _g = rivals
        assert FactionView(t, director).net_production['food'] == pytest.approx(5)

    def test_military_of(self, rivals):
        director, t, g = rivals
        g.military_strength = 25
        assert FactionView(t, director).military_of('g') == 25
        assert FactionView(t, director).military_of('ghost') is None
        assert FactionView(t).military_of('g') is None


class TestNullEvaluator:
    def test_finds_nothing(self, rivals):
        director, t, _g = rivals
        view = FactionView(t, director)
        ev = NullEvaluator()
        assert ev.threats(view) == ev.opportunities(view) == ev.resource_needs(view) == []


class TestHeuristicEvaluator:
    def test_stronger_hostile_is_a_threat(self, rivals):
        director, t, g = rivals
        g.military_strength = 50
        found = HeuristicEvaluator().threats(FactionView(t, director))
        assert [(f.kind, f.subject, f.weight) for f in found] == [
            ('hostile_neighbour', 'g', 50)]

    def test_weaker_hostile_is_not(self, rivals):
        director, t, g = rivals
        t.military_strength = 50
        assert HeuristicEvaluator().threats(FactionView(t, director)) == []

    def test_friends_are_opportunities(self, rivals):
        director, t, _g = rivals
        director.relations.set('t', 'g', FRIENDLY)
        found = HeuristicEvaluator().opportunities(FactionView(t, director))
        assert ('friendly_neighbour', 'g') in [(f.kind, f.subject) for f in found]

    def test_room_to_grow(self, rivals):
        director, t, _g = rivals
        t.population = 5
        found = HeuristicEvaluator().opportunities(FactionView(t, director))
        assert [f.kind for f in found] == ['room_to_grow']

    def test_low_stock_without_income(self, rivals):
        director, t, _g = rivals
        found = HeuristicEvaluator().resource_needs(FactionView(t, director))
        assert sorted(f.subject for f in found) == ['fuel', 'gold', 'metal']

    def test_hunger(self, rivals):
        director, t, _g = rivals
        t.resources['food'].amount = 3
        found = HeuristicEvaluator().resource_needs(FactionView(t, director))
        assert ('hunger', 'food') in [(f.kind, f.subject) for f in found]


class TestStateMapping:
    def test_threat_wins(self, rivals):
        director, t, g = rivals
        t.evaluator = HeuristicEvaluator()
        g.military_strength = 50
        assert t.evaluate_state() == DEFENDING

    def test_opportunity_beats_needs(self, rivals):
        director, t, _g = rivals
        t.evaluator = HeuristicEvaluator()
        t.population = 5
        assert t.evaluate_state() == EXPANDING

    def test_needs_alone(self, rivals):
        _director, t, _g = rivals
        t.evaluator = HeuristicEvaluator()
        assert t.evaluate_state() == DEVELOPING

    def test_custom_evaluator_plugs_in(self, rivals):
        class Alarmist(StateEvaluator):
            def threats(self, view):
                return ['boo']

            def opportunities(self, view):
                return []

            def resource_needs(self, view):
                return []

        _director, t, _g = rivals
        t.evaluator = Alarmist()
        assert t.evaluate_state() == DEFENDING

    def test_registry(self):
        assert set(EVALUATORS) == {'null', 'heuristic'}
