"""
test_catalog.py — pytest suite for rival_factions.catalog
=========================================================
Covers: validity table, affordability, execution (source-only payment, effects on
both sides, symmetric status), turn-based aging and (de)serialisation.
"""

import copy

import pytest

from conftest import RICH
from rival_factions.catalog import (EVENT_TEMPLATES, MILITARY_ALLIANCE, PEACE_TREATY,
                                    RESEARCH_PACT, RESOURCE_SHARING, TRADE_AGREEMENT,
                                    VALID_STATUSES, DiplomaticEventCatalog)
from rival_factions.relations import RelationTable
from rival_factions.tables import ALLIED, FRIENDLY, HOSTILE, NEUTRAL, STATUS_LADDER, WAR


@pytest.fixture
def pair(make_agent):
    a = make_agent('a', 'DIPLOMATIC', resources=RICH)
    b = make_agent('b', 'TRADER', start=(3, 3))
    return a, b


@pytest.fixture
def catalog():
    return DiplomaticEventCatalog(RelationTable())


class TestCreateEvent:
    def test_military_alliance_refused_while_neutral(self, catalog, pair):
        a, b = pair
        assert catalog.create_event(MILITARY_ALLIANCE, a, b, NEUTRAL) is None

    @pytest.mark.parametrize('event_type', sorted(EVENT_TEMPLATES))
    @pytest.mark.parametrize('status', STATUS_LADDER)
    def test_validity_table(self, catalog, pair, event_type, status):
        a, b = pair
        event = catalog.create_event(event_type, a, b, status)
        assert (event is not None) == (status in VALID_STATUSES[event_type])

    def test_peace_treaty_valid_at_war(self, catalog, pair):
        a, b = pair
        assert catalog.create_event(PEACE_TREATY, a, b, WAR) is not None
        assert catalog.create_event(PEACE_TREATY, a, b, HOSTILE) is not None

    def test_unaffordable_source(self, catalog, make_agent):
        poor = make_agent('poor', 'TRADER')          # default ledger has no gold
        rich = make_agent('rich', 'TRADER', resources=RICH)
        assert catalog.create_event(TRADE_AGREEMENT, poor, rich, FRIENDLY) is None

    def test_target_resources_not_checked(self, catalog, make_agent):
        rich = make_agent('rich', 'TRADER', resources=RICH)
        poor = make_agent('poor', 'TRADER')
        assert catalog.create_event(TRADE_AGREEMENT, rich, poor, FRIENDLY) is not None

    def test_unknown_type(self, catalog, pair):
        a, b = pair
        assert catalog.create_event('GRAND_BALL', a, b, FRIENDLY) is None

    def test_event_fields_from_template(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        assert event.id == 'RESEARCH_PACT_a_b_1'
        assert event.cost == {'techPoints': 15, 'gold': 20}
        assert event.duration == 15
        assert [(e.type, e.value, e.duration) for e in event.effects] == [
            ('RESEARCH_SPEED', 0.15, 15)]
        assert event.description == 'Share knowledge and research findings'
        assert catalog.get_event(event.id) is event

    def test_ids_are_unique(self, catalog, pair):
        a, b = pair
        ids = {catalog.create_event(TRADE_AGREEMENT, a, b, NEUTRAL).id for _ in range(5)}
        assert len(ids) == 5

    def test_template_cost_not_shared(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(TRADE_AGREEMENT, a, b, NEUTRAL)
        event.cost['gold'] = 999
        assert EVENT_TEMPLATES[TRADE_AGREEMENT]['cost']['gold'] == 10


class TestExecuteEvent:
    def test_source_pays_target_does_not(self, catalog, make_agent):
        a = make_agent('a', 'DIPLOMATIC', resources={'gold': (50, 0, 0)})
        b = make_agent('b', 'DIPLOMATIC', resources={'gold': (50, 0, 0)})
        event = catalog.create_event(TRADE_AGREEMENT, a, b, FRIENDLY)
        assert catalog.execute_event(event, a, b)
        assert a.resources['gold'].amount == 40
        assert a.resources['food'].amount == 80
        assert b.resources['gold'].amount == 50
        assert b.resources['food'].amount == 100

    def test_research_pact_multiplies_both_once(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        assert a.research_speed == pytest.approx(1.15)
        assert b.research_speed == pytest.approx(1.15)

    def test_status_written_symmetrically(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(MILITARY_ALLIANCE, a, b, ALLIED)
        catalog.execute_event(event, a, b)
        assert catalog.relations.get('a', 'b') == ALLIED
        assert catalog.relations.get('b', 'a') == ALLIED

    def test_effects_tracked_for_both(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        ea, eb = catalog.get_active_effects('a'), catalog.get_active_effects('b')
        assert len(ea) == len(eb) == 1
        assert ea[0] is not eb[0]
        assert catalog.get_active_effects('nobody') == []

    def test_resource_production_scales_every_resource(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESOURCE_SHARING, a, b, ALLIED)
        catalog.execute_event(event, a, b)
        assert all(r.production_multiplier == pytest.approx(1.1)
                   for r in b.resources.values())

    def test_execute_fails_when_source_drained(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(TRADE_AGREEMENT, a, b, FRIENDLY)
        a.resources['gold'].amount = 0
        assert catalog.execute_event(event, a, b) is False
        assert not catalog.relations.has('a', 'b')
        assert a.research_speed == 1.0
        assert catalog.get_active_effects('a') == []


class TestAging:
    def test_event_purged_after_duration(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(TRADE_AGREEMENT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        for _ in range(9):
            assert catalog.update_events() == []
        expired = catalog.update_events()
        assert [ev.id for ev in expired] == [event.id]
        assert catalog.get_event(event.id) is None

    def test_effect_decrements_and_reverts(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        catalog.update_events()
        assert catalog.get_active_effects('a')[0].duration == 14
        for _ in range(14):
            catalog.update_events()
        assert catalog.get_active_effects('a') == []
        assert a.research_speed == pytest.approx(1.0)
        assert b.research_speed == pytest.approx(1.0)

    def test_event_type_for_status(self):
        assert DiplomaticEventCatalog.event_type_for(ALLIED) == MILITARY_ALLIANCE
        assert DiplomaticEventCatalog.event_type_for(FRIENDLY) == TRADE_AGREEMENT
        for status in (NEUTRAL, HOSTILE, WAR):
            assert DiplomaticEventCatalog.event_type_for(status) is None


class TestCatalogSerialisation:
    def test_round_trip(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        catalog.update_events()
        blob = catalog.serialize()

        restored = DiplomaticEventCatalog(RelationTable())
        assert restored.deserialize(copy.deepcopy(blob), {'a': a, 'b': b})
        assert restored.serialize() == blob

    def test_restored_effects_still_revert(self, catalog, pair):
        a, b = pair
        event = catalog.create_event(RESEARCH_PACT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        restored = DiplomaticEventCatalog(RelationTable())
        restored.deserialize(catalog.serialize(), {'a': a, 'b': b})
        for _ in range(15):
            restored.update_events()
        assert a.research_speed == pytest.approx(1.0)

    @pytest.mark.parametrize('mangle', [
        lambda blob: blob.update(tick='seven'),
        lambda blob: blob.update(events={}),
        lambda blob: blob['events'][0].update(type='GRAND_BALL'),
        lambda blob: blob['events'][0].update(status='BESTIES'),
        lambda blob: blob['effects']['a'][0].update(duration=-1),
        lambda blob: blob['effects']['a'][0].update(bogus=1),
    ])
    def test_malformed_leaves_state(self, catalog, pair, mangle):
        a, b = pair
        event = catalog.create_event(TRADE_AGREEMENT, a, b, FRIENDLY)
        catalog.execute_event(event, a, b)
        before = catalog.serialize()
        blob = copy.deepcopy(before)
        mangle(blob)
        assert catalog.deserialize(blob, {'a': a, 'b': b}) is False
        assert catalog.serialize() == before

    def test_not_a_dict(self, catalog):
        assert catalog.deserialize(None, {}) is False
