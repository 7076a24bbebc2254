"""
test_ledger.py — pytest suite for rival_factions.ledger
=======================================================
Covers: Resource.tick/net, make_ledger, can_afford, deduct, ledger (de)serialisation.
"""

import pytest

from rival_factions.ledger import (Resource, can_afford, deduct, ledger_from_dict,
                                   ledger_to_dict, make_ledger, tick_ledger, total_cost)


class TestResource:
    def test_net_applies_multiplier(self):
        assert Resource(0, 10, 5, 1.5).net == pytest.approx(10)

    def test_tick_clamps_at_zero(self):
        res = Resource(3, 0, 5)
        res.tick()
        assert res.amount == 0.0

    def test_tick_accumulates(self):
        res = Resource(100, 10, 5)
        res.tick()
        assert res.amount == 105


class TestMakeLedger:
    def test_defaults(self):
        ledger = make_ledger()
        assert ledger['food'] == Resource(100, 10, 5, 1.0)
        assert ledger['techPoints'] == Resource(0, 2, 0)
        assert set(ledger) == {'food', 'wood', 'stone', 'gold', 'metal', 'fuel', 'techPoints'}

    def test_tuple_override(self):
        ledger = make_ledger({'gold': (40, 2, 0)})
        assert ledger['gold'] == Resource(40, 2, 0)
        assert ledger['food'].amount == 100

    def test_resource_override_is_copied(self):
        source = Resource(7, 1, 1)
        ledger = make_ledger({'metal': source})
        ledger['metal'].amount = 0
        assert source.amount == 7

    def test_ledgers_are_independent(self):
        a, b = make_ledger(), make_ledger()
        a['food'].amount = 1
        assert b['food'].amount == 100


class TestAffordAndDeduct:
    def test_missing_kind_is_unaffordable(self):
        assert not can_afford({'food': Resource(10)}, {'gold': 1})

    def test_exact_amount_is_affordable(self):
        assert can_afford({'food': Resource(10)}, {'food': 10})

    def test_deduct_is_all_or_nothing(self):
        ledger = {'food': Resource(100), 'gold': Resource(5)}
        assert deduct(ledger, {'food': 10, 'gold': 10}) is False
        assert ledger['food'].amount == 100
        assert ledger['gold'].amount == 5

    def test_deduct_success(self):
        ledger = make_ledger({'gold': (50, 0, 0)})
        assert deduct(ledger, {'gold': 10, 'food': 20}) is True
        assert ledger['gold'].amount == 40
        assert ledger['food'].amount == 80

    def test_total_cost(self):
        assert total_cost({'wood': 20, 'stone': 10}) == 30.0

    def test_tick_ledger_never_negative(self):
        ledger = {'food': Resource(1, 0, 50), 'wood': Resource(0, 0, 1)}
        for _ in range(3):
            tick_ledger(ledger)
        assert all(r.amount >= 0 for r in ledger.values())


class TestLedgerSerialisation:
    def test_round_trip(self):
        ledger = make_ledger({'gold': (40, 2, 0)})
        ledger['food'].production_multiplier = 1.3
        assert ledger_from_dict(ledger_to_dict(ledger)) == ledger

    def test_not_a_dict(self):
        assert ledger_from_dict([1, 2, 3]) is None

    def test_negative_amount_rejected(self):
        data = ledger_to_dict(make_ledger())
        data['food']['amount'] = -1
        assert ledger_from_dict(data) is None

    def test_missing_field_rejected(self):
        data = ledger_to_dict(make_ledger())
        del data['wood']['consumption_rate']
        assert ledger_from_dict(data) is None

    def test_bool_rejected(self):
        data = ledger_to_dict(make_ledger())
        data['stone']['amount'] = True
        assert ledger_from_dict(data) is None
