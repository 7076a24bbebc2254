# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
ledger.py — Per-faction resource ledger.

A ledger is a plain dict  kind → Resource.  Amounts are clamped at zero on
every update; costs are partial ledgers expressed as  kind → amount.

Public helpers:
    make_ledger(overrides)        → dict[str, Resource]
    tick_ledger(ledger)           → None
    can_afford(ledger, cost)      → bool
    deduct(ledger, cost)          → bool
    ledger_to_dict(ledger)        → dict   (JSON-compatible)
    ledger_from_dict(data)        → dict[str, Resource] | None
"""
from __future__ import annotations

from dataclasses import asdict, dataclass

from . import config

_FIELDS = ('amount', 'production_rate', 'consumption_rate', 'production_multiplier')


@dataclass
class Resource:
    amount:                float = 0.0
    production_rate:       float = 0.0
    consumption_rate:      float = 0.0
    production_multiplier: float = 1.0

    @property
    def net(self) -> float:
        """Per-turn change before the zero clamp."""
        return self.production_rate * self.production_multiplier - self.consumption_rate

    def tick(self) -> None:
        self.amount = max(0.0, self.amount + self.net)


def make_ledger(overrides: dict | None = None) -> dict:
    """Build the default ledger, replacing any kind named in *overrides*.

    Override values are either ``(amount, production, consumption)`` tuples
    or ready-made Resource objects.
    """
    ledger = {}
    spec   = dict(config.DEFAULT_RESOURCES)
    spec.update(overrides or {})
    for kind, value in spec.items():
        if isinstance(value, Resource):
            ledger[kind] = Resource(**asdict(value))
        else:
            amount, prod, cons = value
            ledger[kind] = Resource(float(amount), float(prod), float(cons))
    return ledger


def tick_ledger(ledger: dict) -> None:
    for res in ledger.values():
        res.tick()


def can_afford(ledger: dict, cost: dict) -> bool:
    """True when every kind in *cost* exists in the ledger with enough stock."""
    for kind, amount in cost.items():
        res = ledger.get(kind)
        if res is None or res.amount < amount:
            return False
    return True


def deduct(ledger: dict, cost: dict) -> bool:
    """Remove *cost* from the ledger.  All-or-nothing; False if unaffordable."""
    if not can_afford(ledger, cost):
        return False
    for kind, amount in cost.items():
        ledger[kind].amount = max(0.0, ledger[kind].amount - amount)
    return True


def total_cost(cost: dict) -> float:
    return float(sum(cost.values()))


# ══════════════════════════════════════════════════════════════════════════
# Serialisation
# ══════════════════════════════════════════════════════════════════════════

def ledger_to_dict(ledger: dict) -> dict:
    return {kind: asdict(res) for kind, res in ledger.items()}


def ledger_from_dict(data) -> dict | None:
    """Parse a serialised ledger; None when the shape is wrong."""
    if not isinstance(data, dict):
        return None
    ledger = {}
    for kind, fields in data.items():
        if not isinstance(kind, str) or not isinstance(fields, dict):
            return None
        values = {}
        for name in _FIELDS:
            value = fields.get(name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            values[name] = float(value)
        if values['amount'] < 0:
            return None
        ledger[kind] = Resource(**values)
    return ledger
