# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
relations.py — The one relation table, and the read-only lookup handed to agents.

Relations are stored once per unordered pair (``frozenset({a, b})`` keys),
so A's view of B and B's view of A cannot diverge.  ``RelationTable.set`` is
the only write path; the director and the event catalog share one table.
"""
from __future__ import annotations

import abc

from .tables import NEUTRAL, STATUS_LADDER


class RelationTable:
    """Symmetric faction-pair → status map.  Unset pairs read as NEUTRAL."""

    def __init__(self) -> None:
        self._pairs: dict = {}

    @staticmethod
    def _key(a: str, b: str) -> frozenset:
        return frozenset((a, b))

    def get(self, a: str, b: str) -> str:
        return self._pairs.get(self._key(a, b), NEUTRAL)

    def set(self, a: str, b: str, status: str) -> None:
        if a == b:
            raise ValueError(f"a faction has no relation with itself ({a!r})")
        if status not in STATUS_LADDER:
            raise ValueError(f"unknown diplomatic status {status!r}")
        self._pairs[self._key(a, b)] = status

    def has(self, a: str, b: str) -> bool:
        return self._key(a, b) in self._pairs

    def counterparts(self, faction_id: str) -> dict:
        """Counterpart id → status for every pair involving *faction_id*."""
        out = {}
        for key, status in self._pairs.items():
            if faction_id in key:
                (other,) = key - {faction_id}
                out[other] = status
        return out

    def items(self):
        """(a, b, status) triples, ids sorted within each pair."""
        for key, status in self._pairs.items():
            a, b = sorted(key)
            yield a, b, status

    def clear(self) -> None:
        self._pairs.clear()

    def to_list(self) -> list:
        return [[a, b, status] for a, b, status in sorted(self.items())]

    @staticmethod
    def parse(data) -> list | None:
        """Validate a serialised table; the triples, or None when malformed."""
        if not isinstance(data, list):
            return None
        triples = []
        for row in data:
            if not isinstance(row, (list, tuple)) or len(row) != 3:
                return None
            a, b, status = row
            if (not isinstance(a, str) or not isinstance(b, str) or a == b
                    or status not in STATUS_LADDER):
                return None
            triples.append((a, b, status))
        return triples


class FactionLookup(abc.ABC):
    """Narrow capability agents receive instead of the whole director."""

    @abc.abstractmethod
    def get_faction(self, faction_id: str):
        """The agent with *faction_id*, or None."""

    @abc.abstractmethod
    def status_between(self, a: str, b: str) -> str:
        """Current status of the pair (a, b)."""

    @abc.abstractmethod
    def counterparts_of(self, faction_id: str) -> dict:
        """Counterpart id → status for *faction_id*."""

    @abc.abstractmethod
    def negotiate(self, source_id: str, target_id: str) -> str | None:
        """Ask for a one-rung improvement; the resulting status, or None."""
