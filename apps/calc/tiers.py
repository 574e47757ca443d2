# apps/calc/tiers.py
# PL: Tabela progów maintenance margin (Bybit USDT perp) i wyszukiwanie progu po notionalu.
# EN: Maintenance-margin tier table (Bybit USDT perp) and notional -> tier lookup.

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class Tier:
    notional_limit: float
    maintenance_margin_rate: float
    deduction: float
    max_leverage: int = 100


DEFAULT_TIERS: Tuple[Tier, ...] = (
    Tier(2_000_000, 0.0050, 0, 100),
    Tier(2_600_000, 0.0056, 1_200, 90),
    Tier(3_200_000, 0.0063, 3_020, 80),
    Tier(3_800_000, 0.0067, 4_300, 75),
    Tier(4_400_000, 0.0071, 5_820, 70),
    Tier(5_000_000, 0.0077, 8_460, 65),
    Tier(5_600_000, 0.0091, 15_460, 55),
)


class TierTable:
    """Ordered brackets; the first one whose limit covers the notional applies."""

    def __init__(self, tiers: Iterable[Tier] = DEFAULT_TIERS):
        ordered = sorted(tiers, key=lambda t: t.notional_limit)
        if not ordered:
            raise ValueError("At least one maintenance margin tier required")
        self._tiers: List[Tier] = ordered

    @property
    def tiers(self) -> Tuple[Tier, ...]:
        return tuple(self._tiers)

    def tier_for(self, notional: float) -> Tier:
        for tier in self._tiers:
            if notional <= tier.notional_limit:
                return tier
        # powyżej ostatniego progu -> ostatni próg
        return self._tiers[-1]

    def maintenance_margin_for(self, notional: float) -> Tuple[float, float]:
        """Return (rate, deduction). Callers must not pass a negative notional."""
        tier = self.tier_for(notional)
        return tier.maintenance_margin_rate, tier.deduction


DEFAULT_TABLE = TierTable()


def maintenance_margin_for(notional: float, table: TierTable = DEFAULT_TABLE) -> Tuple[float, float]:
    return table.maintenance_margin_for(notional)
