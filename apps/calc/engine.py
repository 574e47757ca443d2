# apps/calc/engine.py
# PL: Silnik propagacji: po zmianie pola przelicza grupy sizing -> dźwignia -> likwidacja.
# EN: Propagation engine: on every edit re-runs sizing -> leverage -> liquidation groups.

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional, Set, Tuple

from apps.calc import formulas
from apps.calc.config import CalcSettings, get_settings
from apps.calc.store import (
    ENTRY_PRICE,
    FEE_PERCENT,
    INPUT_FIELDS,
    IS_LIQUIDATION_SAFE,
    LEVERAGE,
    LIQUIDATION_PRICE,
    MARGIN,
    POSITION_SIZE_CRYPTO,
    POSITION_SIZE_USD,
    RISK_USD,
    STOP_LOSS,
    FieldStore,
    UnknownFieldError,
)
from apps.calc.tiers import DEFAULT_TABLE, TierTable

logger = logging.getLogger(__name__)


def _sizing(store: FieldStore, table: TierTable) -> Dict[str, Any]:
    fee_pct = store.number(FEE_PERCENT)
    sized = formulas.size_position(
        store.number(RISK_USD),
        store.number(ENTRY_PRICE),
        store.number(STOP_LOSS),
        None if fee_pct is None else fee_pct / 100.0,
    )
    if sized is None:
        return {POSITION_SIZE_CRYPTO: None, POSITION_SIZE_USD: None}
    crypto, usd = sized
    return {POSITION_SIZE_CRYPTO: crypto, POSITION_SIZE_USD: usd}


def _leverage(store: FieldStore, table: TierTable) -> Dict[str, Any]:
    return {LEVERAGE: formulas.leverage_from_margin(store.number(MARGIN), store.number(POSITION_SIZE_USD))}


def _liquidation(store: FieldStore, table: TierTable) -> Dict[str, Any]:
    unset = {LIQUIDATION_PRICE: None, IS_LIQUIDATION_SAFE: None}
    entry = store.number(ENTRY_PRICE)
    stop = store.number(STOP_LOSS)
    usd = store.number(POSITION_SIZE_USD)
    crypto = store.number(POSITION_SIZE_CRYPTO)
    margin = store.number(MARGIN)
    lev = store.number(LEVERAGE)
    if entry is None or stop is None:
        return unset
    if any(v is None or v <= 0 for v in (usd, crypto, margin, lev)):
        return unset

    long = formulas.is_long(entry, stop)
    mm = formulas.maintenance_margin_amount(usd, table)
    initial_margin = usd / lev
    liq = formulas.liquidation_price(entry, initial_margin, mm, crypto, long)
    if liq is None:
        return unset
    return {LIQUIDATION_PRICE: liq, IS_LIQUIDATION_SAFE: formulas.is_liquidation_safe(long, liq, stop)}


@dataclass(frozen=True)
class UpdateGroup:
    name: str
    triggers: FrozenSet[str]
    outputs: Tuple[str, ...]
    compute: Callable[[FieldStore, TierTable], Dict[str, Any]]


# kolejność = porządek topologiczny; każda grupa konsumuje wyjścia poprzedniej
GROUPS: Tuple[UpdateGroup, ...] = (
    UpdateGroup(
        "sizing",
        frozenset({RISK_USD, ENTRY_PRICE, STOP_LOSS, FEE_PERCENT, MARGIN}),
        (POSITION_SIZE_CRYPTO, POSITION_SIZE_USD),
        _sizing,
    ),
    UpdateGroup(
        "leverage",
        frozenset({MARGIN, POSITION_SIZE_USD}),
        (LEVERAGE,),
        _leverage,
    ),
    UpdateGroup(
        "liquidation",
        frozenset({ENTRY_PRICE, STOP_LOSS, POSITION_SIZE_USD, POSITION_SIZE_CRYPTO, MARGIN, LEVERAGE}),
        (LIQUIDATION_PRICE, IS_LIQUIDATION_SAFE),
        _liquidation,
    ),
)


class Calculator:
    """
    Single mutation entry point for a FieldStore.

    Every action is tagged with the field that drives it; the driver decides
    which direction of the margin <-> leverage pair is evaluated.
    """

    def __init__(
        self,
        store: Optional[FieldStore] = None,
        table: TierTable = DEFAULT_TABLE,
        settings: Optional[CalcSettings] = None,
    ):
        self.store = store or FieldStore()
        self.table = table
        self.settings = settings or get_settings()

    # ---- input surface ----

    def set_field(self, name: str, raw_text: Optional[str]) -> bool:
        if name not in INPUT_FIELDS:
            raise UnknownFieldError(name)
        if self.store.is_locked(name):
            logger.debug("edit of locked field %s rejected", name)
            return False
        self.store.write(name, raw_text)
        self._propagate({name}, driver=name)
        return True

    def toggle_lock(self, name: str) -> bool:
        return self.store.toggle_lock(name)

    def reset_all(self) -> None:
        self.store.reset()

    def set_leverage(self, value: Optional[float]) -> bool:
        """Manual override: leverage drives margin = usd / leverage."""
        if value is None or not value > 0:
            return False
        if self.store.is_locked(MARGIN):
            logger.debug("leverage override ignored, margin locked")
            return False
        usd = self.store.number(POSITION_SIZE_USD)
        if usd is None or usd <= 0:
            logger.debug("leverage override ignored, no position size")
            return False

        lev = min(max(float(value), self.settings.LEVERAGE_MIN), self.settings.LEVERAGE_MAX)
        decimals = self.settings.MARGIN_DECIMALS
        margin = formulas.margin_from_leverage(lev, usd, decimals)
        if margin is None or margin <= 0:
            # margin zaokrąglony do 0 -> dźwignia musiałaby być 0
            logger.debug("leverage override ignored, margin rounds to zero")
            return False
        self.store.write(LEVERAGE, lev)
        self.store.write(MARGIN, f"{margin:.{decimals}f}")
        self._propagate({LEVERAGE, MARGIN}, driver=LEVERAGE)
        return True

    def recompute(self) -> None:
        """Run every group regardless of triggers."""
        self._propagate(set(INPUT_FIELDS), driver=None)

    # ---- propagation ----

    def _propagate(self, changed: Set[str], driver: Optional[str]) -> None:
        for group in GROUPS:
            if driver in group.outputs:
                # the driver already holds this group's output for this event
                continue
            if not (group.triggers & changed):
                continue
            for name, value in group.compute(self.store, self.table).items():
                if self.store.is_locked(name):
                    continue
                if self.store.get(name) != value:
                    self.store.write(name, value)
                    changed.add(name)
            logger.debug("group %s done, changed=%s", group.name, sorted(changed))

    def snapshot(self) -> Dict[str, Any]:
        return self.store.snapshot()
