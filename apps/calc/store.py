# apps/calc/store.py
# PL: Magazyn pól kalkulatora (wejścia jako tekst, pola pochodne jako liczby) + blokady.
# EN: Calculator field store (raw-text inputs, numeric derived fields) + locks.

from __future__ import annotations
from typing import Any, Dict, Optional, Set, Tuple

from apps.calc.formulas import parse_number

RISK_USD = "risk_usd"
ENTRY_PRICE = "entry_price"
STOP_LOSS = "stop_loss"
FEE_PERCENT = "fee_percent"
MARGIN = "margin"

POSITION_SIZE_CRYPTO = "position_size_crypto"
POSITION_SIZE_USD = "position_size_usd"
LEVERAGE = "leverage"
LIQUIDATION_PRICE = "liquidation_price"
IS_LIQUIDATION_SAFE = "is_liquidation_safe"

INPUT_FIELDS: Tuple[str, ...] = (RISK_USD, ENTRY_PRICE, STOP_LOSS, FEE_PERCENT, MARGIN)
DERIVED_FIELDS: Tuple[str, ...] = (
    POSITION_SIZE_CRYPTO,
    POSITION_SIZE_USD,
    LEVERAGE,
    LIQUIDATION_PRICE,
    IS_LIQUIDATION_SAFE,
)
ALL_FIELDS: Tuple[str, ...] = INPUT_FIELDS + DERIVED_FIELDS


class UnknownFieldError(KeyError):
    pass


class FieldStore:
    """
    Authoritative values of every field. None means "unset".
    Locked fields refuse writes until unlocked.
    """

    def __init__(self):
        self._values: Dict[str, Any] = {}
        self._locked: Set[str] = set()
        self.reset()

    def reset(self) -> None:
        self._values = {name: None for name in ALL_FIELDS}
        self._values[LEVERAGE] = 0.0
        self._locked = set()

    @staticmethod
    def _check(name: str) -> None:
        if name not in ALL_FIELDS:
            raise UnknownFieldError(name)

    def get(self, name: str) -> Any:
        self._check(name)
        return self._values[name]

    def number(self, name: str) -> Optional[float]:
        """Input fields are parsed on use; derived fields are already numbers."""
        value = self.get(name)
        if name in INPUT_FIELDS:
            return parse_number(value)
        return value

    def write(self, name: str, value: Any) -> bool:
        self._check(name)
        if name in self._locked:
            return False
        self._values[name] = value
        return True

    def is_locked(self, name: str) -> bool:
        self._check(name)
        return name in self._locked

    @property
    def locked(self) -> Set[str]:
        return set(self._locked)

    def toggle_lock(self, name: str) -> bool:
        if name not in INPUT_FIELDS:
            raise UnknownFieldError(name)
        if name in self._locked:
            self._locked.discard(name)
            return False
        self._locked.add(name)
        return True

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)
