# apps/calc/render.py
# PL: Formatowanie stanu kalkulatora dla warstwy prezentacji. None = pole nieustawione.
# EN: Formats calculator state for the presentation layer. None marks an unset field.

from __future__ import annotations
from typing import Any, Dict, Optional

from apps.calc.formulas import parse_number
from apps.calc.store import (
    INPUT_FIELDS,
    IS_LIQUIDATION_SAFE,
    LEVERAGE,
    LIQUIDATION_PRICE,
    MARGIN,
    POSITION_SIZE_CRYPTO,
    POSITION_SIZE_USD,
    FieldStore,
)


def _fixed(value: Optional[float], decimals: int) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.{decimals}f}"


def format_leverage(value: Optional[float]) -> str:
    return f"{(value or 0.0):.1f}x"


def render(store: FieldStore) -> Dict[str, Any]:
    inputs = {name: store.get(name) or None for name in INPUT_FIELDS}
    outputs = {
        POSITION_SIZE_CRYPTO: _fixed(store.get(POSITION_SIZE_CRYPTO), 8),
        POSITION_SIZE_USD: _fixed(store.get(POSITION_SIZE_USD), 2),
        MARGIN: _fixed(parse_number(store.get(MARGIN)), 2),
        LEVERAGE: format_leverage(store.get(LEVERAGE)),
        LIQUIDATION_PRICE: _fixed(store.get(LIQUIDATION_PRICE), 2),
        IS_LIQUIDATION_SAFE: store.get(IS_LIQUIDATION_SAFE),
    }
    return {
        "inputs": inputs,
        "outputs": outputs,
        "locked": sorted(store.locked),
    }
