# apps/calc/formulas.py
# PL: Czyste formuły: sizing po ryzyku z opłatą, dźwignia z marginu, MM, cena likwidacji.
# EN: Pure formulas: fee-aware risk sizing, leverage from margin, MM amount, liquidation price.

from __future__ import annotations
import math
from typing import Optional, Tuple

from apps.calc.tiers import DEFAULT_TABLE, TierTable


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse user text into a finite float; None when empty or not numeric."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _is_num(x: Optional[float]) -> bool:
    return x is not None and math.isfinite(x)


def size_position(
    risk_usd: Optional[float],
    entry_price: Optional[float],
    stop_loss: Optional[float],
    fee_rate: Optional[float],
) -> Optional[Tuple[float, float]]:
    """
    Returns (crypto, usd) or None.

    The taker fee paid on the exit at the stop is folded into the risk budget:
        risk_per_unit * size + entry * fee_rate * size <= risk_usd
        size = risk_usd / (risk_per_unit + entry * fee_rate)
    """
    if not all(_is_num(v) for v in (risk_usd, entry_price, stop_loss, fee_rate)):
        return None
    risk_per_unit = abs(entry_price - stop_loss)
    if risk_per_unit == 0 or entry_price == 0:
        return None
    denom = risk_per_unit + entry_price * fee_rate
    if denom == 0:
        return None
    crypto = risk_usd / denom
    return float(crypto), float(crypto * entry_price)


def leverage_from_margin(margin: Optional[float], notional_usd: Optional[float]) -> float:
    if not _is_num(margin) or not _is_num(notional_usd) or margin <= 0:
        return 0.0
    return float(notional_usd / margin)


def margin_from_leverage(leverage: Optional[float], notional_usd: Optional[float], decimals: int = 2) -> Optional[float]:
    """Inverse of leverage_from_margin, rounded to the margin display precision."""
    if not _is_num(leverage) or not _is_num(notional_usd) or leverage == 0:
        return None
    return round(notional_usd / leverage, decimals)


def maintenance_margin_amount(notional_usd: float, table: TierTable = DEFAULT_TABLE) -> float:
    rate, deduction = table.maintenance_margin_for(notional_usd)
    return max(0.0, notional_usd * rate - deduction)


def is_long(entry_price: float, stop_loss: float) -> bool:
    # kierunek zgadywany z położenia SL względem wejścia
    return stop_loss < entry_price


def liquidation_price(
    entry_price: float,
    initial_margin: float,
    maintenance_margin: float,
    position_size_crypto: float,
    long: bool,
) -> Optional[float]:
    """
    LONG:  entry - (initial_margin - MM) / qty
    SHORT: entry + (initial_margin - MM) / qty
    """
    if position_size_crypto == 0:
        return None
    shift = (initial_margin - maintenance_margin) / position_size_crypto
    if long:
        return float(entry_price - shift)
    return float(entry_price + shift)


def is_liquidation_safe(long: bool, liq_price: float, stop_loss: float) -> bool:
    """True when the stop-loss is hit before forced liquidation."""
    if long:
        return liq_price < stop_loss
    return liq_price > stop_loss
