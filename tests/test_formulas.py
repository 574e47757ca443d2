import math

import pytest

from apps.calc.formulas import (
    is_liquidation_safe,
    is_long,
    leverage_from_margin,
    liquidation_price,
    maintenance_margin_amount,
    margin_from_leverage,
    parse_number,
    size_position,
)
from apps.calc.tiers import Tier, TierTable


def test_parse_number():
    assert parse_number(" 12.5 ") == 12.5
    assert parse_number("1e3") == 1000.0
    assert parse_number("") is None
    assert parse_number(None) is None
    assert parse_number("abc") is None
    assert parse_number("nan") is None
    assert parse_number("inf") is None


def test_size_position_folds_fee_into_risk():
    crypto, usd = size_position(100.0, 50000.0, 49500.0, 0.0006)
    # risk_per_unit=500, 100 / (500 + 50000*0.0006) = 100/530
    assert math.isclose(crypto, 100.0 / 530.0)
    assert round(crypto, 8) == 0.18867925
    assert math.isclose(usd, crypto * 50000.0)
    assert round(usd, 2) == 9433.96


def test_size_position_total_loss_equals_budget():
    entry, sl, fee, risk = 2000.0, 2100.0, 0.00055, 50.0
    crypto, _ = size_position(risk, entry, sl, fee)
    loss = crypto * abs(entry - sl) + crypto * entry * fee
    assert loss == pytest.approx(risk)


def test_size_position_degenerate_inputs():
    assert size_position(100.0, 50000.0, 50000.0, 0.0006) is None
    assert size_position(100.0, 0.0, 10.0, 0.0006) is None
    assert size_position(100.0, None, 49500.0, 0.0006) is None
    assert size_position(100.0, 50000.0, 49500.0, None) is None


def test_size_position_without_fee():
    crypto, usd = size_position(100.0, 100.0, 90.0, 0.0)
    assert crypto == pytest.approx(10.0)
    assert usd == pytest.approx(1000.0)


def test_size_position_negative_risk_passes_through():
    crypto, _ = size_position(-100.0, 100.0, 90.0, 0.0)
    assert crypto == pytest.approx(-10.0)


def test_leverage_from_margin():
    assert leverage_from_margin(1000.0, 9433.96) == pytest.approx(9.43396)
    assert leverage_from_margin(0.0, 9433.96) == 0.0
    assert leverage_from_margin(0.0, 1e12) == 0.0
    assert leverage_from_margin(None, 100.0) == 0.0
    assert leverage_from_margin(100.0, None) == 0.0


def test_margin_from_leverage_rounds_to_cents():
    assert margin_from_leverage(10.0, 9433.9622641) == 943.40
    assert margin_from_leverage(0.0, 1000.0) is None
    assert margin_from_leverage(3.0, None) is None


def test_maintenance_margin_amount_floors_at_zero():
    assert maintenance_margin_amount(9433.96) == pytest.approx(47.1698)
    assert maintenance_margin_amount(2_500_000) == pytest.approx(12_800.0)
    table = TierTable([Tier(100, 0.01, 5)])
    assert maintenance_margin_amount(100, table) == 0.0


def test_is_long_from_stop_position():
    assert is_long(50000.0, 49500.0)
    assert not is_long(50000.0, 50500.0)


def test_liquidation_price_long():
    liq = liquidation_price(50000.0, 1000.0, 47.17, 0.18867925, True)
    assert liq == pytest.approx(50000.0 - 952.83 / 0.18867925)
    assert liq == pytest.approx(44950.0, abs=0.1)
    assert is_liquidation_safe(True, liq, 49500.0)


def test_liquidation_price_short():
    liq = liquidation_price(50000.0, 1000.0, 47.17, 0.18867925, False)
    assert liq == pytest.approx(55050.0, abs=0.1)
    assert is_liquidation_safe(False, liq, 50500.0)
    assert not is_liquidation_safe(False, 50400.0, 50500.0)


def test_liquidation_price_zero_size():
    assert liquidation_price(50000.0, 1000.0, 47.17, 0.0, True) is None


def test_leverage_from_negative_margin_is_zero():
    assert leverage_from_margin(-1000.0, 9433.96) == 0.0
