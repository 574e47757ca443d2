import pytest

from apps.calc.tiers import DEFAULT_TIERS, Tier, TierTable, maintenance_margin_for


def test_small_notional_uses_first_tier():
    assert maintenance_margin_for(0.0) == (0.005, 0)
    assert maintenance_margin_for(9433.96) == (0.005, 0)


def test_limit_is_inclusive():
    assert maintenance_margin_for(2_000_000) == (0.005, 0)
    assert maintenance_margin_for(2_000_001) == (0.0056, 1_200)


def test_notional_above_all_limits_uses_last_tier():
    last = DEFAULT_TIERS[-1]
    for notional in (5_600_001, 1e9, 1e15):
        assert maintenance_margin_for(notional) == (last.maintenance_margin_rate, last.deduction)


def test_custom_table_is_sorted_on_construction():
    table = TierTable([Tier(1_000, 0.02, 10), Tier(100, 0.01, 0)])
    assert [t.notional_limit for t in table.tiers] == [100, 1_000]
    assert table.maintenance_margin_for(50) == (0.01, 0)
    assert table.maintenance_margin_for(500) == (0.02, 10)


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        TierTable([])
