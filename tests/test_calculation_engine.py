"""
Calculation Engine Tests

Position sizing, P&L, risk/reward, breakeven and liquidation math.
"""

import pytest
from decimal import Decimal

from tradejournal.domain.models.trade import TradeDirection
from tradejournal.modules.calculator.service import (
    STANDARD_LOT_SIZE,
    compute_breakeven_win_rate,
    compute_liquidation_price,
    compute_position_size,
    compute_profit_loss,
    compute_risk_reward,
    get_pip_size,
    to_decimal,
)
from tradejournal.shared.exceptions import InvalidParametersError


# ==================== PIP SIZE ====================

def test_pip_size_standard_pair():
    assert get_pip_size(Decimal("1.0845")) == Decimal("0.0001")


def test_pip_size_jpy_style_quote():
    assert get_pip_size(Decimal("150.25")) == Decimal("0.01")


def test_pip_size_threshold_is_exclusive():
    assert get_pip_size(Decimal("10")) == Decimal("0.0001")


# ==================== POSITION SIZE ====================

def test_position_size_reference_example():
    result = compute_position_size(2000, 2.0, 1.0845, 1.0820, 1)

    assert result.risk_amount == Decimal("40.00")
    assert result.pips == Decimal("25.0")
    assert result.position_size == Decimal("0.17")
    assert result.margin_required == Decimal("18818.24")
    assert result.pip_value == Decimal("160000.00")
    assert result.leverage_used == 1


def test_position_size_with_leverage_scales_size_not_margin():
    result = compute_position_size(2000, 2.0, 1.0845, 1.0820, 10)

    assert result.position_size == Decimal("1.74")
    assert result.margin_required == Decimal("18818.24")
    assert result.pip_value == Decimal("1600000.00")
    assert result.leverage_used == 10


def test_position_size_jpy_pair():
    result = compute_position_size(10000, 1, 150.00, 149.50)

    assert result.risk_amount == Decimal("100.00")
    assert result.pips == Decimal("50.0")
    assert result.position_size == Decimal("0.30")
    assert result.margin_required == Decimal("4500000.00")


def test_position_size_short_stop_above_entry():
    long_result = compute_position_size(2000, 2.0, 1.0845, 1.0820)
    short_result = compute_position_size(2000, 2.0, 1.0845, 1.0870)

    assert short_result == long_result


def test_position_size_accepts_strings():
    result = compute_position_size("2000", "2", "1.0845", "1.0820", "1")
    assert result.position_size == Decimal("0.17")


@pytest.mark.parametrize("leverage", [1, 2, 5, 10, 50, 100])
def test_position_size_reproduces_risk_amount(leverage):
    """Risk implied by the returned size stays within one rounding step."""
    entry, stop = Decimal("1.0845"), Decimal("1.0820")
    result = compute_position_size(2000, 2.0, entry, stop, leverage)

    pip_size = get_pip_size(entry)
    pips = abs(entry - stop) / pip_size
    pip_value_per_lot = pip_size / entry * STANDARD_LOT_SIZE

    implied_risk = result.position_size / leverage * pips * pip_value_per_lot
    tolerance = Decimal("0.005") / leverage * pips * pip_value_per_lot

    assert abs(implied_risk - result.risk_amount) <= tolerance


def test_position_size_zero_risk_gives_zero_size():
    result = compute_position_size(2000, 0, 1.0845, 1.0820)
    assert result.position_size == Decimal("0.00")
    assert result.risk_amount == Decimal("0.00")


@pytest.mark.parametrize("kwargs", [
    {"stop_loss": 1.0845},
    {"entry_price": 0, "stop_loss": 1},
    {"entry_price": -1, "stop_loss": 1},
    {"leverage": 0},
    {"leverage": 1.5},
    {"risk_percentage": 101},
    {"risk_percentage": -1},
    {"account_size": -100},
    {"account_size": "abc"},
    {"entry_price": float("nan")},
])
def test_position_size_invalid_parameters(kwargs):
    params = {
        "account_size": 2000,
        "risk_percentage": 2,
        "entry_price": 1.0845,
        "stop_loss": 1.0820,
        "leverage": 1,
    }
    params.update(kwargs)

    with pytest.raises(InvalidParametersError):
        compute_position_size(**params)


def test_to_decimal_keeps_float_literal():
    assert to_decimal(1.0845, "entryPrice") == Decimal("1.0845")


def test_to_decimal_rejects_bool():
    with pytest.raises(InvalidParametersError):
        to_decimal(True, "entryPrice")


def test_position_size_oversized_account_is_invalid_parameters():
    with pytest.raises(InvalidParametersError, match="too large"):
        compute_position_size(10**24, 100, "1.0845", "1.0844", 1)


# ==================== PROFIT / LOSS ====================

def test_profit_loss_long_winner():
    result = compute_profit_loss(1.1, 1.101, 1, "long")

    assert result.pips == Decimal("10.0")
    assert result.profit_loss == Decimal("90.91")
    assert result.percentage == Decimal("0.08")


def test_profit_loss_short_mirror():
    result = compute_profit_loss(1.1, 1.101, 1, TradeDirection.SHORT)

    assert result.pips == Decimal("-10.0")
    assert result.profit_loss == Decimal("-90.91")
    assert result.percentage == Decimal("-0.08")


def test_profit_loss_leverage_multiplies_pnl_and_return():
    result = compute_profit_loss(1.1, 1.101, 1, "long", leverage=10)

    assert result.profit_loss == Decimal("909.09")
    assert result.percentage == Decimal("8.26")


@pytest.mark.parametrize("entry,exit_", [
    (1.1, 1.101),
    (1.1, 1.095),
    (150.0, 151.25),
    (150.0, 148.0),
])
def test_profit_loss_sign_symmetry(entry, exit_):
    long_result = compute_profit_loss(entry, exit_, 1, "long", 5)
    short_result = compute_profit_loss(exit_, entry, 1, "short", 5)

    assert (long_result.profit_loss > 0) == (short_result.profit_loss > 0)
    assert (long_result.profit_loss < 0) == (short_result.profit_loss < 0)
    assert long_result.pips == short_result.pips


def test_profit_loss_flat_trade():
    result = compute_profit_loss(1.1, 1.1, 1, "long")
    assert result.profit_loss == Decimal("0.00")
    assert result.pips == Decimal("0.0")


@pytest.mark.parametrize("kwargs", [
    {"entry_price": 0},
    {"leverage": 0},
    {"position_size": 0},
    {"direction": "sideways"},
])
def test_profit_loss_invalid_parameters(kwargs):
    params = {
        "entry_price": 1.1,
        "exit_price": 1.101,
        "position_size": 1,
        "direction": "long",
        "leverage": 1,
    }
    params.update(kwargs)

    with pytest.raises(InvalidParametersError):
        compute_profit_loss(**params)


# ==================== RISK / REWARD ====================

def test_risk_reward_long():
    result = compute_risk_reward(1.1000, 1.0950, 1.1100, "long")

    assert result.risk_pips == Decimal("50.0")
    assert result.reward_pips == Decimal("100.0")
    assert result.ratio == "1:2.00"
    assert result.ratio_value == Decimal("2.00")


def test_risk_reward_short():
    result = compute_risk_reward(1.1000, 1.1050, 1.0925, "short")

    assert result.risk_pips == Decimal("50.0")
    assert result.reward_pips == Decimal("75.0")
    assert result.ratio == "1:1.50"


def test_risk_reward_zero_risk():
    with pytest.raises(InvalidParametersError):
        compute_risk_reward(1.1, 1.1, 1.2, "long")


def test_risk_reward_oversized_take_profit_is_invalid_parameters():
    with pytest.raises(InvalidParametersError, match="too large"):
        compute_risk_reward("1.1", "1.0999999999999", "1e20", "long")


def test_risk_reward_to_dict_shape():
    data = compute_risk_reward(1.1000, 1.0950, 1.1100, "long").to_dict()
    assert data == {"ratio": "1:2.00", "ratioValue": 2.0, "riskPips": 50.0, "rewardPips": 100.0}


# ==================== BREAKEVEN ====================

@pytest.mark.parametrize("ratio,expected", [
    (0, "100.00"),
    (1, "50.00"),
    (2, "33.33"),
    (3, "25.00"),
])
def test_breakeven_win_rate(ratio, expected):
    assert compute_breakeven_win_rate(ratio) == Decimal(expected)


def test_breakeven_negative_ratio():
    with pytest.raises(InvalidParametersError):
        compute_breakeven_win_rate(-1)


# ==================== LIQUIDATION ====================

def test_liquidation_long():
    # (100 - 0.5) / 10 / 100 = 9.95% below entry
    assert compute_liquidation_price(50000, 10, "long") == Decimal("45025.00000000")


def test_liquidation_short():
    assert compute_liquidation_price(50000, 10, "short") == Decimal("54975.00000000")


def test_liquidation_custom_maintenance():
    assert compute_liquidation_price(100, 2, "long", maintenance_margin_pct=0) == Decimal("50.00000000")


@pytest.mark.parametrize("kwargs", [
    {"entry_price": 0},
    {"leverage": 0},
    {"maintenance_margin_pct": 100},
    {"maintenance_margin_pct": -1},
    {"entry_price": "1e25"},
])
def test_liquidation_invalid_parameters(kwargs):
    params = {"entry_price": 50000, "leverage": 10, "direction": "long"}
    params.update(kwargs)

    with pytest.raises(InvalidParametersError):
        compute_liquidation_price(**params)
