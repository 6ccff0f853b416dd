"""
Trade Calculation Engine

Pure position-sizing and P&L math for the journal's calculators.
No I/O and no shared state - every function is safe to call concurrently.

All arithmetic uses Decimal; only the returned values are rounded
(half up), so intermediate steps don't compound rounding error.

Pip convention: quotes above 10 are treated as JPY-style pairs with a pip of
0.01, everything else uses 0.0001. This is a quoting heuristic, not a
general FX rule, and is kept exactly for compatibility with stored journals.
"""

import decimal
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Union

from tradejournal.domain.models.trade import TradeDirection
from tradejournal.shared.exceptions import InvalidParametersError


Number = Union[Decimal, int, float, str]

PIP_SIZE_THRESHOLD = Decimal("10")
JPY_PIP_SIZE = Decimal("0.01")
STANDARD_PIP_SIZE = Decimal("0.0001")
STANDARD_LOT_SIZE = Decimal("100000")
DEFAULT_MAINTENANCE_MARGIN_PCT = Decimal("0.5")

_HUNDRED = Decimal("100")
_ONE = Decimal("1")
_TWO_DP = Decimal("0.01")
_ONE_DP = Decimal("0.1")
_PRICE_DP = Decimal("0.00000001")

# Working precision for intermediate results
_CONTEXT = decimal.Context(prec=28, rounding=decimal.ROUND_HALF_EVEN)


# ==================== RESULTS ====================

@dataclass(frozen=True)
class PositionSizeResult:
    """Position sizing output"""
    position_size: Decimal
    risk_amount: Decimal
    pip_value: Decimal
    pips: Decimal
    leverage_used: int
    margin_required: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positionSize": float(self.position_size),
            "riskAmount": float(self.risk_amount),
            "pipValue": float(self.pip_value),
            "pips": float(self.pips),
            "leverageUsed": self.leverage_used,
            "marginRequired": float(self.margin_required),
        }


@dataclass(frozen=True)
class ProfitLossResult:
    """Profit/loss output"""
    profit_loss: Decimal
    pips: Decimal
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profitLoss": float(self.profit_loss),
            "pips": float(self.pips),
            "percentage": float(self.percentage),
        }


@dataclass(frozen=True)
class RiskRewardResult:
    """Risk/reward output; ``ratio`` is rendered as "1:X.XX"."""
    ratio: str
    ratio_value: Decimal
    risk_pips: Decimal
    reward_pips: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ratio": self.ratio,
            "ratioValue": float(self.ratio_value),
            "riskPips": float(self.risk_pips),
            "rewardPips": float(self.reward_pips),
        }


# ==================== HELPERS ====================

def to_decimal(value: Number, name: str) -> Decimal:
    """
    Coerce user input to a finite Decimal.

    Floats go through ``str`` so 1.0845 stays 1.0845 rather than its binary
    expansion.

    Raises:
        InvalidParametersError: value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidParametersError(f"{name} must be a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (decimal.InvalidOperation, ValueError):
        raise InvalidParametersError(f"{name} must be a number")
    if not result.is_finite():
        raise InvalidParametersError(f"{name} must be a finite number")
    return result


def _to_leverage(value: Number) -> int:
    leverage = to_decimal(value, "leverage")
    if leverage != leverage.to_integral_value():
        raise InvalidParametersError("leverage must be a whole number")
    if leverage < 1:
        raise InvalidParametersError("leverage must be at least 1")
    return int(leverage)


def _to_direction(value: Union[TradeDirection, str]) -> TradeDirection:
    try:
        return TradeDirection(str(getattr(value, "value", value)).lower())
    except ValueError:
        raise InvalidParametersError("direction must be 'long' or 'short'")


def _round(value: Decimal, quantum: Decimal) -> Decimal:
    try:
        return value.quantize(quantum, rounding=ROUND_HALF_UP)
    except decimal.InvalidOperation:
        # More digits than the working precision can hold at this scale
        raise InvalidParametersError("Inputs are too large to calculate a result")


def get_pip_size(entry_price: Decimal) -> Decimal:
    """0.01 for quotes above 10 (JPY-style), otherwise 0.0001."""
    return JPY_PIP_SIZE if entry_price > PIP_SIZE_THRESHOLD else STANDARD_PIP_SIZE


# ==================== CALCULATIONS ====================

def compute_position_size(
    account_size: Number,
    risk_percentage: Number,
    entry_price: Number,
    stop_loss: Number,
    leverage: Number = 1
) -> PositionSizeResult:
    """
    Size a position so that hitting the stop loses ``risk_percentage`` of
    the account.

    Args:
        account_size: Account equity
        risk_percentage: Percent of equity to risk (0-100)
        entry_price: Planned entry
        stop_loss: Planned stop
        leverage: Whole-number leverage, >= 1

    Returns:
        PositionSizeResult: lots (2 dp), risk amount, pip value, pips (1 dp),
        leverage and margin required

    Raises:
        InvalidParametersError: stop equals entry, non-positive entry, or
            out-of-range inputs
    """
    account_size = to_decimal(account_size, "accountSize")
    risk_percentage = to_decimal(risk_percentage, "riskPercentage")
    entry_price = to_decimal(entry_price, "entryPrice")
    stop_loss = to_decimal(stop_loss, "stopLoss")
    leverage = _to_leverage(leverage)

    if account_size < 0:
        raise InvalidParametersError("accountSize cannot be negative")
    if not (0 <= risk_percentage <= 100):
        raise InvalidParametersError("riskPercentage must be between 0 and 100")
    if entry_price <= 0:
        raise InvalidParametersError("entryPrice must be greater than zero")
    if stop_loss == entry_price:
        raise InvalidParametersError("stopLoss must differ from entryPrice")

    with decimal.localcontext(_CONTEXT):
        risk_amount = account_size * risk_percentage / _HUNDRED

        pip_size = get_pip_size(entry_price)
        pips = abs(entry_price - stop_loss) / pip_size

        pip_value_per_lot = (pip_size / entry_price) * STANDARD_LOT_SIZE

        position_size_lots = risk_amount / (pips * pip_value_per_lot)
        leveraged_size = position_size_lots * leverage

        margin_required = (leveraged_size * STANDARD_LOT_SIZE * entry_price) / leverage
        pip_value = leveraged_size * pip_value_per_lot * STANDARD_LOT_SIZE

    return PositionSizeResult(
        position_size=_round(leveraged_size, _TWO_DP),
        risk_amount=_round(risk_amount, _TWO_DP),
        pip_value=_round(pip_value, _TWO_DP),
        pips=_round(pips, _ONE_DP),
        leverage_used=leverage,
        margin_required=_round(margin_required, _TWO_DP),
    )


def compute_profit_loss(
    entry_price: Number,
    exit_price: Number,
    position_size: Number,
    direction: Union[TradeDirection, str],
    leverage: Number = 1
) -> ProfitLossResult:
    """
    Profit/loss of a position closed at ``exit_price``.

    Returns:
        ProfitLossResult: P&L (2 dp), pips moved (1 dp) and return on
        margin in percent (2 dp)

    Raises:
        InvalidParametersError: zero entry price, zero leverage or zero size
    """
    entry_price = to_decimal(entry_price, "entryPrice")
    exit_price = to_decimal(exit_price, "exitPrice")
    position_size = to_decimal(position_size, "positionSize")
    direction = _to_direction(direction)

    if entry_price == 0:
        raise InvalidParametersError("entryPrice must be non-zero")
    leverage = _to_leverage(leverage)
    if position_size <= 0:
        raise InvalidParametersError("positionSize must be greater than zero")

    with decimal.localcontext(_CONTEXT):
        if direction == TradeDirection.LONG:
            price_diff = exit_price - entry_price
        else:
            price_diff = entry_price - exit_price

        pips = price_diff / get_pip_size(entry_price)

        position_value = position_size * STANDARD_LOT_SIZE
        profit_loss = (price_diff / entry_price) * position_value * leverage

        margin_used = (position_size * STANDARD_LOT_SIZE * entry_price) / leverage
        percentage = profit_loss / margin_used * _HUNDRED

    return ProfitLossResult(
        profit_loss=_round(profit_loss, _TWO_DP),
        pips=_round(pips, _ONE_DP),
        percentage=_round(percentage, _TWO_DP),
    )


def compute_risk_reward(
    entry_price: Number,
    stop_loss: Number,
    take_profit: Number,
    direction: Union[TradeDirection, str]
) -> RiskRewardResult:
    """
    Reward-to-risk ratio of a planned trade, in pips.

    Raises:
        InvalidParametersError: stop loss sits exactly at entry (zero risk)
    """
    entry_price = to_decimal(entry_price, "entryPrice")
    stop_loss = to_decimal(stop_loss, "stopLoss")
    take_profit = to_decimal(take_profit, "takeProfit")
    direction = _to_direction(direction)

    if entry_price <= 0:
        raise InvalidParametersError("entryPrice must be greater than zero")

    with decimal.localcontext(_CONTEXT):
        pip_size = get_pip_size(entry_price)
        if direction == TradeDirection.LONG:
            risk_pips = (entry_price - stop_loss) / pip_size
            reward_pips = (take_profit - entry_price) / pip_size
        else:
            risk_pips = (stop_loss - entry_price) / pip_size
            reward_pips = (entry_price - take_profit) / pip_size

        if risk_pips == 0:
            raise InvalidParametersError("stopLoss must differ from entryPrice")

        ratio = reward_pips / risk_pips

    ratio_value = _round(ratio, _TWO_DP)
    return RiskRewardResult(
        ratio=f"1:{ratio_value}",
        ratio_value=ratio_value,
        risk_pips=_round(risk_pips, _ONE_DP),
        reward_pips=_round(reward_pips, _ONE_DP),
    )


def compute_breakeven_win_rate(risk_reward_ratio: Number) -> Decimal:
    """Win rate (percent, 2 dp) needed to break even at the given reward/risk."""
    ratio = to_decimal(risk_reward_ratio, "riskRewardRatio")
    if ratio < 0:
        raise InvalidParametersError("riskRewardRatio cannot be negative")

    with decimal.localcontext(_CONTEXT):
        win_rate = _ONE / (_ONE + ratio) * _HUNDRED

    return _round(win_rate, _TWO_DP)


def compute_liquidation_price(
    entry_price: Number,
    leverage: Number,
    direction: Union[TradeDirection, str],
    maintenance_margin_pct: Number = DEFAULT_MAINTENANCE_MARGIN_PCT
) -> Decimal:
    """
    Estimated liquidation price under a single-factor margin model.

    ``(100 - maintenance_margin_pct) / leverage`` percent of the entry price
    is the adverse move that wipes out the margin. Real exchanges add fees,
    funding and tiered maintenance rates, so treat the result as an
    approximation.
    """
    entry_price = to_decimal(entry_price, "entryPrice")
    leverage = _to_leverage(leverage)
    direction = _to_direction(direction)
    maintenance = to_decimal(maintenance_margin_pct, "maintenanceMarginPct")

    if entry_price <= 0:
        raise InvalidParametersError("entryPrice must be greater than zero")
    if not (0 <= maintenance < 100):
        raise InvalidParametersError("maintenanceMarginPct must be in [0, 100)")

    with decimal.localcontext(_CONTEXT):
        liquidation_pct = (_HUNDRED - maintenance) / leverage / _HUNDRED
        if direction == TradeDirection.LONG:
            price = entry_price * (_ONE - liquidation_pct)
        else:
            price = entry_price * (_ONE + liquidation_pct)

    return _round(price, _PRICE_DP)
