"""
Calculator API endpoints.

Stateless trade calculators; no authentication required.
"""

from fastapi import APIRouter, status

from tradejournal.core.responses import (
    app_exception_response,
    internal_error_response,
    success_response,
)
from tradejournal.modules.calculator import service as calculator
from tradejournal.modules.calculator.schemas import (
    BreakevenWinRateRequest,
    LiquidationPriceRequest,
    PositionSizeRequest,
    ProfitLossRequest,
    RiskRewardRequest,
)
from tradejournal.shared.exceptions import AppException
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/calculate", tags=["Calculator"])


@router.post(
    "/position-size",
    status_code=status.HTTP_200_OK,
    response_description="Position size calculated"
)
async def calculate_position_size(request: PositionSizeRequest):
    """Size a position from account equity, risk percent and stop distance."""
    try:
        result = calculator.compute_position_size(
            account_size=request.account_size,
            risk_percentage=request.risk_percentage,
            entry_price=request.entry_price,
            stop_loss=request.stop_loss,
            leverage=request.leverage
        )
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Position size calculated",
            data=result.to_dict()
        )
    except AppException as e:
        logger.warning(f"Position size calculation rejected: {e.message}")
        return app_exception_response(e, "Position size calculation failed")
    except Exception as e:
        logger.error(f"Unexpected error calculating position size: {str(e)}")
        return internal_error_response("Position size calculation failed")


@router.post(
    "/profit-loss",
    status_code=status.HTTP_200_OK,
    response_description="Profit/loss calculated"
)
async def calculate_profit_loss(request: ProfitLossRequest):
    """P&L, pips and return on margin of a closed position."""
    try:
        result = calculator.compute_profit_loss(
            entry_price=request.entry_price,
            exit_price=request.exit_price,
            position_size=request.position_size,
            direction=request.direction,
            leverage=request.leverage
        )
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Profit/loss calculated",
            data=result.to_dict()
        )
    except AppException as e:
        logger.warning(f"Profit/loss calculation rejected: {e.message}")
        return app_exception_response(e, "Profit/loss calculation failed")
    except Exception as e:
        logger.error(f"Unexpected error calculating profit/loss: {str(e)}")
        return internal_error_response("Profit/loss calculation failed")


@router.post(
    "/risk-reward",
    status_code=status.HTTP_200_OK,
    response_description="Risk/reward calculated"
)
async def calculate_risk_reward(request: RiskRewardRequest):
    """Reward-to-risk ratio, plus the win rate needed to break even at it."""
    try:
        result = calculator.compute_risk_reward(
            entry_price=request.entry_price,
            stop_loss=request.stop_loss,
            take_profit=request.take_profit,
            direction=request.direction
        )
        data = result.to_dict()
        if result.ratio_value >= 0:
            data["breakevenWinRate"] = float(
                calculator.compute_breakeven_win_rate(result.ratio_value)
            )
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Risk/reward calculated",
            data=data
        )
    except AppException as e:
        logger.warning(f"Risk/reward calculation rejected: {e.message}")
        return app_exception_response(e, "Risk/reward calculation failed")
    except Exception as e:
        logger.error(f"Unexpected error calculating risk/reward: {str(e)}")
        return internal_error_response("Risk/reward calculation failed")


@router.post(
    "/liquidation-price",
    status_code=status.HTTP_200_OK,
    response_description="Liquidation price estimated"
)
async def calculate_liquidation_price(request: LiquidationPriceRequest):
    """Approximate liquidation price for a leveraged position."""
    try:
        price = calculator.compute_liquidation_price(
            entry_price=request.entry_price,
            leverage=request.leverage,
            direction=request.direction,
            maintenance_margin_pct=request.maintenance_margin_pct
        )
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Liquidation price estimated",
            data={"liquidationPrice": float(price)}
        )
    except AppException as e:
        logger.warning(f"Liquidation price calculation rejected: {e.message}")
        return app_exception_response(e, "Liquidation price calculation failed")
    except Exception as e:
        logger.error(f"Unexpected error calculating liquidation price: {str(e)}")
        return internal_error_response("Liquidation price calculation failed")


@router.post(
    "/breakeven-win-rate",
    status_code=status.HTTP_200_OK,
    response_description="Breakeven win rate calculated"
)
async def calculate_breakeven_win_rate(request: BreakevenWinRateRequest):
    """Win rate needed to break even at a given reward/risk."""
    try:
        win_rate = calculator.compute_breakeven_win_rate(request.risk_reward_ratio)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Breakeven win rate calculated",
            data={"breakevenWinRate": float(win_rate)}
        )
    except AppException as e:
        logger.warning(f"Breakeven win rate calculation rejected: {e.message}")
        return app_exception_response(e, "Breakeven win rate calculation failed")
    except Exception as e:
        logger.error(f"Unexpected error calculating breakeven win rate: {str(e)}")
        return internal_error_response("Breakeven win rate calculation failed")
