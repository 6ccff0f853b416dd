"""
Analytics API endpoints.

Portfolio valuation and trading statistics for the authenticated user.
"""

from fastapi import APIRouter, Depends, status

from tradejournal.core.dependencies import get_current_user_id, get_portfolio_aggregator
from tradejournal.core.responses import (
    app_exception_response,
    internal_error_response,
    success_response,
)
from tradejournal.modules.analytics.service import PortfolioAggregator
from tradejournal.shared.exceptions import AppException
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get(
    "/portfolio",
    status_code=status.HTTP_200_OK,
    response_description="Portfolio value retrieved"
)
async def get_portfolio_value(
    user_id: str = Depends(get_current_user_id),
    aggregator: PortfolioAggregator = Depends(get_portfolio_aggregator)
):
    """Total value of the user's active accounts in the reporting currency."""
    try:
        portfolio = await aggregator.get_user_portfolio_value(user_id)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Portfolio value retrieved",
            data=portfolio
        )
    except AppException as e:
        logger.warning(f"Portfolio valuation failed for user {user_id}: {e.message}")
        return app_exception_response(e, "Failed to get portfolio value")
    except Exception as e:
        logger.error(f"Unexpected error valuing portfolio: {str(e)}")
        return internal_error_response("Failed to get portfolio value")


@router.get(
    "/stats",
    status_code=status.HTTP_200_OK,
    response_description="Trading statistics retrieved"
)
async def get_trading_stats(
    user_id: str = Depends(get_current_user_id),
    aggregator: PortfolioAggregator = Depends(get_portfolio_aggregator)
):
    """Win rate, average win/loss and net P&L over closed trades."""
    try:
        stats = await aggregator.get_user_trading_stats(user_id)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Trading statistics retrieved",
            data=stats
        )
    except AppException as e:
        logger.warning(f"Stats failed for user {user_id}: {e.message}")
        return app_exception_response(e, "Failed to get trading statistics")
    except Exception as e:
        logger.error(f"Unexpected error computing stats: {str(e)}")
        return internal_error_response("Failed to get trading statistics")
