"""
Currency API endpoints.

Exchange rate lookups and conversions through the shared rate cache.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status

from tradejournal.core.dependencies import get_rate_cache
from tradejournal.core.responses import (
    app_exception_response,
    internal_error_response,
    success_response,
)
from tradejournal.modules.currency.service import ExchangeRateCache, convert_at_rate
from tradejournal.shared.exceptions import AppException, ValidationError
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/currency", tags=["Currency"])


def _currency_code(code: str) -> str:
    normalized = code.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValidationError(f"Invalid currency code: {code}")
    return normalized


@router.get(
    "/rate/{from_currency}/{to_currency}",
    status_code=status.HTTP_200_OK,
    response_description="Exchange rate retrieved"
)
async def get_exchange_rate(
    from_currency: str,
    to_currency: str,
    rate_cache: ExchangeRateCache = Depends(get_rate_cache)
):
    """
    Get the rate converting one unit of ``from_currency`` into ``to_currency``.

    Falls back to a cached or static rate when the provider is down, so this
    endpoint does not fail on provider outages.
    """
    try:
        from_code = _currency_code(from_currency)
        to_code = _currency_code(to_currency)
        rate = await rate_cache.get_rate(from_code, to_code)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Exchange rate retrieved",
            data={"rate": float(rate), "from": from_code, "to": to_code}
        )
    except AppException as e:
        logger.warning(f"Exchange rate lookup rejected: {e.message}")
        return app_exception_response(e, "Failed to get exchange rate")
    except Exception as e:
        logger.error(f"Unexpected error getting exchange rate: {str(e)}")
        return internal_error_response("Failed to get exchange rate")


@router.get(
    "/convert",
    status_code=status.HTTP_200_OK,
    response_description="Amount converted"
)
async def convert_amount(
    amount: Decimal = Query(..., gt=0, description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from", description="Source currency"),
    to_currency: str = Query(..., alias="to", description="Target currency"),
    rate_cache: ExchangeRateCache = Depends(get_rate_cache)
):
    """Convert an amount at the current rate, rounded to 2 decimals."""
    try:
        from_code = _currency_code(from_currency)
        to_code = _currency_code(to_currency)
        rate = await rate_cache.get_rate(from_code, to_code)
        converted = convert_at_rate(amount, rate, to_code)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Amount converted",
            data={
                "amount": str(amount),
                "from": from_code,
                "to": to_code,
                "rate": float(rate),
                "convertedAmount": str(converted)
            }
        )
    except AppException as e:
        logger.warning(f"Conversion rejected: {e.message}")
        return app_exception_response(e, "Failed to convert amount")
    except Exception as e:
        logger.error(f"Unexpected error converting amount: {str(e)}")
        return internal_error_response("Failed to convert amount")
