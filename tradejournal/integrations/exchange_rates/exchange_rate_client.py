"""
Exchange Rate API Client

Fetches the latest conversion rates for a base currency from an
exchangerate-api.com style endpoint:

    GET {base_url}/{BASE}  ->  {"base": "USD", "rates": {"INR": 83.24, ...}}

Every failure (timeout, transport error, non-200, bad JSON, missing rates)
is raised as RateProviderUnavailableError so callers can fall back.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from tradejournal.config.settings import get_settings
from tradejournal.shared.exceptions import RateProviderUnavailableError
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)


class ExchangeRateClient:
    """
    Exchange rate provider client.

    Usage:
        async with ExchangeRateClient() as client:
            rates = await client.fetch_latest_rates("USD")
            rates["INR"]  # Decimal("83.24")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.EXCHANGE_RATE_API_URL).rstrip("/")
        self.timeout = timeout or settings.EXCHANGE_RATE_TIMEOUT_SECONDS
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self):
        """Close HTTP client (only when this instance created it)"""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch_latest_rates(self, base_currency: str) -> Dict[str, Decimal]:
        """
        Get latest rates quoted against ``base_currency``.

        Args:
            base_currency: ISO code, e.g. "USD"

        Returns:
            Mapping currency code -> Decimal rate (1 base = rate currency)

        Raises:
            RateProviderUnavailableError: provider unreachable or payload unusable
        """
        url = f"{self.base_url}/{base_currency.upper()}"

        try:
            response = await self._get_client().get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise RateProviderUnavailableError(f"Rate provider timed out: {str(e)}") from e
        except httpx.HTTPError as e:
            raise RateProviderUnavailableError(f"Rate provider request failed: {str(e)}") from e

        if response.status_code != 200:
            raise RateProviderUnavailableError(
                f"Rate provider returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RateProviderUnavailableError("Rate provider returned invalid JSON") from e

        rates = self._parse_rates(data)
        logger.debug(f"Fetched {len(rates)} rates for {base_currency}")
        return rates

    @staticmethod
    def _parse_rates(data: Any) -> Dict[str, Decimal]:
        if not isinstance(data, dict) or not isinstance(data.get("rates"), dict):
            raise RateProviderUnavailableError("Rate provider response has no rates")

        rates: Dict[str, Decimal] = {}
        for code, value in data["rates"].items():
            try:
                rates[str(code).upper()] = Decimal(str(value))
            except (InvalidOperation, ValueError):
                # One bad entry shouldn't poison the other currencies
                logger.warning(f"Skipping malformed rate for {code}: {value!r}")
        return rates


def get_exchange_rate_client() -> ExchangeRateClient:
    """Factory function to get exchange rate client."""
    return ExchangeRateClient()
