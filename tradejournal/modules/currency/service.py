"""
Exchange Rate Cache

Directional currency conversion rates with a persistent per-pair cache.

Lookup order for get_rate(from, to):
1. same currency -> 1, no I/O
2. cached entry younger than the TTL
3. fresh rate from the provider (then upserted into the cache)
4. on provider failure: last cached rate however old, then the static
   table, then 1

Rate lookups never raise: availability wins over freshness.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Optional, Protocol, Tuple

from tradejournal.config.settings import get_settings
from tradejournal.domain.models.currency_rate import CurrencyRate
from tradejournal.repositories.currency_rate_repository import CurrencyRateRepository
from tradejournal.shared.exceptions import RateProviderUnavailableError, ValidationError
from tradejournal.shared.models import quantize_money
from tradejournal.utils.locks import KeyedLock
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)


# Approximate rates used only when neither the provider nor the cache can answer
FALLBACK_RATES: Dict[Tuple[str, str], Decimal] = {
    ("USD", "INR"): Decimal("83.0"),
    ("INR", "USD"): Decimal("0.012"),
}


class RateProvider(Protocol):
    """Anything that can fetch latest rates for a base currency."""

    async def fetch_latest_rates(self, base_currency: str) -> Dict[str, Decimal]:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def convert_at_rate(amount: Decimal, rate: Decimal, to_currency: str) -> Decimal:
    """Apply a rate and round to 2 decimals."""
    try:
        return quantize_money(amount * rate)
    except InvalidOperation:
        raise ValidationError(f"amount is too large to convert to {to_currency}")


def get_fallback_rate(from_currency: str, to_currency: str) -> Decimal:
    """
    Static rate for a pair: direct entry, else the inverted reverse entry,
    else 1.
    """
    direct = FALLBACK_RATES.get((from_currency, to_currency))
    if direct is not None:
        return direct

    reverse = FALLBACK_RATES.get((to_currency, from_currency))
    if reverse is not None:
        return Decimal("1") / reverse

    return Decimal("1")


class ExchangeRateCache:
    """
    Exchange Rate Cache

    One instance is shared by every request of the application. Each ordered
    currency pair has its own lock, so a stale read and a concurrent refresh
    of the same pair can't interleave; different pairs never wait on each
    other.
    """

    def __init__(
        self,
        rate_repository: CurrencyRateRepository,
        provider: RateProvider,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        """
        Initialize the cache.

        Args:
            rate_repository: Persistent store of cached rates
            provider: Rate provider (fetch_latest_rates)
            ttl_seconds: Staleness window, defaults to EXCHANGE_RATE_CACHE_TTL_SECONDS
            clock: Returns the current UTC time
        """
        self.rate_repository = rate_repository
        self.provider = provider
        self.ttl = timedelta(
            seconds=ttl_seconds or get_settings().EXCHANGE_RATE_CACHE_TTL_SECONDS
        )
        self.clock = clock
        self._locks = KeyedLock()

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Get the rate converting ``from_currency`` into ``to_currency``.

        Args:
            from_currency: Source currency code
            to_currency: Target currency code

        Returns:
            Decimal rate (1 from = rate to); always usable, never raises
        """
        from_currency = from_currency.strip().upper()
        to_currency = to_currency.strip().upper()

        if from_currency == to_currency:
            return Decimal("1")

        async with self._locks.hold((from_currency, to_currency)):
            cached = await self._read_cached(from_currency, to_currency)
            now = self.clock()

            if cached is not None and self._is_fresh(cached, now):
                return cached.rate

            try:
                rate = await self._fetch_rate(from_currency, to_currency)
            except RateProviderUnavailableError as e:
                return self._fallback(from_currency, to_currency, cached, e)

            await self._store(from_currency, to_currency, rate, now)
            return rate

    async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert an amount at the current rate, rounded to 2 decimals.

        Raises:
            ValidationError: converted amount too large to represent
        """
        rate = await self.get_rate(from_currency, to_currency)
        return convert_at_rate(Decimal(amount), rate, to_currency)

    def _is_fresh(self, cached: CurrencyRate, now: datetime) -> bool:
        return cached.age_seconds(now) < self.ttl.total_seconds()

    async def _read_cached(self, from_currency: str, to_currency: str) -> Optional[CurrencyRate]:
        try:
            return await self.rate_repository.find_pair(from_currency, to_currency)
        except Exception as e:
            # Cache store down: behave as a miss and go to the provider
            logger.error(f"Failed to read cached rate {from_currency}->{to_currency}: {str(e)}")
            return None

    async def _fetch_rate(self, from_currency: str, to_currency: str) -> Decimal:
        try:
            rates = await self.provider.fetch_latest_rates(from_currency)
        except RateProviderUnavailableError:
            raise
        except Exception as e:
            raise RateProviderUnavailableError(f"Unexpected provider error: {str(e)}") from e

        rate = rates.get(to_currency) if isinstance(rates, dict) else None
        if rate is None:
            raise RateProviderUnavailableError(
                f"Exchange rate not found for {from_currency} to {to_currency}"
            )

        try:
            rate = rate if isinstance(rate, Decimal) else Decimal(str(rate))
        except InvalidOperation as e:
            raise RateProviderUnavailableError(f"Malformed rate {rate!r}") from e

        if not rate.is_finite() or rate <= 0:
            raise RateProviderUnavailableError(
                f"Provider returned unusable rate {rate} for {from_currency} to {to_currency}"
            )
        return rate

    async def _store(
        self,
        from_currency: str,
        to_currency: str,
        rate: Decimal,
        now: datetime
    ) -> None:
        try:
            await self.rate_repository.upsert_rate(from_currency, to_currency, rate, now)
        except Exception as e:
            # The fresh rate is still correct; only the cache write is lost
            logger.error(f"Failed to cache rate {from_currency}->{to_currency}: {str(e)}")

    def _fallback(
        self,
        from_currency: str,
        to_currency: str,
        cached: Optional[CurrencyRate],
        error: RateProviderUnavailableError
    ) -> Decimal:
        if cached is not None:
            logger.warning(
                f"Rate provider unavailable ({error.message}); using cached "
                f"{from_currency}->{to_currency} from {cached.updated_at.isoformat()}"
            )
            return cached.rate

        rate = get_fallback_rate(from_currency, to_currency)
        logger.warning(
            f"Rate provider unavailable ({error.message}); using static "
            f"{from_currency}->{to_currency} rate {rate}"
        )
        return rate
