"""
Exchange Rate Cache Tests

TTL behaviour, provider fallbacks and resilience to a broken cache store.
"""

import asyncio
import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

from tradejournal.modules.currency.service import (
    ExchangeRateCache,
    FALLBACK_RATES,
    get_fallback_rate,
)
from tradejournal.shared.exceptions import RateProviderUnavailableError, ValidationError


# ==================== SAME CURRENCY ====================

@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["USD", "INR", "EUR", "usd"])
async def test_same_currency_is_one_without_io(rate_cache, provider, rate_repo, code):
    rate_repo.find_pair = AsyncMock()

    assert await rate_cache.get_rate(code, code.upper()) == Decimal("1")
    assert provider.calls == []
    rate_repo.find_pair.assert_not_called()


# ==================== FRESH FETCH / CACHE HITS ====================

@pytest.mark.asyncio
async def test_miss_fetches_and_stores(rate_cache, provider, rate_repo, clock):
    rate = await rate_cache.get_rate("USD", "INR")

    assert rate == Decimal("83.24")
    assert provider.calls == ["USD"]
    stored = rate_repo.rates[("USD", "INR")]
    assert stored.rate == Decimal("83.24")
    assert stored.updated_at == clock.now


@pytest.mark.asyncio
async def test_hit_within_ttl_returns_stored_rate(rate_cache, provider, rate_repo, clock):
    rate_repo.seed("USD", "INR", "82.50", clock.now - timedelta(minutes=30))

    assert await rate_cache.get_rate("USD", "INR") == Decimal("82.50")
    assert provider.calls == []


@pytest.mark.asyncio
async def test_refetch_after_ttl_expires(rate_cache, provider, clock):
    first = await rate_cache.get_rate("USD", "INR")
    provider.rates["USD"]["INR"] = 84.10

    clock.advance(3599)
    assert await rate_cache.get_rate("USD", "INR") == first
    assert provider.calls == ["USD"]

    clock.advance(1)
    assert await rate_cache.get_rate("USD", "INR") == Decimal("84.1")
    assert provider.calls == ["USD", "USD"]


@pytest.mark.asyncio
async def test_lowercase_codes_are_normalized(rate_cache, rate_repo):
    assert await rate_cache.get_rate(" usd", "inr ") == Decimal("83.24")
    assert ("USD", "INR") in rate_repo.rates


@pytest.mark.asyncio
async def test_pairs_are_directional(rate_cache, rate_repo):
    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.24")
    assert await rate_cache.get_rate("INR", "USD") == Decimal("0.012")
    assert set(rate_repo.rates) == {("USD", "INR"), ("INR", "USD")}


# ==================== FALLBACKS ====================

@pytest.mark.asyncio
async def test_provider_down_uses_stale_cache(rate_cache, provider, rate_repo, clock):
    rate_repo.seed("USD", "INR", "81.00", clock.now - timedelta(days=3))
    provider.error = RateProviderUnavailableError("timeout")

    assert await rate_cache.get_rate("USD", "INR") == Decimal("81.00")
    assert rate_repo.upserts == 0


@pytest.mark.asyncio
async def test_provider_down_without_cache_uses_static_table(rate_cache, provider):
    provider.error = RateProviderUnavailableError("timeout")

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.0")
    assert await rate_cache.get_rate("INR", "USD") == Decimal("0.012")


@pytest.mark.asyncio
async def test_unknown_pair_without_anything_is_one(rate_cache, provider):
    provider.error = RateProviderUnavailableError("timeout")

    assert await rate_cache.get_rate("EUR", "GBP") == Decimal("1")


@pytest.mark.asyncio
async def test_missing_currency_in_response_falls_back(rate_cache, provider, rate_repo):
    del provider.rates["USD"]["INR"]

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.0")
    assert rate_repo.upserts == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_rate", [0, -1, "abc", None])
async def test_unusable_rate_falls_back(rate_cache, provider, bad_rate):
    provider.rates["USD"]["INR"] = bad_rate

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.0")


@pytest.mark.asyncio
async def test_unexpected_provider_exception_falls_back(rate_cache, provider):
    provider.error = RuntimeError("boom")

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.0")


def test_fallback_inverts_reverse_pair(monkeypatch):
    monkeypatch.setitem(FALLBACK_RATES, ("EUR", "USD"), Decimal("1.25"))

    assert get_fallback_rate("USD", "EUR") == Decimal("0.8")


# ==================== BROKEN CACHE STORE ====================

@pytest.mark.asyncio
async def test_cache_read_failure_goes_to_provider(rate_cache, provider, rate_repo):
    rate_repo.fail_reads = True

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.24")
    assert provider.calls == ["USD"]


@pytest.mark.asyncio
async def test_cache_write_failure_still_returns_fresh_rate(rate_cache, rate_repo):
    rate_repo.fail_writes = True

    assert await rate_cache.get_rate("USD", "INR") == Decimal("83.24")


@pytest.mark.asyncio
async def test_everything_down_never_raises(rate_cache, provider, rate_repo):
    rate_repo.fail_reads = True
    rate_repo.fail_writes = True
    provider.error = RateProviderUnavailableError("down")

    assert await rate_cache.get_rate("INR", "USD") == Decimal("0.012")


# ==================== CONCURRENCY ====================

@pytest.mark.asyncio
async def test_concurrent_misses_fetch_once(rate_cache, provider):
    rates = await asyncio.gather(*(rate_cache.get_rate("USD", "INR") for _ in range(10)))

    assert set(rates) == {Decimal("83.24")}
    assert provider.calls == ["USD"]


# ==================== CONVERT ====================

@pytest.mark.asyncio
async def test_convert_rounds_half_up(rate_cache):
    assert await rate_cache.convert(Decimal("1000"), "USD", "INR") == Decimal("83240.00")
    assert await rate_cache.convert(Decimal("0.125"), "USD", "USD") == Decimal("0.13")


@pytest.mark.asyncio
async def test_default_ttl_comes_from_settings(rate_repo, provider):
    cache = ExchangeRateCache(rate_repo, provider)
    assert cache.ttl == timedelta(seconds=3600)


@pytest.mark.asyncio
async def test_convert_oversized_amount_is_validation_error(rate_cache):
    with pytest.raises(ValidationError, match="INR"):
        await rate_cache.convert(Decimal(10**25), "USD", "INR")
