"""Exchange rate provider integrations."""

from tradejournal.integrations.exchange_rates.exchange_rate_client import (
    ExchangeRateClient,
    get_exchange_rate_client,
)

__all__ = ["ExchangeRateClient", "get_exchange_rate_client"]
