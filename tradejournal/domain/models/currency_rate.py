"""
Currency Rate Domain Model

Cached conversion rate for one ordered currency pair.
"""

from datetime import datetime, timezone
from decimal import Decimal
from pydantic import Field, field_validator

from tradejournal.shared.models import DomainModel


class CurrencyRate(DomainModel):
    """
    Cached rate: 1 ``from_currency`` = ``rate`` ``to_currency``.

    Only ExchangeRateCache writes these entries; there is at most one per
    ordered (from_currency, to_currency) pair.
    """

    from_currency: str
    to_currency: str
    rate: Decimal = Field(..., gt=0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.upper()

    @field_validator("updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Motor returns naive UTC datetimes unless tz_aware is set
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def age_seconds(self, now: datetime) -> float:
        return (now - self.updated_at).total_seconds()
