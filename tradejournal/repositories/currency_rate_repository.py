"""
Currency Rate Repository

Persistent store behind ExchangeRateCache: one document per ordered
(from_currency, to_currency) pair, enforced by a unique index.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorDatabase

from tradejournal.domain.models.currency_rate import CurrencyRate
from tradejournal.repositories.base import BaseRepository


class CurrencyRateRepository(BaseRepository):
    """Repository for the ``currency_rates`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, "currency_rates")

    async def find_pair(self, from_currency: str, to_currency: str) -> Optional[CurrencyRate]:
        """Get the cached rate for an ordered pair."""
        document = await self.find_one({
            "from_currency": from_currency,
            "to_currency": to_currency,
        })
        return CurrencyRate.from_document(document) if document else None

    async def upsert_rate(
        self,
        from_currency: str,
        to_currency: str,
        rate: Decimal,
        updated_at: datetime
    ) -> CurrencyRate:
        """Insert the pair if absent, otherwise replace rate and timestamp."""
        await self.update_one(
            {"from_currency": from_currency, "to_currency": to_currency},
            {"$set": {"rate": Decimal128(rate), "updated_at": updated_at}},
            upsert=True
        )
        return CurrencyRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            updated_at=updated_at,
        )
