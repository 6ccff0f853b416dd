"""
Trade Repository

Read access to journal trades.
"""

from typing import Any, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from tradejournal.domain.models.trade import Trade, TradeStatus
from tradejournal.repositories.base import BaseRepository, to_object_id


class TradeRepository(BaseRepository):
    """Repository for the ``trades`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, "trades")

    async def find_by_user(
        self,
        user_id: Any,
        status: Optional[TradeStatus] = None
    ) -> List[Trade]:
        """Find a user's trades, newest first, optionally by status."""
        filter = {"user_id": to_object_id(user_id)}
        if status is not None:
            filter["status"] = TradeStatus(status).value

        documents = await self.find(filter=filter, sort=[("entry_time", -1)])
        return [Trade.from_document(doc) for doc in documents]
