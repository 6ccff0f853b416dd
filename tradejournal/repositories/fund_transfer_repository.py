"""
Fund Transfer Repository

Append-only store of fund transfer records.
"""

from typing import Any, List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase

from tradejournal.domain.models.fund_transfer import FundTransfer
from tradejournal.repositories.base import BaseRepository, to_object_id


class FundTransferRepository(BaseRepository):
    """Repository for the ``fund_transfers`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, "fund_transfers")

    async def create(
        self,
        transfer: FundTransfer,
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> FundTransfer:
        """Insert a transfer record and return it with its new id."""
        inserted_id = await self.insert_one(transfer.to_document(), session=session)
        return transfer.model_copy(update={"id": inserted_id})

    async def find_by_user(self, user_id: Any, limit: int = 0) -> List[FundTransfer]:
        """List a user's transfers, newest first."""
        documents = await self.find(
            filter={"user_id": to_object_id(user_id)},
            sort=[("transfer_time", -1)],
            limit=limit
        )
        return [FundTransfer.from_document(doc) for doc in documents]
