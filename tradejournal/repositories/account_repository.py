"""
Account Repository

Data access for trading accounts.
"""

from decimal import Decimal
from typing import Any, List, Optional

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase

from tradejournal.domain.models.account import Account
from tradejournal.repositories.base import BaseRepository, to_object_id
from tradejournal.shared.models import quantize_money


class AccountRepository(BaseRepository):
    """Repository for the ``accounts`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, "accounts")

    async def get_account(
        self,
        account_id: Any,
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> Optional[Account]:
        """Find an account by ID, None when missing."""
        document = await self.find_by_id(account_id, session=session)
        return Account.from_document(document) if document else None

    async def find_by_user(
        self,
        user_id: Any,
        is_active: Optional[bool] = True
    ) -> List[Account]:
        """Find a user's accounts, oldest first."""
        filter = {"user_id": to_object_id(user_id)}
        if is_active is not None:
            filter["is_active"] = is_active

        documents = await self.find(filter=filter, sort=[("created_at", 1)])
        return [Account.from_document(doc) for doc in documents]

    async def update_balance(
        self,
        account_id: Any,
        new_balance: Decimal,
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> bool:
        """Overwrite an account balance (rounded to 2 decimals)."""
        return await self.update_one(
            {"_id": to_object_id(account_id)},
            {"$set": {"balance": Decimal128(quantize_money(new_balance))}},
            session=session
        )
