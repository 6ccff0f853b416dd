"""
MongoDB Transaction Manager

Wraps a Motor client session + transaction as an async context manager.
Everything written with the yielded session commits together or not at all.
Requires MongoDB running as a replica set.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession

from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)


class MongoTransactionManager:
    """
    Transaction boundary for multi-document writes.

    Usage:
        async with tx_manager.transaction() as session:
            await accounts.update_balance(a, new_a, session=session)
            await transfers.create(record, session=session)
    """

    def __init__(self, client: AsyncIOMotorClient):
        self.client = client

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncIOMotorClientSession]:
        async with await self.client.start_session() as session:
            async with session.start_transaction():
                yield session
            logger.debug("Transaction committed")
