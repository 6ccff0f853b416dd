"""
Repositories Module

Repository pattern implementation for database access.
"""

from tradejournal.repositories.base import BaseRepository, to_object_id
from tradejournal.repositories.account_repository import AccountRepository
from tradejournal.repositories.trade_repository import TradeRepository
from tradejournal.repositories.currency_rate_repository import CurrencyRateRepository
from tradejournal.repositories.fund_transfer_repository import FundTransferRepository
from tradejournal.repositories.transaction import MongoTransactionManager

__all__ = [
    "BaseRepository",
    "to_object_id",
    "AccountRepository",
    "TradeRepository",
    "CurrencyRateRepository",
    "FundTransferRepository",
    "MongoTransactionManager",
]
