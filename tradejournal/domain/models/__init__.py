"""
Domain Models

Pure Pydantic domain models with no database dependencies.
"""

from tradejournal.shared.models import DomainModel, PyObjectId
from tradejournal.domain.models.account import (
    Account,
    AccountType,
    Currency,
    Market,
)
from tradejournal.domain.models.trade import (
    Trade,
    TradeDirection,
    TradeStatus,
)
from tradejournal.domain.models.currency_rate import CurrencyRate
from tradejournal.domain.models.fund_transfer import FundTransfer

__all__ = [
    "DomainModel",
    "PyObjectId",
    "Account",
    "AccountType",
    "Currency",
    "Market",
    "Trade",
    "TradeDirection",
    "TradeStatus",
    "CurrencyRate",
    "FundTransfer",
]
