"""
Account Domain Model

Pure Pydantic domain model for trading accounts.
No database dependencies - use AccountRepository for persistence.
"""

from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from pydantic import Field, field_validator

from tradejournal.shared.models import DomainModel, PyObjectId, quantize_money


class Currency(str, Enum):
    """Account currencies"""
    USD = "USD"
    INR = "INR"


class AccountType(str, Enum):
    """Account hierarchy level"""
    MAIN = "main"
    SUB = "sub"


class Market(str, Enum):
    """Market the account trades"""
    FOREX = "forex"
    CRYPTO = "crypto"
    STOCKS = "stocks"


class Account(DomainModel):
    """
    Account Domain Model

    A broker account holding a balance in a single currency. The currency
    never changes after creation; balances are kept at 2 decimals.
    """

    # Identity
    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId

    # Details
    name: str = ""
    broker: str = ""
    market: Market = Market.FOREX
    currency: Currency
    account_type: AccountType = AccountType.MAIN
    parent_account_id: Optional[PyObjectId] = None

    # Money
    balance: Decimal = Decimal("0.00")
    leverage: int = Field(default=1, ge=1)

    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("balance", mode="after")
    @classmethod
    def round_balance(cls, v: Decimal) -> Decimal:
        return quantize_money(v)
