"""
Fund Transfer Domain Model

Immutable ledger record of money moved between two accounts.
"""

from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal
from pydantic import ConfigDict, Field

from tradejournal.shared.models import DomainModel, PyObjectId


class FundTransfer(DomainModel):
    """
    Fund Transfer Domain Model

    ``amount`` is in the source account currency; ``converted_amount`` is
    what the destination account received, equal to ``amount *
    exchange_rate`` rounded to 2 decimals. ``exchange_rate`` is 1 when both
    accounts share a currency.
    """

    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId
    from_account_id: PyObjectId
    to_account_id: PyObjectId

    amount: Decimal
    currency: str
    converted_amount: Decimal
    converted_currency: str
    exchange_rate: Decimal

    transfer_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)
