"""
Trade Domain Model

Journal entry for a single trade. Only closed trades carry a realized P&L.
"""

from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from pydantic import Field, model_validator

from tradejournal.shared.models import DomainModel, PyObjectId


# ==================== ENUMS ====================

class TradeDirection(str, Enum):
    """Trade direction"""
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    """Trade lifecycle"""
    OPEN = "open"
    PENDING = "pending"
    CLOSED = "closed"


# ==================== MAIN TRADE MODEL ====================

class Trade(DomainModel):
    """
    Trade Domain Model

    Created and edited by the journal's trade store. ``pnl`` stays None
    until the trade is closed.
    """

    # Identity
    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId
    account_id: PyObjectId

    # Instrument
    symbol: str
    direction: TradeDirection
    market: str = "forex"
    broker: str = ""
    currency: str = "USD"

    # Prices
    entry_price: Decimal
    exit_price: Optional[Decimal] = None
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None

    # Size & risk
    position_size: Optional[Decimal] = None
    quantity: Optional[int] = None
    leverage: int = Field(default=1, ge=1)
    risk_percentage: Optional[Decimal] = None
    risk_amount: Optional[Decimal] = None

    # Outcome
    status: TradeStatus = TradeStatus.OPEN
    pnl: Optional[Decimal] = None

    entry_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    exit_time: Optional[datetime] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_pnl_only_when_closed(self) -> "Trade":
        if self.status != TradeStatus.CLOSED and self.pnl is not None:
            raise ValueError("pnl must be empty until the trade is closed")
        return self
