"""
Calculator Pydantic schemas.

Request bodies use the camelCase keys of the journal's calculators; the
engine does the range checks so every numeric rule lives in one place.
"""

from pydantic import BaseModel, ConfigDict, Field

from tradejournal.domain.models.trade import TradeDirection


class PositionSizeRequest(BaseModel):
    """Schema for position sizing."""

    account_size: float = Field(..., alias="accountSize", description="Account equity")
    risk_percentage: float = Field(..., alias="riskPercentage", description="Percent of equity to risk")
    entry_price: float = Field(..., alias="entryPrice", description="Planned entry price")
    stop_loss: float = Field(..., alias="stopLoss", description="Planned stop loss")
    leverage: float = Field(1, description="Whole-number leverage")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "accountSize": 2000,
                "riskPercentage": 2.0,
                "entryPrice": 1.0845,
                "stopLoss": 1.0820,
                "leverage": 1
            }
        }
    )


class ProfitLossRequest(BaseModel):
    """Schema for profit/loss of a closed position."""

    entry_price: float = Field(..., alias="entryPrice")
    exit_price: float = Field(..., alias="exitPrice")
    position_size: float = Field(..., alias="positionSize", description="Size in lots")
    direction: TradeDirection
    leverage: float = Field(1)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "entryPrice": 1.1,
                "exitPrice": 1.101,
                "positionSize": 1,
                "direction": "long",
                "leverage": 1
            }
        }
    )


class RiskRewardRequest(BaseModel):
    """Schema for reward-to-risk of a planned trade."""

    entry_price: float = Field(..., alias="entryPrice")
    stop_loss: float = Field(..., alias="stopLoss")
    take_profit: float = Field(..., alias="takeProfit")
    direction: TradeDirection

    model_config = ConfigDict(populate_by_name=True)


class LiquidationPriceRequest(BaseModel):
    """Schema for the simplified liquidation estimate."""

    entry_price: float = Field(..., alias="entryPrice")
    leverage: float
    direction: TradeDirection
    maintenance_margin_pct: float = Field(0.5, alias="maintenanceMarginPct")

    model_config = ConfigDict(populate_by_name=True)


class BreakevenWinRateRequest(BaseModel):
    """Schema for breakeven win rate."""

    risk_reward_ratio: float = Field(..., alias="riskRewardRatio")

    model_config = ConfigDict(populate_by_name=True)
