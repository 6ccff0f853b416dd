"""
Transfers Pydantic schemas.

DTOs for API request/response validation.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tradejournal.domain.models.fund_transfer import FundTransfer


class TransferCreate(BaseModel):
    """Schema for moving funds between two of the user's accounts."""

    from_account_id: str = Field(..., alias="fromAccountId", min_length=1)
    to_account_id: str = Field(..., alias="toAccountId", min_length=1)
    amount: Decimal = Field(..., description="Amount in the source account's currency")
    currency: Optional[str] = Field(None, description="Currency of amount (source account currency)")

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "fromAccountId": "65f1c0a2b4e8d9a1c2b3d4e5",
                "toAccountId": "65f1c0a2b4e8d9a1c2b3d4e6",
                "amount": "1000.00",
                "currency": "USD"
            }
        }
    )


def transfer_to_response(transfer: FundTransfer) -> Dict[str, Any]:
    """Serialize a transfer record; money as 2-dp strings."""
    return {
        "id": str(transfer.id) if transfer.id else None,
        "userId": str(transfer.user_id),
        "fromAccountId": str(transfer.from_account_id),
        "toAccountId": str(transfer.to_account_id),
        "amount": str(transfer.amount),
        "currency": transfer.currency,
        "convertedAmount": str(transfer.converted_amount),
        "convertedCurrency": transfer.converted_currency,
        "exchangeRate": str(transfer.exchange_rate),
        "transferTime": transfer.transfer_time.isoformat(),
    }
