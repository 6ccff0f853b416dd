"""
Transfers API endpoints.

Fund transfers between accounts of the authenticated user.
"""

from fastapi import APIRouter, Depends, Query, status

from tradejournal.core.dependencies import get_current_user_id, get_transfer_ledger
from tradejournal.core.responses import (
    app_exception_response,
    internal_error_response,
    success_response,
)
from tradejournal.modules.transfers.schemas import TransferCreate, transfer_to_response
from tradejournal.modules.transfers.service import TransferLedger
from tradejournal.shared.exceptions import AppException
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/transfers", tags=["Transfers"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_description="Transfer completed"
)
async def create_transfer(
    transfer_data: TransferCreate,
    user_id: str = Depends(get_current_user_id),
    ledger: TransferLedger = Depends(get_transfer_ledger)
):
    """
    Move funds between two accounts of the current user.

    Cross-currency transfers convert at the current cached rate; the debit,
    credit and transfer record are written atomically.
    """
    try:
        transfer = await ledger.transfer(
            user_id=user_id,
            from_account_id=transfer_data.from_account_id,
            to_account_id=transfer_data.to_account_id,
            amount=transfer_data.amount,
            currency=transfer_data.currency
        )
        return success_response(
            status_code=status.HTTP_201_CREATED,
            message="Transfer completed",
            data=transfer_to_response(transfer)
        )
    except AppException as e:
        logger.warning(f"Transfer failed for user {user_id}: {e.message}")
        return app_exception_response(e, "Transfer failed")
    except Exception as e:
        logger.error(f"Unexpected error creating transfer: {str(e)}")
        return internal_error_response("Transfer failed")


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_description="Transfers retrieved"
)
async def list_transfers(
    limit: int = Query(50, ge=0, le=500, description="Maximum records, 0 for all"),
    user_id: str = Depends(get_current_user_id),
    ledger: TransferLedger = Depends(get_transfer_ledger)
):
    """List the current user's transfers, newest first."""
    try:
        transfers = await ledger.list_transfers(user_id, limit=limit)
        return success_response(
            status_code=status.HTTP_200_OK,
            message="Transfers retrieved",
            data=[transfer_to_response(t) for t in transfers]
        )
    except AppException as e:
        logger.warning(f"Listing transfers failed for user {user_id}: {e.message}")
        return app_exception_response(e, "Failed to get transfers")
    except Exception as e:
        logger.error(f"Unexpected error listing transfers: {str(e)}")
        return internal_error_response("Failed to get transfers")
