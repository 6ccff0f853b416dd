"""
Core dependencies for FastAPI routes.

Provides dependencies for authentication and for wiring repositories and
services into request handlers.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from tradejournal.config.database import get_client, get_database
from tradejournal.core.security import verify_token
from tradejournal.modules.analytics.service import PortfolioAggregator
from tradejournal.modules.currency.service import ExchangeRateCache
from tradejournal.modules.transfers.service import TransactionManager, TransferLedger
from tradejournal.repositories.account_repository import AccountRepository
from tradejournal.repositories.fund_transfer_repository import FundTransferRepository
from tradejournal.repositories.trade_repository import TradeRepository
from tradejournal.repositories.transaction import MongoTransactionManager
from tradejournal.shared.exceptions import InvalidTokenError, TokenExpiredError
from tradejournal.utils.locks import KeyedLock
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

# HTTP Bearer token scheme (auto_error=False to handle missing token manually)
security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency to get database instance.

    Returns:
        AsyncIOMotorDatabase: Connected database
    """
    return get_database()


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Get the authenticated user's id from the JWT access token.

    Users live in the auth service; the token's ``sub`` claim is trusted
    once the signature and expiry check out.

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid

    Example:
        @router.get("/transfers")
        async def list_transfers(user_id: str = Depends(get_current_user_id)):
            ...
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        payload = verify_token(credentials.credentials, token_type="access")
    except TokenExpiredError:
        logger.warning("Access attempt with expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"}
        )
    except InvalidTokenError:
        logger.warning("Access attempt with invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user_id = payload.get("sub")
    if not user_id or not ObjectId.is_valid(user_id):
        logger.warning(f"Token carries unusable subject: {user_id!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user_id


# ==================== REPOSITORIES ====================

async def get_account_repository(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> AccountRepository:
    return AccountRepository(db)


async def get_trade_repository(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> TradeRepository:
    return TradeRepository(db)


async def get_fund_transfer_repository(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> FundTransferRepository:
    return FundTransferRepository(db)


async def get_transaction_manager() -> TransactionManager:
    return MongoTransactionManager(get_client())


# ==================== SHARED SERVICES ====================

async def get_rate_cache(request: Request) -> ExchangeRateCache:
    """The application-wide rate cache created during startup."""
    return request.app.state.rate_cache


async def get_account_locks(request: Request) -> KeyedLock:
    """Per-account locks shared by every transfer in this process."""
    return request.app.state.account_locks


async def get_transfer_ledger(
    account_repository: AccountRepository = Depends(get_account_repository),
    transfer_repository: FundTransferRepository = Depends(get_fund_transfer_repository),
    rate_cache: ExchangeRateCache = Depends(get_rate_cache),
    transaction_manager: TransactionManager = Depends(get_transaction_manager),
    account_locks: KeyedLock = Depends(get_account_locks)
) -> TransferLedger:
    return TransferLedger(
        account_repository=account_repository,
        transfer_repository=transfer_repository,
        rate_cache=rate_cache,
        transaction_manager=transaction_manager,
        account_locks=account_locks
    )


async def get_portfolio_aggregator(
    account_repository: AccountRepository = Depends(get_account_repository),
    trade_repository: TradeRepository = Depends(get_trade_repository),
    rate_cache: ExchangeRateCache = Depends(get_rate_cache)
) -> PortfolioAggregator:
    return PortfolioAggregator(
        account_repository=account_repository,
        trade_repository=trade_repository,
        rate_cache=rate_cache
    )
