"""
Pytest configuration and shared fixtures.

Services run against the in-memory fakes in tests/fixtures; API tests drive
the FastAPI app through httpx with dependency overrides, so no MongoDB or
network access is needed.
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from tradejournal.core import dependencies
from tradejournal.core.security import create_access_token
from tradejournal.domain.models.account import Account
from tradejournal.main import app
from tradejournal.modules.analytics.service import PortfolioAggregator
from tradejournal.modules.currency.service import ExchangeRateCache
from tradejournal.modules.transfers.service import TransferLedger
from tradejournal.utils.locks import KeyedLock

from tests.fixtures import (
    FakeAccountRepository,
    FakeCurrencyRateRepository,
    FakeFundTransferRepository,
    FakeRateProvider,
    FakeTradeRepository,
    FakeTransactionManager,
)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


# ==================== IDENTITIES ====================

@pytest.fixture
def user_id():
    """Test user ID"""
    return ObjectId()


@pytest.fixture
def other_user_id():
    """A second user who must never see the first user's accounts"""
    return ObjectId()


# ==================== STORES ====================

@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def account_repo():
    return FakeAccountRepository()


@pytest.fixture
def trade_repo():
    return FakeTradeRepository()


@pytest.fixture
def rate_repo():
    return FakeCurrencyRateRepository()


@pytest.fixture
def transfer_repo():
    return FakeFundTransferRepository()


@pytest.fixture
def tx_manager(account_repo, transfer_repo):
    return FakeTransactionManager(account_repo, transfer_repo)


@pytest.fixture
def provider():
    """Provider quoting USD->INR at 83.24 and INR->USD at 0.012"""
    return FakeRateProvider({
        "USD": {"USD": 1, "INR": 83.24, "EUR": 0.92},
        "INR": {"INR": 1, "USD": 0.012},
    })


# ==================== SERVICES ====================

@pytest.fixture
def rate_cache(rate_repo, provider, clock):
    return ExchangeRateCache(rate_repo, provider, ttl_seconds=3600, clock=clock)


@pytest.fixture
def account_locks():
    return KeyedLock()


@pytest.fixture
def ledger(account_repo, transfer_repo, rate_cache, tx_manager, account_locks):
    return TransferLedger(
        account_repository=account_repo,
        transfer_repository=transfer_repo,
        rate_cache=rate_cache,
        transaction_manager=tx_manager,
        account_locks=account_locks,
    )


@pytest.fixture
def aggregator(account_repo, trade_repo, rate_cache):
    return PortfolioAggregator(
        account_repository=account_repo,
        trade_repository=trade_repo,
        rate_cache=rate_cache,
        reporting_currency="USD",
    )


# ==================== ACCOUNTS ====================

@pytest.fixture
def usd_account(account_repo, user_id):
    """USD account with 5000.00"""
    return account_repo.add(Account(
        user_id=user_id, name="IC Markets", broker="ICM",
        currency="USD", balance=Decimal("5000.00"),
    ))


@pytest.fixture
def second_usd_account(account_repo, user_id):
    """USD sub-account with 1000.00"""
    return account_repo.add(Account(
        user_id=user_id, name="Scalping", broker="ICM",
        currency="USD", account_type="sub", balance=Decimal("1000.00"),
    ))


@pytest.fixture
def inr_account(account_repo, user_id):
    """INR account with 100000.00"""
    return account_repo.add(Account(
        user_id=user_id, name="Zerodha", broker="Zerodha", market="stocks",
        currency="INR", balance=Decimal("100000.00"),
    ))


# ==================== HTTP ====================

@pytest.fixture
def auth_headers(user_id):
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(
    account_repo,
    trade_repo,
    transfer_repo,
    tx_manager,
    rate_cache,
    account_locks,
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client against the app with every store replaced by a fake.

    Lifespan doesn't run under ASGITransport, so nothing touches MongoDB.
    """
    app.dependency_overrides[dependencies.get_account_repository] = lambda: account_repo
    app.dependency_overrides[dependencies.get_trade_repository] = lambda: trade_repo
    app.dependency_overrides[dependencies.get_fund_transfer_repository] = lambda: transfer_repo
    app.dependency_overrides[dependencies.get_transaction_manager] = lambda: tx_manager
    app.dependency_overrides[dependencies.get_rate_cache] = lambda: rate_cache
    app.dependency_overrides[dependencies.get_account_locks] = lambda: account_locks

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
