"""
Test doubles for repositories and the rate provider
"""

from .fakes import (
    FakeAccountRepository,
    FakeCurrencyRateRepository,
    FakeFundTransferRepository,
    FakeRateProvider,
    FakeTradeRepository,
    FakeTransactionManager,
)

__all__ = [
    "FakeAccountRepository",
    "FakeCurrencyRateRepository",
    "FakeFundTransferRepository",
    "FakeRateProvider",
    "FakeTradeRepository",
    "FakeTransactionManager",
]
