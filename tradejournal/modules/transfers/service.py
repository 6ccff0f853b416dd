"""
Transfer Ledger

Moves money between two of a user's accounts, converting across currencies
when needed. The debit, the credit and the transfer record are written in
one MongoDB transaction: either all three persist or none do.

Concurrency: transfers touching the same account are serialized in-process
by per-account locks; across processes the transaction's write-conflict
detection aborts the loser, which surfaces as a retryable
PersistenceFailureError.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, AsyncContextManager, List, Optional, Protocol, Union

from tradejournal.domain.models.account import Account
from tradejournal.domain.models.fund_transfer import FundTransfer
from tradejournal.modules.currency.service import ExchangeRateCache, convert_at_rate
from tradejournal.repositories.account_repository import AccountRepository
from tradejournal.repositories.base import to_object_id
from tradejournal.repositories.fund_transfer_repository import FundTransferRepository
from tradejournal.shared.exceptions import (
    AccountNotFoundError,
    AppException,
    PersistenceFailureError,
    ValidationError,
)
from tradejournal.shared.models import quantize_money
from tradejournal.utils.locks import KeyedLock
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)


class TransactionManager(Protocol):
    """Provides a transaction boundary yielding a session for repository writes."""

    def transaction(self) -> AsyncContextManager[Any]:
        ...


class TransferLedger:
    """
    Transfer Ledger

    Overdrafts are not blocked: the source balance may go negative.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        transfer_repository: FundTransferRepository,
        rate_cache: ExchangeRateCache,
        transaction_manager: TransactionManager,
        account_locks: Optional[KeyedLock] = None
    ):
        """
        Initialize the ledger.

        Args:
            account_repository: Account store
            transfer_repository: Transfer record store
            rate_cache: Shared exchange rate cache
            transaction_manager: Transaction boundary for the three writes
            account_locks: Per-account locks shared by all requests
        """
        self.account_repository = account_repository
        self.transfer_repository = transfer_repository
        self.rate_cache = rate_cache
        self.transaction_manager = transaction_manager
        self.account_locks = account_locks or KeyedLock()

    async def transfer(
        self,
        user_id: Any,
        from_account_id: Any,
        to_account_id: Any,
        amount: Union[Decimal, str, int, float],
        currency: Optional[str] = None
    ) -> FundTransfer:
        """
        Transfer ``amount`` (source currency) between two accounts.

        Args:
            user_id: Owner of both accounts
            from_account_id: Account debited by ``amount``
            to_account_id: Account credited with the converted amount
            amount: Positive amount in the source account's currency
            currency: Optional currency of ``amount``; must match the source account

        Returns:
            FundTransfer: Persisted transfer record

        Raises:
            ValidationError: Non-positive or oversized amount, same account, or
                currency mismatch
            AccountNotFoundError: Either account missing or owned by someone else
            PersistenceFailureError: A write failed; nothing was applied
        """
        amount = self._parse_amount(amount)

        if str(from_account_id) == str(to_account_id):
            raise ValidationError("Source and destination accounts must differ")

        owner_id = to_object_id(user_id)
        from_account = await self._get_owned_account(from_account_id, owner_id)
        to_account = await self._get_owned_account(to_account_id, owner_id)

        if currency and currency.strip().upper() != from_account.currency:
            raise ValidationError(
                f"Transfer currency {currency.upper()} does not match source "
                f"account currency {from_account.currency}"
            )

        if from_account.currency == to_account.currency:
            exchange_rate = Decimal("1")
            converted_amount = amount
        else:
            exchange_rate = await self.rate_cache.get_rate(
                from_account.currency, to_account.currency
            )
            converted_amount = convert_at_rate(amount, exchange_rate, to_account.currency)

        record = FundTransfer(
            user_id=owner_id,
            from_account_id=from_account.id,
            to_account_id=to_account.id,
            amount=amount,
            currency=from_account.currency,
            converted_amount=converted_amount,
            converted_currency=to_account.currency,
            exchange_rate=exchange_rate,
        )

        async with self.account_locks.hold_many([str(from_account.id), str(to_account.id)]):
            transfer = await self._apply(record)

        logger.info(
            f"Transfer {transfer.id}: {amount} {transfer.currency} from {from_account.id} "
            f"-> {converted_amount} {transfer.converted_currency} to {to_account.id} "
            f"(rate {exchange_rate})"
        )
        return transfer

    async def list_transfers(self, user_id: Any, limit: int = 0) -> List[FundTransfer]:
        """List a user's transfers, newest first."""
        return await self.transfer_repository.find_by_user(user_id, limit=limit)

    async def _apply(self, record: FundTransfer) -> FundTransfer:
        """Debit, credit and record inside one transaction."""
        try:
            async with self.transaction_manager.transaction() as session:
                # Re-read under the lock so balances reflect committed transfers
                source = await self.account_repository.get_account(
                    record.from_account_id, session=session
                )
                destination = await self.account_repository.get_account(
                    record.to_account_id, session=session
                )
                if source is None or destination is None:
                    raise AccountNotFoundError("Account no longer exists")

                await self._set_balance(source, source.balance - record.amount, session)
                await self._set_balance(
                    destination, destination.balance + record.converted_amount, session
                )
                return await self.transfer_repository.create(record, session=session)

        except AppException:
            raise
        except Exception as e:
            logger.error(
                f"Transfer {record.from_account_id} -> {record.to_account_id} rolled back: {str(e)}"
            )
            raise PersistenceFailureError() from e

    async def _set_balance(self, account: Account, new_balance: Decimal, session: Any) -> None:
        updated = await self.account_repository.update_balance(
            account.id, new_balance, session=session
        )
        if not updated:
            raise PersistenceFailureError(f"Balance update for account {account.id} did not apply")

    async def _get_owned_account(self, account_id: Any, owner_id: Any) -> Account:
        account = await self.account_repository.get_account(account_id)
        if account is None or account.user_id != owner_id:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    @staticmethod
    def _parse_amount(amount: Union[Decimal, str, int, float]) -> Decimal:
        if isinstance(amount, bool):
            raise ValidationError("amount must be a number")
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise ValidationError("amount must be a number")
        if not value.is_finite() or value <= 0:
            raise ValidationError("amount must be greater than zero")

        try:
            value = quantize_money(value)
        except InvalidOperation:
            raise ValidationError("amount is too large")
        if value <= 0:
            raise ValidationError("amount must be at least 0.01")
        return value
