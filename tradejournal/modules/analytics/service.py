"""
Portfolio Aggregator

Read-only analytics over a user's accounts and closed trades.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from tradejournal.config.settings import get_settings
from tradejournal.domain.models.trade import TradeStatus
from tradejournal.modules.currency.service import ExchangeRateCache
from tradejournal.repositories.account_repository import AccountRepository
from tradejournal.repositories.trade_repository import TradeRepository
from tradejournal.shared.models import quantize_money
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)

_ZERO = Decimal("0")


def _money_str(value: Decimal) -> str:
    return str(quantize_money(value))


class PortfolioAggregator:
    """
    Portfolio Aggregator

    Portfolio value converts every balance into the reporting currency.
    Non-reporting balances are divided by the reporting->account rate
    (e.g. an INR balance divided by USD->INR = 83.24), so the rate used is
    always "account currency per reporting currency".
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        trade_repository: TradeRepository,
        rate_cache: ExchangeRateCache,
        reporting_currency: Optional[str] = None
    ):
        self.account_repository = account_repository
        self.trade_repository = trade_repository
        self.rate_cache = rate_cache
        self.reporting_currency = (
            reporting_currency or get_settings().REPORTING_CURRENCY
        ).upper()

    async def get_user_portfolio_value(self, user_id: Any) -> Dict[str, Any]:
        """
        Total value of the user's active accounts in the reporting currency.

        Returns:
            dict: {"totalValue": "1234.56", "currency": "USD", "accounts": [...]}
        """
        accounts = await self.account_repository.find_by_user(user_id)

        total = _ZERO
        breakdown: List[Dict[str, Any]] = []

        for account in accounts:
            balance = account.balance
            if account.currency == self.reporting_currency:
                value = balance
            else:
                rate = await self.rate_cache.get_rate(self.reporting_currency, account.currency)
                value = balance / rate

            total += value
            breakdown.append({
                "accountId": str(account.id),
                "currency": account.currency,
                "balance": _money_str(balance),
                "value": _money_str(value),
            })

        logger.debug(f"Portfolio for user {user_id}: {len(accounts)} accounts, total {total}")

        return {
            "totalValue": _money_str(total),
            "currency": self.reporting_currency,
            "accounts": breakdown,
        }

    async def get_user_trading_stats(self, user_id: Any) -> Dict[str, Any]:
        """
        Outcome statistics over the user's closed trades.

        Returns:
            dict: totalTrades, winRate (percent, 1 dp), avgWin, avgLoss
            (negative), profitLoss; money values as 2-dp strings
        """
        closed_trades = await self.trade_repository.find_by_user(
            user_id, status=TradeStatus.CLOSED
        )

        total_trades = len(closed_trades)
        if total_trades == 0:
            return {
                "totalTrades": 0,
                "winRate": 0,
                "avgWin": "0.00",
                "avgLoss": "0.00",
                "profitLoss": "0.00",
            }

        pnls = [trade.pnl if trade.pnl is not None else _ZERO for trade in closed_trades]
        wins = [pnl for pnl in pnls if pnl > 0]
        losses = [pnl for pnl in pnls if pnl < 0]

        win_rate = Decimal(len(wins)) / Decimal(total_trades) * 100
        avg_win = sum(wins, _ZERO) / len(wins) if wins else _ZERO
        avg_loss = sum(losses, _ZERO) / len(losses) if losses else _ZERO

        return {
            "totalTrades": total_trades,
            "winRate": float(win_rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)),
            "avgWin": _money_str(avg_win),
            "avgLoss": _money_str(avg_loss),
            "profitLoss": _money_str(sum(pnls, _ZERO)),
        }
