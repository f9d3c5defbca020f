import json
from typing import Any, Optional

from loguru import logger

from hft_terminal.app.balance_sync import BalanceSync
from hft_terminal.app.session_store import SessionStore
from hft_terminal.backend.account_client import AccountApiError
from hft_terminal.domain.dto import OrderRequest, TradeResult
from hft_terminal.domain.interfaces import AccountPort

TRADE_FAILED = "Trade failed"


class TradeError(Exception):
    def __init__(self, status: str):
        super().__init__(status)
        self.status = status


def format_status(body: Any) -> str:
    # zwarty JSON, jak JSON.stringify
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


class TradeExecutor:
    """
    Wysyła zlecenie i zawsze odświeża saldo z serwera, niezależnie od wyniku.
    Lokalnie salda nie zmieniamy nigdy.
    """

    def __init__(self, api: AccountPort, store: SessionStore, balances: BalanceSync):
        self.api = api
        self.store = store
        self.balances = balances

    def execute(self, order: OrderRequest) -> Optional[TradeResult]:
        if not self.store.active:
            logger.info("Brak sesji, pomijam zlecenie {}", order)
            return None

        try:
            body = self.api.submit_trade(order)
        except AccountApiError as e:
            logger.warning("Zlecenie nieudane ({}): {}", order, e)
            raise TradeError(TRADE_FAILED) from e
        finally:
            self.balances.refresh_now()

        result = TradeResult(body=body, status=format_status(body))
        logger.info("Zlecenie {} -> {}", order.to_payload(), result.status)
        return result
