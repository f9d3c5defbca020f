from typing import Optional

from loguru import logger

from hft_terminal.app.auth_gateway import AuthError, AuthGateway
from hft_terminal.app.balance_sync import BalanceSync
from hft_terminal.app.order_service import translate_order
from hft_terminal.app.session_store import SessionStore
from hft_terminal.app.trade_executor import TradeError, TradeExecutor
from hft_terminal.domain.dto import BalanceSnapshot, TradeResult
from hft_terminal.domain.interfaces import AccountPort, IdentityStorage
from hft_terminal.domain.models import Action, AuthMode


class TerminalSession:
    """
    Kontekst sesji terminala: tożsamość, saldo i pasek statusu w jednym obiekcie
    (zamiast globali), wstrzykiwany do CLI i testów.
    """

    def __init__(self, api: AccountPort, storage: IdentityStorage, poll_interval: Optional[float] = None):
        self.api = api
        self.storage = storage
        self.store = SessionStore(storage)
        self.balances = BalanceSync(api, interval=poll_interval)
        self.store.subscribe(self.balances.on_identity_changed)
        self.auth = AuthGateway(api, self.store)
        self.executor = TradeExecutor(api, self.store, self.balances)
        self.status: str = ""

    @property
    def identity(self) -> Optional[str]:
        return self.store.identity

    @property
    def balance(self) -> Optional[BalanceSnapshot]:
        return self.balances.snapshot

    def open(self, start_polling: bool = True) -> Optional[str]:
        """Start procesu: przywróć zapisaną sesję (bez weryfikacji na serwerze)."""
        return self.store.restore(notify=start_polling)

    def close(self):
        self.balances.stop()
        for resource in (self.api, self.storage):
            close = getattr(resource, "close", None)
            if close is not None:
                close()

    def login(self, username: str) -> bool:
        return self._authenticate(username, AuthMode.LOGIN)

    def register(self, username: str) -> bool:
        return self._authenticate(username, AuthMode.REGISTER)

    def logout(self):
        logger.info("Wylogowanie {}", self.identity)
        self.store.clear()

    def refresh(self) -> Optional[BalanceSnapshot]:
        return self.balances.refresh_now()

    def trade(self, action: Action, symbol_id=1, amount=10) -> Optional[TradeResult]:
        identity = self.identity
        if identity is None:
            return None
        order = translate_order(action, symbol_id, amount, identity)
        try:
            result = self.executor.execute(order)
        except TradeError as e:
            self.status = e.status
            return None
        if result is not None:
            self.status = result.status
        return result

    def _authenticate(self, username: str, mode: AuthMode) -> bool:
        try:
            result = self.auth.authenticate(username, mode)
        except AuthError as e:
            self.status = e.status
            return False
        self.status = f"Success! ID: {result.server_user_id}"
        return True
