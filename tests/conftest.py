from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional

import pytest
from loguru import logger

from hft_terminal.app.orchestration import TerminalSession
from hft_terminal.backend.account_client import AccountNetworkError, AccountRejected
from hft_terminal.domain.dto import BalanceSnapshot, OrderRequest
from hft_terminal.domain.interfaces import AccountPort, IdentityStorage
from hft_terminal.domain.models import AuthMode


class MemoryStorage(IdentityStorage):
    def __init__(self, identity: Optional[str] = None):
        self.identity = identity

    def load(self) -> Optional[str]:
        return self.identity

    def save(self, identity: str) -> None:
        self.identity = identity

    def remove(self) -> None:
        self.identity = None


class FakeAccountApi(AccountPort):
    """Scripted account server. Each handler may return a value or raise."""

    def __init__(self):
        self.auth_calls: List[tuple] = []
        self.balance_calls: List[str] = []
        self.trades: List[OrderRequest] = []
        self.auth_handler: Callable[[AuthMode, str], Dict[str, Any]] = lambda mode, user: {"user_id": 7}
        self.balance_handler: Callable[[str], BalanceSnapshot] = lambda user: BalanceSnapshot(cash=1000, stocks={})
        self.trade_handler: Callable[[OrderRequest], Any] = lambda order: {"status": "ok"}

    def authenticate(self, mode, username, password, email):
        self.auth_calls.append((mode, username, password, email))
        return self.auth_handler(mode, username)

    def get_balance(self, username):
        self.balance_calls.append(username)
        return self.balance_handler(username)

    def submit_trade(self, order):
        self.trades.append(order)
        return self.trade_handler(order)


def reject(message: str):
    def handler(*_args):
        raise AccountRejected(message, status_code=400)
    return handler


def offline(*_args):
    raise AccountNetworkError("connection refused")


@pytest.fixture
def api() -> FakeAccountApi:
    return FakeAccountApi()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session(api: FakeAccountApi, storage: MemoryStorage):
    # long interval: only the immediate and explicit fetches happen during a test
    instance = TerminalSession(api, storage, poll_interval=60)
    try:
        yield instance
    finally:
        instance.close()


@pytest.fixture
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
