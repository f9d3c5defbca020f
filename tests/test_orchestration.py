from __future__ import annotations

from hft_terminal.app.orchestration import TerminalSession
from hft_terminal.domain.dto import BalanceSnapshot
from hft_terminal.domain.models import Action, AuthMode

from conftest import MemoryStorage, offline, reject


def test_login_failure_shows_server_error_and_keeps_session_closed(api, storage, session):
    api.auth_handler = reject("invalid password")

    assert session.login("alice") is False

    assert session.status == "invalid password"
    assert session.identity is None
    assert storage.identity is None
    assert api.balance_calls == []
    assert not session.balances.polling


def test_login_connection_failure_has_generic_status(api, session):
    api.auth_handler = offline

    assert session.login("alice") is False
    assert session.status == "Connection failed"


def test_login_success_starts_polling(api, storage, session):
    assert session.login("alice") is True

    assert session.status == "Success! ID: 7"
    assert session.identity == "alice"
    assert storage.identity == "alice"
    assert api.balance_calls == ["alice"]
    assert session.balance == BalanceSnapshot(cash=1000, stocks={})
    assert session.balances.polling


def test_register_sends_placeholder_credentials(api, session):
    session.register("carol")

    mode, username, password, email = api.auth_calls[-1]
    assert mode is AuthMode.REGISTER
    assert username == "carol"
    assert password == "password"
    assert email == ""


def test_blank_username_is_not_sent(api, session):
    assert session.login("") is False
    assert api.auth_calls == []
    assert session.identity is None


def test_open_restores_saved_identity_without_auth(api):
    session = TerminalSession(api, MemoryStorage("alice"), poll_interval=60)
    try:
        assert session.open() == "alice"
        assert api.auth_calls == []
        assert api.balance_calls == ["alice"]
    finally:
        session.close()


def test_logout_clears_balance_and_stops_fetching(api, storage, session):
    session.login("alice")
    session.logout()

    assert session.identity is None
    assert session.balance is None
    assert storage.identity is None
    assert session.refresh() is None
    assert api.balance_calls == ["alice"]


def test_buy_sends_canonical_order(api, session):
    session.login("alice")

    session.trade(Action.BUY, 1, 10)

    assert api.trades[-1].to_payload() == {"username": "alice", "symbol_id": 1, "amount": 10, "is_cash": False}


def test_trade_triggers_exactly_one_extra_fetch(api, session):
    session.login("alice")
    api.trade_handler = lambda order: {"error": "unknown symbol"}

    session.trade(Action.SELL, 99, 5)

    assert session.status == '{"error":"unknown symbol"}'
    assert api.balance_calls == ["alice", "alice"]


def test_trade_transport_failure_sets_generic_status(api, session):
    session.login("alice")
    api.trade_handler = offline

    assert session.trade(Action.DEPOSIT, 1, 100) is None
    assert session.status == "Trade failed"
    assert len(api.balance_calls) == 2


def test_trade_without_session_does_nothing(api, session):
    assert session.trade(Action.BUY, 1, 10) is None
    assert api.trades == []
    assert session.status == ""


def test_failed_poll_does_not_touch_status(api, session):
    session.login("alice")
    api.balance_handler = offline

    session.refresh()

    assert session.status == "Success! ID: 7"
    assert session.balance == BalanceSnapshot(cash=1000, stocks={})


class _Closable:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_close_releases_api_and_storage(api):
    storage = MemoryStorage()
    api_res, storage_res = _Closable(), _Closable()
    api.close = api_res.close
    storage.close = storage_res.close
    session = TerminalSession(api, storage, poll_interval=60)

    session.close()

    assert api_res.closed
    assert storage_res.closed


def test_open_without_polling_restores_identity_only(api):
    session = TerminalSession(api, MemoryStorage("alice"), poll_interval=60)
    try:
        assert session.open(start_polling=False) == "alice"
        assert session.identity == "alice"
        assert api.balance_calls == []
        assert not session.balances.polling
        session.logout()
        assert session.identity is None
    finally:
        session.close()
