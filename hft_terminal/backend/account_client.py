# hft_terminal/backend/account_client.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests
from loguru import logger

from hft_terminal.config import settings
from hft_terminal.domain.dto import BalanceSnapshot, OrderRequest
from hft_terminal.domain.interfaces import AccountPort
from hft_terminal.domain.models import AuthMode


# ===== Wyjątki warstwy HTTP =====
class AccountApiError(Exception):
    """Ogólny błąd komunikacji z serwerem kont."""


class AccountNetworkError(AccountApiError):
    """Błąd sieci/połączenia albo timeout."""


class AccountResponseError(AccountApiError):
    """Odpowiedź nie jest poprawnym JSON-em albo ma zły kształt."""


class AccountRejected(AccountApiError):
    """Serwer zwrócił pole "error" w treści odpowiedzi."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class ClientConfig:
    base_url: str = "http://localhost:3000"
    timeout: float = 10.0

    @staticmethod
    def from_settings() -> "ClientConfig":
        return ClientConfig(base_url=settings.API_URL, timeout=settings.REQUEST_TIMEOUT_SEC)


class AccountApiClient(AccountPort):
    """
    Adapter HTTP do serwera kont (/login, /register, /balance, /trade).

    Zero retry: każdy błąd jest końcowy, a ponawianie dla sald robi poller.
    """

    def __init__(self, cfg: Optional[ClientConfig] = None, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg or ClientConfig.from_settings()
        self._session = session or requests.Session()
        logger.debug("AccountApiClient zainicjalizowany (base_url={}, timeout={}s)", self.cfg.base_url, self.cfg.timeout)

    # ---------- PUBLIC API ----------

    def authenticate(self, mode: AuthMode, username: str, password: str, email: str) -> Dict[str, Any]:
        """POST /login lub /register. Zwraca treść odpowiedzi ({user_id})."""
        status, data = self._request(
            "POST",
            f"/{mode.value}",
            json={"username": username, "password": password, "email": email},
        )
        self._raise_for_error(status, data)
        if not isinstance(data, dict):
            raise AccountResponseError(f"Nieoczekiwany kształt odpowiedzi /{mode.value}: {data!r}")
        return data

    def get_balance(self, username: str) -> BalanceSnapshot:
        status, data = self._request("GET", f"/balance/{quote(username, safe='')}")
        self._raise_for_error(status, data)
        return self._parse_balance(data)

    def submit_trade(self, order: OrderRequest) -> Any:
        """
        POST /trade. Każdy parsowalny JSON traktujemy jako sukces transportowy,
        nawet z polem "error" albo kodem != 2xx; treść oceni użytkownik.
        """
        status, data = self._request("POST", "/trade", json=order.to_payload())
        if not 200 <= status < 300:
            logger.warning("/trade zwrócił HTTP {} (treść przekazana dalej)", status)
        return data

    def close(self) -> None:
        self._session.close()

    # ---------- HELPERS ----------

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Tuple[int, Any]:
        url = f"{self.cfg.base_url}{path}"
        try:
            resp = self._session.request(method, url, json=json, timeout=self.cfg.timeout)
        except requests.Timeout as e:
            raise AccountNetworkError(f"Timeout po {self.cfg.timeout}s: {method} {path}") from e
        except requests.RequestException as e:
            raise AccountNetworkError(f"Network error: {e.__class__.__name__}: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise AccountResponseError(f"Odpowiedź {method} {path} nie jest JSON-em (HTTP {resp.status_code})") from e
        return resp.status_code, data

    @staticmethod
    def _raise_for_error(status: int, data: Any) -> None:
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            if not isinstance(error, str):
                error = json.dumps(error, separators=(",", ":"), ensure_ascii=False)
            raise AccountRejected(error, status_code=status)
        if not 200 <= status < 300:
            raise AccountResponseError(f"HTTP {status} bez pola error")

    @staticmethod
    def _parse_balance(data: Any) -> BalanceSnapshot:
        if not isinstance(data, dict):
            raise AccountResponseError(f"Saldo: oczekiwano obiektu, jest {type(data).__name__}")
        cash = data.get("cash")
        if isinstance(cash, bool) or not isinstance(cash, (int, float)):
            raise AccountResponseError(f"Saldo: niepoprawne pole cash={cash!r}")
        stocks = data.get("stocks") or {}
        if not isinstance(stocks, dict):
            raise AccountResponseError(f"Saldo: niepoprawne pole stocks={stocks!r}")
        out: Dict[str, Any] = {}
        for sym, qty in stocks.items():
            if isinstance(qty, bool) or not isinstance(qty, (int, float)):
                raise AccountResponseError(f"Saldo: niepoprawna ilość dla {sym}: {qty!r}")
            out[str(sym)] = qty
        return BalanceSnapshot(cash=cash, stocks=out)
