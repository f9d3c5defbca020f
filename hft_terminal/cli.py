# hft_terminal/cli.py
from __future__ import annotations

import argparse
import shlex
import sys
from typing import Optional

from loguru import logger

from hft_terminal.app.orchestration import TerminalSession
from hft_terminal.backend.account_client import AccountApiClient, ClientConfig
from hft_terminal.config import settings
from hft_terminal.domain.dto import BalanceSnapshot
from hft_terminal.domain.models import Action
from hft_terminal.infra.logging import setup_logging
from hft_terminal.infra.persistence import SqliteIdentityStorage

DEFAULT_SYMBOL_ID = 1
DEFAULT_AMOUNT = 10
LOCAL_COMMANDS = frozenset({"whoami", "logout"})

HELP = """Komendy:
  buy|sell [symbol_id] [amount]   zlecenie na akcje
  deposit|withdraw [amount]       ruch gotówki
  balance                         pokaż saldo
  refresh                         pobierz saldo teraz
  logout                          wyloguj
  quit                            wyjście
"""


def render_balance(snap: Optional[BalanceSnapshot]) -> str:
    cash = f"${snap.cash:,}" if snap is not None else "$0.00"
    lines = ["AVAILABLE CASH", f"  {cash}", "PORTFOLIO HOLDINGS"]
    if snap is not None and snap.stocks:
        for sym, qty in snap.stocks.items():
            lines.append(f"  SYM_ID::{sym:<8} {qty} UNITS")
    else:
        lines.append("  No open positions.")
    return "\n".join(lines)


def render_status(status: str) -> str:
    return f"> {status}" if status else ""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hft-terminal",
        description="Terminal HFT::ENGINE_V1: logowanie, saldo i zlecenia na serwerze kont.",
    )
    p.add_argument("--api-url", default=None, help=f"Adres serwera (domyślnie {settings.API_URL}).")
    p.add_argument("--session-db", default=None, help=f"Plik z zapisaną sesją (domyślnie {settings.SESSION_DB}).")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Poziom logowania do pliku (domyślnie z LOG_LEVEL).",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    for name in ("login", "register"):
        a = sub.add_parser(name)
        a.add_argument("username")

    sub.add_parser("logout")
    sub.add_parser("whoami")
    sub.add_parser("balance")

    t = sub.add_parser("trade")
    t.add_argument("action", type=str.upper, choices=[a.value for a in Action])
    t.add_argument("--symbol", type=float, default=DEFAULT_SYMBOL_ID, help="SYMBOL ID (domyślnie 1).")
    t.add_argument("--amount", type=float, default=DEFAULT_AMOUNT, help="Ilość / kwota (domyślnie 10).")

    sub.add_parser("terminal", help="Tryb interaktywny z odświeżaniem salda w tle.")
    return p


def build_session(args: argparse.Namespace) -> TerminalSession:
    cfg = ClientConfig.from_settings()
    if args.api_url:
        cfg.base_url = args.api_url.rstrip("/")
    return TerminalSession(AccountApiClient(cfg), SqliteIdentityStorage(args.session_db))


def run_command(session: TerminalSession, line: str) -> bool:
    """Jedna linia trybu interaktywnego. Zwraca False, gdy trzeba zakończyć."""
    try:
        parts = shlex.split(line)
    except ValueError as e:
        print(f"Niepoprawna komenda ({e}). Wpisz help.")
        return True
    if not parts:
        return True
    cmd, rest = parts[0].lower(), parts[1:]

    if cmd in {"quit", "exit"}:
        return False
    if cmd == "help":
        print(HELP)
        return True

    if session.identity is None:
        if cmd in {"login", "register"} and rest:
            ok = session.login(rest[0]) if cmd == "login" else session.register(rest[0])
            print(render_status(session.status))
            if ok:
                print(render_balance(session.balance))
        else:
            print("ACCESS TERMINAL: login <username> | register <username> | quit")
        return True

    if cmd == "balance":
        print(render_balance(session.balance))
    elif cmd == "refresh":
        session.refresh()
        print(render_balance(session.balance))
    elif cmd == "logout":
        session.logout()
        print("Wylogowano.")
    elif cmd.upper() in Action.__members__:
        action = Action(cmd.upper())
        try:
            if action in (Action.DEPOSIT, Action.WITHDRAW):
                symbol, amount = DEFAULT_SYMBOL_ID, rest[0] if rest else DEFAULT_AMOUNT
            else:
                symbol = rest[0] if rest else DEFAULT_SYMBOL_ID
                amount = rest[1] if len(rest) > 1 else DEFAULT_AMOUNT
            session.trade(action, symbol, amount)
        except ValueError:
            print("Symbol i ilość muszą być liczbami.")
            return True
        print(render_status(session.status))
        print(render_balance(session.balance))
    else:
        print(HELP)
    return True


def interactive(session: TerminalSession) -> int:
    print("HFT::ENGINE_V1  (help = lista komend)")
    if session.identity:
        print(f"Zalogowany jako {session.identity}")
        print(render_balance(session.balance))
    try:
        while True:
            prompt = f"{session.identity or 'guest'}> "
            if not run_command(session, input(prompt)):
                break
    except EOFError:
        pass
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    session = build_session(args)

    try:
        # whoami/logout nie pokazują salda, więc bez pollingu i bez GET /balance
        session.open(start_polling=args.cmd not in LOCAL_COMMANDS)

        if args.cmd in {"login", "register"}:
            ok = session.login(args.username) if args.cmd == "login" else session.register(args.username)
            print(session.status)
            return 0 if ok else 1

        if args.cmd == "terminal":
            return interactive(session)

        if session.identity is None:
            print("Brak aktywnej sesji. Użyj: hft-terminal login <username>")
            return 1

        if args.cmd == "whoami":
            print(session.identity)
            return 0

        if args.cmd == "logout":
            session.logout()
            print("Wylogowano.")
            return 0

        if args.cmd == "balance":
            print(render_balance(session.balance))
            return 0

        if args.cmd == "trade":
            result = session.trade(Action(args.action), args.symbol, args.amount)
            print(render_status(session.status))
            print(render_balance(session.balance))
            return 0 if result is not None else 1

        print("Nieznana komenda.")
        return 2

    except KeyboardInterrupt:
        print("\nPrzerwano.")
        return 130
    finally:
        session.close()
        logger.debug("Koniec pracy terminala")


if __name__ == "__main__":
    sys.exit(main())
