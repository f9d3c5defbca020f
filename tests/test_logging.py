from __future__ import annotations

from pathlib import Path

from loguru import logger

from hft_terminal.app.balance_sync import BalanceSync
from hft_terminal.infra.logging import setup_logging

from conftest import offline


def test_failed_poll_stays_out_of_the_console(api, tmp_path: Path, capfd, reset_logger):
    log_file = tmp_path / "terminal.log"
    setup_logging(level="INFO", log_file=str(log_file))
    sync = BalanceSync(api, interval=60)
    sync.start("alice")

    api.balance_handler = offline
    assert sync.refresh_now() is None
    sync.stop()
    logger.complete()

    captured = capfd.readouterr()
    assert captured.err == ""
    assert "Nie udało się pobrać salda alice" in log_file.read_text(encoding="utf-8")


def test_warnings_still_reach_the_console(tmp_path: Path, capfd, reset_logger):
    setup_logging(level="INFO", log_file=str(tmp_path / "terminal.log"))

    logger.warning("dysk pełny")
    logger.complete()

    assert "dysk pełny" in capfd.readouterr().err
