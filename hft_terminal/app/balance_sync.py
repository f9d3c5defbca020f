import threading
from typing import Optional

from loguru import logger

from hft_terminal.backend.account_client import AccountApiError
from hft_terminal.config import settings
from hft_terminal.domain.dto import BalanceSnapshot
from hft_terminal.domain.interfaces import AccountPort


class FetchError(Exception):
    """Pobranie salda nie powiodło się; poprzedni snapshot zostaje."""


class BalanceSync:
    """
    Jedyny właściciel BalanceSnapshot.

    Start sesji -> natychmiastowy fetch, potem co `interval` sekund w osobnym wątku,
    aż do końca sesji. Błędy pobrania tylko logujemy: lepsze stare saldo niż puste.
    Każdy fetch dostaje numer sekwencyjny i numer sesji (generację); odpowiedź
    starsza niż zastosowany snapshot albo z zakończonej sesji jest odrzucana.
    """

    def __init__(self, api: AccountPort, interval: Optional[float] = None):
        self.api = api
        self.interval = interval if interval is not None else settings.POLL_INTERVAL_SEC
        self._lock = threading.Lock()
        self._snapshot: Optional[BalanceSnapshot] = None
        self._identity: Optional[str] = None
        self._generation = 0
        self._next_seq = 0
        self._applied_seq = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Optional[BalanceSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def polling(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    # ---------- sesja ----------

    def on_identity_changed(self, identity: Optional[str]):
        """Subskrypcja SessionStore: nowa tożsamość startuje polling, brak tożsamości go zatrzymuje."""
        if identity is None:
            self.stop(clear=True)
            return
        with self._lock:
            same = identity == self._identity and not self._stop.is_set()
        if same:
            return
        self.stop(clear=True)
        self.start(identity)

    def start(self, identity: str):
        with self._lock:
            self._generation += 1
            gen = self._generation
            self._identity = identity
            self._stop = threading.Event()
            stop = self._stop

        logger.info("Start pollingu sald dla {} (co {}s)", identity, self.interval)
        self._tick(identity, gen)

        self._thread = threading.Thread(
            target=self._run, args=(identity, gen, stop), name=f"balance-poll-{identity}", daemon=True
        )
        self._thread.start()

    def stop(self, clear: bool = False):
        with self._lock:
            self._generation += 1
            was = self._identity
            self._identity = None
            self._stop.set()
            if clear:
                self._snapshot = None
        # nie czekamy na wątek: zapytanie w locie dokończy się, a wynik zostanie odrzucony
        self._thread = None
        if was is not None:
            logger.info("Stop pollingu sald dla {}", was)

    # ---------- pobieranie ----------

    def fetch(self, identity: str) -> BalanceSnapshot:
        with self._lock:
            if identity != self._identity:
                raise FetchError(f"Brak aktywnej sesji dla {identity!r}")
            gen = self._generation
        return self._fetch(identity, gen)

    def refresh_now(self) -> Optional[BalanceSnapshot]:
        """Natychmiastowy fetch poza harmonogramem (przycisk odśwież, po transakcji)."""
        with self._lock:
            identity, gen = self._identity, self._generation
        if identity is None:
            return None
        try:
            return self._fetch(identity, gen)
        except FetchError:
            return None

    def _fetch(self, identity: str, gen: int) -> BalanceSnapshot:
        with self._lock:
            self._next_seq += 1
            seq = self._next_seq
        try:
            snap = self.api.get_balance(identity)
        except AccountApiError as e:
            # tylko do pliku: błąd pollingu nie może migać w terminalu
            logger.info("Nie udało się pobrać salda {}: {}", identity, e)
            raise FetchError(str(e)) from e

        with self._lock:
            if gen != self._generation:
                logger.debug("Odrzucam saldo #{} z zakończonej sesji {}", seq, identity)
            elif seq <= self._applied_seq:
                logger.debug("Odrzucam nieaktualne saldo #{} (zastosowane #{})", seq, self._applied_seq)
            else:
                self._snapshot = snap
                self._applied_seq = seq
        return snap

    def _tick(self, identity: str, gen: int):
        try:
            self._fetch(identity, gen)
        except FetchError:
            pass # już zalogowane, kolejny tick jest ponowieniem

    def _run(self, identity: str, gen: int, stop: threading.Event):
        while not stop.wait(self.interval):
            with self._lock:
                if gen != self._generation:
                    return
            self._tick(identity, gen)
