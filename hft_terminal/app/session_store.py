import sqlite3
import threading
from typing import Callable, List, Optional

from loguru import logger

from hft_terminal.domain.interfaces import IdentityStorage

Listener = Callable[[Optional[str]], None]


class SessionStore:
    """Jedyny właściciel tożsamości (nazwy użytkownika) i jej zapisu na dysku."""

    def __init__(self, storage: IdentityStorage):
        self.storage = storage
        self._identity: Optional[str] = None
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    @property
    def identity(self) -> Optional[str]:
        with self._lock:
            return self._identity

    @property
    def active(self) -> bool:
        return self.identity is not None

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def restore(self, notify: bool = True) -> Optional[str]:
        try:
            identity = self.storage.load()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Nie udało się odczytać zapisanej sesji: {}", e)
            identity = None
        if not identity:
            return None
        logger.info("Przywrócono sesję użytkownika {}", identity)
        self._replace(identity, notify=notify)
        return identity

    def set(self, identity: str):
        if not identity:
            raise ValueError("identity must be a non-empty string")
        try:
            self.storage.save(identity)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Nie udało się zapisać sesji: {}", e)
        self._replace(identity)

    def clear(self):
        try:
            self.storage.remove()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Nie udało się usunąć zapisanej sesji: {}", e)
        self._replace(None)

    def _replace(self, identity: Optional[str], notify: bool = True):
        with self._lock:
            self._identity = identity
        if not notify:
            return
        for listener in list(self._listeners):
            listener(identity)
