from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from .dto import BalanceSnapshot, OrderRequest
from .models import AuthMode

class AccountPort(ABC):
    @abstractmethod
    def authenticate(self, mode: AuthMode, username: str, password: str, email: str) -> Dict[str, Any]: ...

    @abstractmethod
    def get_balance(self, username: str) -> BalanceSnapshot: ...

    @abstractmethod
    def submit_trade(self, order: OrderRequest) -> Any: ...  # surowy JSON odpowiedzi

class IdentityStorage(ABC):
    @abstractmethod
    def load(self) -> Optional[str]: ...

    @abstractmethod
    def save(self, identity: str) -> None: ...

    @abstractmethod
    def remove(self) -> None: ...
