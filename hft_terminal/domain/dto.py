from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class OrderRequest:
    identity: str
    symbol_id: Number
    amount: Number # + do użytkownika, - od użytkownika
    is_cash: bool

    def to_payload(self) -> Dict[str, Any]:
        return {
            "username": self.identity,
            "symbol_id": self.symbol_id,
            "amount": self.amount,
            "is_cash": self.is_cash,
        }


@dataclass(frozen=True)
class BalanceSnapshot:
    cash: Number
    stocks: Dict[str, Number] = field(default_factory=dict) # symbol_id -> ilość


@dataclass(frozen=True)
class AuthResult:
    identity: str
    server_user_id: Optional[Any]


@dataclass(frozen=True)
class TradeResult:
    body: Any # surowy JSON z serwera, także gdy zawiera "error"
    status: str
