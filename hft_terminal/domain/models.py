from enum import Enum


class Action(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


CASH_ACTIONS = frozenset({Action.DEPOSIT, Action.WITHDRAW})
INBOUND_ACTIONS = frozenset({Action.BUY, Action.DEPOSIT})
