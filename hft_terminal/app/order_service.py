from typing import Union

from hft_terminal.domain.dto import Number, OrderRequest
from hft_terminal.domain.models import CASH_ACTIONS, INBOUND_ACTIONS, Action


def to_number(value: Union[str, int, float]) -> Number:
    # wartości całkowite zawsze jako int, żeby JSON miał 10 a nie 10.0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    num = float(value)
    if num.is_integer():
        return int(num)
    return num


def translate_order(action: Action, symbol_id, raw_amount, identity: str) -> OrderRequest:
    """
    Akcja z terminala -> kanoniczne zlecenie ze znakiem.

    BUY/DEPOSIT dają +|amount|, SELL/WITHDRAW dają -|amount|; DEPOSIT/WITHDRAW to ruch gotówki.
    Żadnej walidacji kwot ani symbolu, to robi serwer.
    """
    action = Action(action)
    magnitude = abs(to_number(raw_amount))
    amount = magnitude if action in INBOUND_ACTIONS else -magnitude
    return OrderRequest(
        identity=identity,
        symbol_id=to_number(symbol_id),
        amount=amount,
        is_cash=action in CASH_ACTIONS,
    )
