"""
Simulated brokerage.

Fills every order at its own price unless the symbol is configured to
reject. Real broker adapters implement the same ``execute`` method.
"""

import dataclasses
import logging
from typing import Iterable, Protocol

from piggy.domain.models import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderExecutor(Protocol):
    def execute(self, order: Order) -> Order:
        ...


class SimulatedBroker:
    def __init__(self, reject_symbols: Iterable[str] = ()):
        self.reject_symbols = set(reject_symbols)
        self.executed = []

    def execute(self, order: Order) -> Order:
        status = OrderStatus.FAILED if order.symbol in self.reject_symbols else OrderStatus.FILLED
        result = dataclasses.replace(order, status=status)
        self.executed.append(result)

        logger.info(
            "ORDER_%s | id=%s symbol=%s qty=%d price=%s",
            status.value.upper(),
            order.id,
            order.symbol,
            order.quantity,
            order.price,
        )
        return result
