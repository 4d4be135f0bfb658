"""
Port interfaces (ABCs) for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any

from tradeloader.domain.trading.entities import Operation


class TransactionalSink(ABC):
    """Port for a persistence backend with named transactions.

    At most one transaction is open at a time. Any failure is signalled
    by raising; the caller decides whether to roll back and retry.
    """

    @abstractmethod
    def begin_transaction(self, name: str) -> None:
        """Open a transaction under the given name."""
        raise NotImplementedError

    @abstractmethod
    def process(self, operation: Operation, statement: str, *parameters: Any) -> None:
        """Submit one operation inside the currently open transaction.

        Args:
            operation: Kind of operation (only INSERT is used).
            statement: Statement template with positional binds ``:p1..:pN``.
            parameters: Values bound to the template, in order.
        """
        raise NotImplementedError

    @abstractmethod
    def commit_transaction(self, name: str) -> None:
        """Make every operation of the named transaction durable."""
        raise NotImplementedError

    @abstractmethod
    def rollback_transaction(self, name: str) -> None:
        """Discard the named transaction.

        Must be a no-op when no transaction with that name is open.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the sink. No-op by default."""
