"""
Adapter: In-memory trade sink.

Implements the TransactionalSink port without any backing store.
Used for dry runs and tests; committed operations are kept in order.
"""

from dataclasses import dataclass
from typing import Any, Optional

from tradeloader.domain.trading.entities import Operation
from tradeloader.domain.trading.errors import SinkError, TransactionStateError
from tradeloader.domain.trading.ports import TransactionalSink


@dataclass(frozen=True)
class SubmittedOperation:
    """One operation as received by the sink."""

    transaction_name: str
    operation: Operation
    statement: str
    parameters: tuple


class InMemoryTradeSink(TransactionalSink):
    """Buffers operations per transaction and publishes them on commit."""

    def __init__(self) -> None:
        self.committed: list[SubmittedOperation] = []
        self.committed_transactions: list[str] = []
        self.rolled_back_transactions: list[str] = []
        self._name: Optional[str] = None
        self._pending: list[SubmittedOperation] = []

    def begin_transaction(self, name: str) -> None:
        if self._name is not None:
            raise SinkError(
                f"Cannot begin '{name}': transaction '{self._name}' is still open"
            )
        self._name = name
        self._pending = []

    def process(self, operation: Operation, statement: str, *parameters: Any) -> None:
        if self._name is None:
            raise TransactionStateError("<none>", "process")
        self._pending.append(
            SubmittedOperation(self._name, operation, statement, tuple(parameters))
        )

    def commit_transaction(self, name: str) -> None:
        if self._name != name:
            raise TransactionStateError(name, "commit")
        self.committed.extend(self._pending)
        self.committed_transactions.append(name)
        self._reset()

    def rollback_transaction(self, name: str) -> None:
        if self._name != name:
            return
        self.rolled_back_transactions.append(name)
        self._reset()

    @property
    def in_transaction(self) -> bool:
        return self._name is not None

    def _reset(self) -> None:
        self._name = None
        self._pending = []
