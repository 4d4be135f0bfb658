"""
Adapter: Fault-injecting sink wrapper.

Wraps any TransactionalSink and makes ``process`` and ``commit`` fail at
random with a configurable probability. Lets the retry path be exercised
against a real backend without a real outage.
"""

import logging
import random
from typing import Any, Optional

from tradeloader.domain.trading.entities import Operation
from tradeloader.domain.trading.errors import SimulatedSinkFailure
from tradeloader.domain.trading.ports import TransactionalSink

logger = logging.getLogger(__name__)


class FaultInjectingSink(TransactionalSink):
    """Delegating sink that raises SimulatedSinkFailure at random.

    Args:
        inner: The sink receiving the operations that do not fail.
        failure_rate: Probability in [0, 1] that a single process/commit fails.
        seed: Optional RNG seed for reproducible runs.
    """

    def __init__(
        self,
        inner: TransactionalSink,
        failure_rate: float,
        seed: Optional[int] = None,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be within [0, 1], got {failure_rate}")
        self._inner = inner
        self._failure_rate = failure_rate
        self._rng = random.Random(seed)
        self.injected_failures = 0

    def begin_transaction(self, name: str) -> None:
        self._inner.begin_transaction(name)

    def process(self, operation: Operation, statement: str, *parameters: Any) -> None:
        self._maybe_fail("process")
        self._inner.process(operation, statement, *parameters)

    def commit_transaction(self, name: str) -> None:
        self._maybe_fail("commit")
        self._inner.commit_transaction(name)

    def rollback_transaction(self, name: str) -> None:
        self._inner.rollback_transaction(name)

    def close(self) -> None:
        self._inner.close()

    def _maybe_fail(self, action: str) -> None:
        if self._rng.random() < self._failure_rate:
            self.injected_failures += 1
            logger.debug("Injecting failure into %s", action)
            raise SimulatedSinkFailure(action)
