"""
Domain service: retrying, transactional batch persistence.

Each batch is written inside its own named transaction. A failed attempt
is rolled back and the whole batch is re-submitted from the start, up to
``max_retries`` times. Batches are processed strictly in index order and
an abandoned batch never stops the run.

State machine per batch:

    ATTEMPTING ──success──▶ COMMITTED
        │
      failure (rollback, retry += 1)
        │
        ├── retry <  max_retries ──▶ ATTEMPTING
        └── retry >= max_retries ──▶ ABANDONED

Usage:
    committer = RetryingBatchCommitter(sink, max_retries=3)
    report = committer.commit_all(make_batches(records, 21))
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from tradeloader.domain.trading.entities import Batch, Operation, TradeRecord
from tradeloader.domain.trading.ports import TransactionalSink

logger = logging.getLogger(__name__)

INSERT_TRADE_STATEMENT = (
    "INSERT INTO trades (isin, quantity, price, direction) "
    "VALUES (:p1, :p2, :p3, :p4)"
)


# ══════════════════════════════════════════════════════════════════════
# Data structures
# ══════════════════════════════════════════════════════════════════════


class BatchState(Enum):
    """Lifecycle of a single batch inside the committer."""

    ATTEMPTING = "attempting"
    COMMITTED = "committed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class BatchOutcome:
    """Terminal result for one batch."""

    index: int
    transaction_name: str
    state: BatchState
    retries: int
    size: int

    @property
    def committed(self) -> bool:
        return self.state is BatchState.COMMITTED


@dataclass
class CommitReport:
    """Summary of a full commit run.

    Attributes:
        total_batches: Number of batches processed.
        total_retries: Sum of per-batch retries.
        uncompleted_batch_indices: Indices of abandoned batches, ascending.
        outcomes: Per-batch outcomes in index order.
    """

    total_batches: int = 0
    total_retries: int = 0
    uncompleted_batch_indices: list[int] = field(default_factory=list)
    outcomes: list[BatchOutcome] = field(default_factory=list)

    @property
    def all_committed(self) -> bool:
        return not self.uncompleted_batch_indices

    def record(self, outcome: BatchOutcome) -> None:
        """Fold one batch outcome into the running totals."""
        self.total_batches += 1
        self.total_retries += outcome.retries
        if outcome.state is BatchState.ABANDONED:
            self.uncompleted_batch_indices.append(outcome.index)
        self.outcomes.append(outcome)


# ══════════════════════════════════════════════════════════════════════
# Committer
# ══════════════════════════════════════════════════════════════════════


class RetryingBatchCommitter:
    """Persists batches into a TransactionalSink with bounded retries.

    Args:
        sink: Transactional backend receiving the inserts.
        max_retries: Failed attempts allowed per batch before it is abandoned.
        statement: Insert template; parameters are bound as
            (instrument_id, quantity, price, direction).
    """

    def __init__(
        self,
        sink: TransactionalSink,
        max_retries: int = 3,
        statement: str = INSERT_TRADE_STATEMENT,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self._sink = sink
        self._max_retries = max_retries
        self._statement = statement

    def commit_all(self, batches: Iterable[Batch]) -> CommitReport:
        """Commit every batch in order and return the aggregated report."""
        report = CommitReport()
        for batch in batches:
            report.record(self.commit_batch(batch))
        return report

    def commit_batch(self, batch: Batch) -> BatchOutcome:
        """Drive one batch through the state machine to a terminal state."""
        state = BatchState.ATTEMPTING
        retry = 0

        while state is BatchState.ATTEMPTING:
            if self._attempt(batch, retry):
                state = BatchState.COMMITTED
                continue

            self._sink.rollback_transaction(batch.transaction_name)
            retry += 1
            if retry >= self._max_retries:
                state = BatchState.ABANDONED

        outcome = BatchOutcome(
            index=batch.index,
            transaction_name=batch.transaction_name,
            state=state,
            retries=retry,
            size=len(batch),
        )
        self._log_outcome(outcome)
        return outcome

    def _attempt(self, batch: Batch, retry: int) -> bool:
        """Run one begin/process/commit cycle. Returns True on commit."""
        name = batch.transaction_name
        try:
            self._sink.begin_transaction(name)
            for record in batch.records:
                self._sink.process(
                    Operation.INSERT, self._statement, *_insert_parameters(record)
                )
            self._sink.commit_transaction(name)
        except Exception as exc:
            logger.debug(
                "Attempt %d of transaction %s failed: %s", retry + 1, name, exc
            )
            return False
        return True

    @staticmethod
    def _log_outcome(outcome: BatchOutcome) -> None:
        if outcome.state is BatchState.ABANDONED:
            logger.warning(
                "Uncompleted transaction %s after %d retries.",
                outcome.transaction_name,
                outcome.retries,
            )
        elif outcome.retries == 0:
            logger.info("Successful transaction %s.", outcome.transaction_name)
        else:
            logger.info(
                "Successful transaction %s on retry %d.",
                outcome.transaction_name,
                outcome.retries,
            )


def _insert_parameters(record: TradeRecord) -> tuple:
    return (
        record.instrument_id,
        record.quantity,
        record.price,
        record.direction.value,
    )
