"""
Use case: Persist a trade list in retrying, fixed-size transactions.

Input:  PersistTradesCommand (records, batch size, retry bound)
Output: PersistTradesResult (batch and retry counters, abandoned batches)
Side effects: Inserts trades through the TransactionalSink port.
Failure cases: None raised for sink failures; abandoned batches are
reported in the result.
"""

import logging

from tradeloader.application.trading.dtos import PersistTradesCommand, PersistTradesResult
from tradeloader.domain.trading.batch_committer import RetryingBatchCommitter
from tradeloader.domain.trading.batching import make_batches
from tradeloader.domain.trading.ports import TransactionalSink

logger = logging.getLogger(__name__)


class PersistTradesUseCase:
    """Orchestrates batching and committing a trade list."""

    def __init__(self, sink: TransactionalSink) -> None:
        """Initialize the use case.

        Args:
            sink: Transactional backend receiving the trades.
        """
        self._sink = sink

    def execute(self, command: PersistTradesCommand) -> PersistTradesResult:
        """Run the persistence use case.

        Args:
            command: Records plus batching and retry parameters.

        Returns:
            Counters of the run.
        """
        logger.info(
            "Persisting %d trades: batch_size=%d, max_retries=%d",
            len(command.records),
            command.batch_size,
            command.max_retries,
        )

        batches = make_batches(
            command.records,
            command.batch_size,
            command.transaction_name_template,
        )
        committer = RetryingBatchCommitter(self._sink, max_retries=command.max_retries)
        report = committer.commit_all(batches)

        result = PersistTradesResult(
            total_trades=len(command.records),
            total_batches=report.total_batches,
            committed_batches=sum(1 for o in report.outcomes if o.committed),
            total_retries=report.total_retries,
            uncompleted_batch_indices=list(report.uncompleted_batch_indices),
        )

        if result.all_committed:
            logger.info(
                "Persistence complete: %d batches, %d retries.",
                result.total_batches,
                result.total_retries,
            )
        else:
            logger.warning(
                "Persistence finished with %d uncompleted batches %s "
                "(%d batches, %d retries).",
                len(result.uncompleted_batch_indices),
                result.uncompleted_batch_indices,
                result.total_batches,
                result.total_retries,
            )
        return result
