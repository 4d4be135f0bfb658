"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior beyond rendering.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from tradeloader.domain.trading.batching import DEFAULT_TRANSACTION_NAME_TEMPLATE
from tradeloader.domain.trading.best_trades import DEFAULT_CAP_PER_GROUP, DEFAULT_TOP_N
from tradeloader.domain.trading.entities import Direction, TradeRecord


@dataclass(frozen=True)
class PersistTradesCommand:
    """Input DTO for persisting a trade list.

    Attributes:
        records: Trades in file order.
        batch_size: Trades per transaction.
        max_retries: Failed attempts allowed per batch.
        transaction_name_template: Format string with an ``{index}`` field.
    """

    records: tuple[TradeRecord, ...]
    batch_size: int
    max_retries: int
    transaction_name_template: str = DEFAULT_TRANSACTION_NAME_TEMPLATE


@dataclass(frozen=True)
class PersistTradesResult:
    """Output DTO summarising a persistence run.

    Attributes:
        total_trades: Trades submitted.
        total_batches: Batches processed.
        committed_batches: Batches that reached the committed state.
        total_retries: Retries summed over all batches.
        uncompleted_batch_indices: Indices of abandoned batches.
    """

    total_trades: int
    total_batches: int
    committed_batches: int
    total_retries: int
    uncompleted_batch_indices: list[int] = field(default_factory=list)

    @property
    def all_committed(self) -> bool:
        return not self.uncompleted_batch_indices


@dataclass(frozen=True)
class RankBestTradesQuery:
    """Input DTO for the best-trades report of one direction."""

    records: tuple[TradeRecord, ...]
    direction: Direction
    top_n: int = DEFAULT_TOP_N
    cap_per_group: int = DEFAULT_CAP_PER_GROUP


@dataclass(frozen=True)
class BestTradeResult:
    """Output DTO for one ranked instrument."""

    rank: int
    instrument_id: str
    trade_count: int
    bounded_sum: Decimal

    def render(self) -> str:
        return f"{self.instrument_id}: {self.bounded_sum}/{self.trade_count}"
