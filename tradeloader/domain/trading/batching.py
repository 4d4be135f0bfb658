"""
Domain service: fixed-size batching of the trade record stream.

Pure business logic. No IO, no side effects.
"""

from collections.abc import Iterable, Iterator
from itertools import islice

from tradeloader.domain.trading.entities import Batch, TradeRecord

DEFAULT_TRANSACTION_NAME_TEMPLATE = "no {index}"


def partition(
    records: Iterable[TradeRecord], size: int
) -> Iterator[tuple[TradeRecord, ...]]:
    """Lazily split records into consecutive groups of ``size``.

    Every group has exactly ``size`` records except possibly the last,
    which holds the remainder. Concatenating the groups reproduces the
    input order. An empty input yields no groups.

    Raises:
        ValueError: If ``size`` is smaller than 1.
    """
    if size < 1:
        raise ValueError(f"Batch size must be >= 1, got {size}")
    return _chunks(iter(records), size)


def _chunks(
    iterator: Iterator[TradeRecord], size: int
) -> Iterator[tuple[TradeRecord, ...]]:
    while True:
        chunk = tuple(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def make_batches(
    records: Iterable[TradeRecord],
    size: int,
    name_template: str = DEFAULT_TRANSACTION_NAME_TEMPLATE,
) -> Iterator[Batch]:
    """Partition records and attach each group's index and transaction name."""
    return (
        Batch(
            index=index,
            records=chunk,
            transaction_name=name_template.format(index=index),
        )
        for index, chunk in enumerate(partition(records, size))
    )
