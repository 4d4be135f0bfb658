"""
Domain service: best trades per direction.

For one direction, groups trades by instrument, reduces each group to a
trade count and a bounded price sum, and ranks the groups.

"Best" depends on the direction:
    - BUY: lowest prices first (ascending)
    - SELL: highest prices first (descending)

Ties on the bounded sum are broken by instrument id, ascending, so the
ranking does not depend on input order.

Pure business logic. No IO.
"""

from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from tradeloader.domain.trading.entities import BestTrade, Direction, TradeRecord

DEFAULT_TOP_N = 3
DEFAULT_CAP_PER_GROUP = 10


def group_by_instrument(
    records: Iterable[TradeRecord],
) -> dict[str, list[TradeRecord]]:
    """Group records by instrument id, skipping records without one."""
    groups: dict[str, list[TradeRecord]] = defaultdict(list)
    for record in records:
        if record.instrument_id:
            groups[record.instrument_id].append(record)
    return dict(groups)


def top_n(
    records: Iterable[TradeRecord],
    direction: Direction,
    n: int = DEFAULT_TOP_N,
    cap_per_group: int = DEFAULT_CAP_PER_GROUP,
    rank_ascending: bool = True,
) -> list[BestTrade]:
    """Return at most ``n`` instruments ranked by their bounded price sum.

    Args:
        records: Trades of any direction.
        direction: Only trades in this direction are considered.
        n: Maximum number of entries returned.
        cap_per_group: Number of prices summed per instrument after ordering.
        rank_ascending: Order prices and sums ascending (True) or
            descending (False).

    Returns:
        Ranked entries; empty when no trade matches the direction.

    Raises:
        ValueError: If ``n`` or ``cap_per_group`` is smaller than 1.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if cap_per_group < 1:
        raise ValueError(f"cap_per_group must be >= 1, got {cap_per_group}")

    groups = group_by_instrument(r for r in records if r.direction is direction)

    entries = []
    for instrument_id, trades in groups.items():
        prices = sorted(
            (t.price for t in trades), reverse=not rank_ascending
        )
        entries.append(
            BestTrade(
                instrument_id=instrument_id,
                trade_count=len(trades),
                bounded_sum=sum(prices[:cap_per_group], Decimal(0)),
            )
        )

    # Stable sorts: the id order survives as the tie-break.
    entries.sort(key=lambda e: e.instrument_id)
    entries.sort(key=lambda e: e.bounded_sum, reverse=not rank_ascending)
    return entries[:n]


def best_trades(
    records: Iterable[TradeRecord],
    direction: Direction,
    n: int = DEFAULT_TOP_N,
    cap_per_group: int = DEFAULT_CAP_PER_GROUP,
) -> list[BestTrade]:
    """Rank with the direction's natural ordering (BUY low, SELL high)."""
    return top_n(
        records,
        direction,
        n=n,
        cap_per_group=cap_per_group,
        rank_ascending=direction is Direction.BUY,
    )
