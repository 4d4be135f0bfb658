"""
Use case: Rank the best trades of one direction.

Input:  RankBestTradesQuery (records, direction, top_n, cap_per_group)
Output: list[BestTradeResult]
Side effects: None (read-only query).
"""

import logging

from tradeloader.application.trading.dtos import BestTradeResult, RankBestTradesQuery
from tradeloader.domain.trading.best_trades import best_trades

logger = logging.getLogger(__name__)


class RankBestTradesUseCase:
    """Builds the best-trades report for a direction.

    BUYs rank from the lowest prices, SELLs from the highest.
    """

    def execute(self, query: RankBestTradesQuery) -> list[BestTradeResult]:
        logger.debug(
            "Ranking best trades: direction=%s, top_n=%d, cap=%d",
            query.direction.name,
            query.top_n,
            query.cap_per_group,
        )

        entries = best_trades(
            query.records,
            query.direction,
            n=query.top_n,
            cap_per_group=query.cap_per_group,
        )

        return [
            BestTradeResult(
                rank=rank,
                instrument_id=entry.instrument_id,
                trade_count=entry.trade_count,
                bounded_sum=entry.bounded_sum,
            )
            for rank, entry in enumerate(entries, start=1)
        ]
