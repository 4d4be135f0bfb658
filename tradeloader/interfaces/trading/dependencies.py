"""
Dependency wiring for the trading bounded context.

Builds infrastructure adapters and injects them into use cases.
This is the composition root for the CLI.
"""

from pathlib import Path
from typing import Optional

from tradeloader.application.trading.persist_trades import PersistTradesUseCase
from tradeloader.application.trading.rank_best_trades import RankBestTradesUseCase
from tradeloader.domain.trading.errors import SinkError
from tradeloader.domain.trading.ports import TransactionalSink
from tradeloader.infrastructure.trading.fault_injecting_sink import FaultInjectingSink
from tradeloader.infrastructure.trading.memory_sink import InMemoryTradeSink
from tradeloader.infrastructure.trading.sqlalchemy_sink import SqlAlchemyTradeSink
from tradeloader.infrastructure.trading.trade_list_generator import TradeListGenerator
from tradeloader.infrastructure.trading.xml_trade_reader import XmlTradeListReader


def build_sink(
    database_url: str,
    dry_run: bool = False,
    failure_rate: float = 0.0,
    failure_seed: Optional[int] = None,
) -> TransactionalSink:
    """Build the trade sink, wrapped in fault injection when requested."""
    if dry_run:
        sink: TransactionalSink = InMemoryTradeSink()
    else:
        sql_sink = SqlAlchemyTradeSink.from_url(database_url)
        try:
            sql_sink.ensure_schema()
        except SinkError:
            sql_sink.close()
            raise
        sink = sql_sink

    if failure_rate > 0:
        return FaultInjectingSink(sink, failure_rate=failure_rate, seed=failure_seed)
    return sink


def get_trade_reader(path: str | Path) -> XmlTradeListReader:
    """Build the reader for a trade-list file."""
    return XmlTradeListReader(Path(path))


def get_trade_generator(seed: Optional[int] = None) -> TradeListGenerator:
    """Build the synthetic trade-list generator."""
    return TradeListGenerator(seed=seed)


def get_persist_trades_use_case(sink: TransactionalSink) -> PersistTradesUseCase:
    """Build PersistTradesUseCase with its sink."""
    return PersistTradesUseCase(sink=sink)


def get_rank_best_trades_use_case() -> RankBestTradesUseCase:
    """Build RankBestTradesUseCase."""
    return RankBestTradesUseCase()
