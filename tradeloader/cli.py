"""
CLI entry point for tradeloader.

Usage:
    # Write a synthetic trade list
    python -m tradeloader.cli generate --count 1000 --seed 7

    # Persist a trade list in retrying batches
    python -m tradeloader.cli load --batch-size 21 --max-retries 3

    # Print the best BUYs and SELLs
    python -m tradeloader.cli report --top-n 3

    # Generate, load and report in one go, timing each phase
    python -m tradeloader.cli run --failure-rate 0.01
"""

import argparse
import logging
import sys
from typing import Optional

from tradeloader.application.trading.dtos import PersistTradesCommand, RankBestTradesQuery
from tradeloader.core.config import settings
from tradeloader.domain.trading.entities import Direction, TradeRecord
from tradeloader.domain.trading.errors import TradingDomainError
from tradeloader.interfaces.trading.dependencies import (
    build_sink,
    get_persist_trades_use_case,
    get_rank_best_trades_use_case,
    get_trade_generator,
    get_trade_reader,
)
from tradeloader.shared.logging import configure_logging, log_elapsed

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNCOMPLETED = 2

REPORT_TITLES = {
    Direction.BUY: "Best BUYS / from lower",
    Direction.SELL: "Best SELLS / from higher",
}


def _read_records(path: str) -> tuple[TradeRecord, ...]:
    with log_elapsed(f"Reading {path}"):
        return tuple(get_trade_reader(path).read_all())


def _generate(args: argparse.Namespace) -> None:
    with log_elapsed(f"Creating test file of {args.count}"):
        get_trade_generator(seed=args.seed).write(args.path, args.count)


def _persist(args: argparse.Namespace, records: tuple[TradeRecord, ...]) -> int:
    sink = build_sink(
        args.database_url,
        dry_run=args.dry_run,
        failure_rate=args.failure_rate,
        failure_seed=args.failure_seed,
    )
    command = PersistTradesCommand(
        records=records,
        batch_size=args.batch_size,
        max_retries=args.max_retries,
        transaction_name_template=settings.transaction_name_template,
    )
    try:
        with log_elapsed("Persisting trades"):
            result = get_persist_trades_use_case(sink).execute(command)
    finally:
        sink.close()

    logger.info(
        "Batches=%d committed=%d retries=%d uncompleted=%s",
        result.total_batches,
        result.committed_batches,
        result.total_retries,
        result.uncompleted_batch_indices,
    )
    return EXIT_OK if result.all_committed else EXIT_UNCOMPLETED


def _report(args: argparse.Namespace, records: tuple[TradeRecord, ...]) -> None:
    use_case = get_rank_best_trades_use_case()
    for direction in (Direction.BUY, Direction.SELL):
        title = REPORT_TITLES[direction]
        with log_elapsed(title):
            results = use_case.execute(
                RankBestTradesQuery(
                    records=records,
                    direction=direction,
                    top_n=args.top_n,
                    cap_per_group=args.cap,
                )
            )
        print(title)
        if not results:
            logger.warning("No %s trades to rank.", direction.name)
        for r in results:
            print(r.render())


def cmd_generate(args: argparse.Namespace) -> int:
    """Write a synthetic trade list."""
    _generate(args)
    return EXIT_OK


def cmd_load(args: argparse.Namespace) -> int:
    """Persist a trade list."""
    return _persist(args, _read_records(args.path))


def cmd_report(args: argparse.Namespace) -> int:
    """Print the best-trades report."""
    _report(args, _read_records(args.path))
    return EXIT_OK


def cmd_run(args: argparse.Namespace) -> int:
    """Generate (optionally), persist and report."""
    if not args.no_generate:
        _generate(args)
    records = _read_records(args.path)
    status = _persist(args, records)
    _report(args, records)
    return status


def _add_path(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--path", default=settings.trades_file,
        help=f"Trade-list XML file (default {settings.trades_file})",
    )


def _add_generate_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--count", type=int, default=settings.number_of_trades,
        help=f"Number of trades to generate (default {settings.number_of_trades})",
    )
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")


def _add_load_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--batch-size", type=int, default=settings.batch_size, dest="batch_size",
        help=f"Trades per transaction (default {settings.batch_size})",
    )
    parser.add_argument(
        "--max-retries", type=int, default=settings.max_retries, dest="max_retries",
        help=f"Failed attempts per batch before abandoning it (default {settings.max_retries})",
    )
    parser.add_argument(
        "--database-url", default=settings.database_url, dest="database_url",
        help="SQLAlchemy database URL",
    )
    parser.add_argument(
        "--dry-run", action="store_true", dest="dry_run",
        help="Use an in-memory sink instead of the database",
    )
    parser.add_argument(
        "--failure-rate", type=float, default=settings.failure_rate, dest="failure_rate",
        help="Probability that a sink operation fails (fault injection)",
    )
    parser.add_argument(
        "--failure-seed", type=int, default=settings.failure_seed, dest="failure_seed",
        help="RNG seed for fault injection",
    )


def _add_report_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--top-n", type=int, default=settings.top_n, dest="top_n",
        help=f"Instruments per direction (default {settings.top_n})",
    )
    parser.add_argument(
        "--cap", type=int, default=settings.cap_per_group,
        help=f"Prices summed per instrument (default {settings.cap_per_group})",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradeloader",
        description=f"{settings.project_name}: batched trade loading and best-trades report",
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, dest="log_level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Generate
    gen_parser = subparsers.add_parser("generate", help="Write a synthetic trade list")
    _add_path(gen_parser)
    _add_generate_args(gen_parser)
    gen_parser.set_defaults(func=cmd_generate)

    # Load
    load_parser = subparsers.add_parser("load", help="Persist a trade list")
    _add_path(load_parser)
    _add_load_args(load_parser)
    load_parser.set_defaults(func=cmd_load)

    # Report
    report_parser = subparsers.add_parser("report", help="Print best BUYs and SELLs")
    _add_path(report_parser)
    _add_report_args(report_parser)
    report_parser.set_defaults(func=cmd_report)

    # Run
    run_parser = subparsers.add_parser("run", help="Generate, load and report")
    _add_path(run_parser)
    _add_generate_args(run_parser)
    _add_load_args(run_parser)
    _add_report_args(run_parser)
    run_parser.add_argument(
        "--no-generate", action="store_true", dest="no_generate",
        help="Use the existing trade list instead of generating one",
    )
    run_parser.set_defaults(func=cmd_run)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except TradingDomainError as exc:
        logger.error("%s", exc.message)
        return EXIT_ERROR
    except ValueError as exc:
        logger.error("Invalid argument: %s", exc)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
