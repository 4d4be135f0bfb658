"""
Tests for the trading domain layer.

Tests entities, batching and best-trades aggregation in isolation.
No external dependencies or IO required.
"""

from decimal import Decimal
from itertools import permutations

import pytest

from tradeloader.domain.trading.batching import make_batches, partition
from tradeloader.domain.trading.best_trades import best_trades, group_by_instrument, top_n
from tradeloader.domain.trading.entities import BestTrade, Direction, TradeRecord
from tradeloader.domain.trading.errors import TradeFileFormatError, TransactionStateError


def _trade(direction: str, isin, price, quantity="1") -> TradeRecord:
    return TradeRecord.from_fields(direction, isin, quantity, price)


# =====================================================================
# Entities
# =====================================================================


class TestDirection:
    """Tests for Direction parsing."""

    @pytest.mark.parametrize("raw", ["B", "b", "BUY", " buy "])
    def test_parses_buy_tokens(self, raw) -> None:
        """Buy spellings parse to BUY."""
        assert Direction.parse(raw) is Direction.BUY

    @pytest.mark.parametrize("raw", ["S", "SELL", "sell"])
    def test_parses_sell_tokens(self, raw) -> None:
        """Sell spellings parse to SELL."""
        assert Direction.parse(raw) is Direction.SELL

    def test_unknown_direction_raises(self) -> None:
        """Unknown direction codes raise ValueError."""
        with pytest.raises(ValueError, match="Unknown trade direction"):
            Direction.parse("X")


class TestTradeRecord:
    """Tests for the TradeRecord entity."""

    def test_from_fields_coerces_types(self) -> None:
        """Text fields become Direction and Decimal values."""
        record = TradeRecord.from_fields("S", "CZ0001", "15", "10.25")
        assert record.direction is Direction.SELL
        assert record.instrument_id == "CZ0001"
        assert record.quantity == Decimal("15")
        assert record.price == Decimal("10.25")

    def test_from_fields_keeps_decimal_exact(self) -> None:
        """Decimal parsing keeps every digit."""
        record = TradeRecord.from_fields("B", "X", 1, 0.1)
        assert record.price == Decimal("0.1")

    def test_record_is_immutable(self) -> None:
        """TradeRecord is frozen."""
        record = _trade("B", "X", "1")
        with pytest.raises(AttributeError):
            record.price = Decimal("2")  # type: ignore[misc]

    def test_missing_instrument_is_allowed(self) -> None:
        """instrument_id may be None."""
        record = TradeRecord.from_fields("B", None, "1", "1")
        assert record.instrument_id is None


class TestBestTradeEntity:
    """Tests for the BestTrade entity."""

    def test_render_line(self) -> None:
        """Entries render as id: sum/count."""
        entry = BestTrade(instrument_id="X", trade_count=2, bounded_sum=Decimal("15.50"))
        assert entry.render() == "X: 15.50/2"


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_transaction_state_error_message(self) -> None:
        """The message names the transaction and the action."""
        err = TransactionStateError("no 3", "commit")
        assert "no 3" in err.message
        assert err.action == "commit"

    def test_trade_file_format_error_message(self) -> None:
        """The message names the file and the reason."""
        err = TradeFileFormatError("trades.xml", "bad price")
        assert "trades.xml" in str(err)
        assert err.reason == "bad price"


# =====================================================================
# Batching
# =====================================================================


class TestPartition:
    """Tests for fixed-size partitioning."""

    @pytest.mark.parametrize(
        "length,size,expected_sizes",
        [
            (21, 9, [9, 9, 3]),
            (18, 9, [9, 9]),
            (5, 1, [1, 1, 1, 1, 1]),
            (3, 10, [3]),
            (0, 4, []),
        ],
    )
    def test_batch_sizes(self, length, size, expected_sizes) -> None:
        """Batches are full except possibly the last."""
        records = [_trade("B", f"I{i}", i) for i in range(length)]
        batches = list(partition(records, size))
        assert [len(b) for b in batches] == expected_sizes

    def test_concatenation_reproduces_input_order(self) -> None:
        """Concatenated batches equal the input."""
        records = [_trade("B", f"I{i}", i) for i in range(23)]
        batches = list(partition(records, 5))
        assert [r for b in batches for r in b] == records

    def test_is_lazy_over_generators(self) -> None:
        """Partitioning does not exhaust the source up front."""
        consumed = []

        def source():
            for i in range(100):
                consumed.append(i)
                yield _trade("B", "X", i)

        first = next(partition(source(), 10))
        assert len(first) == 10
        assert len(consumed) == 10

    @pytest.mark.parametrize("size", [0, -3])
    def test_rejects_non_positive_size(self, size) -> None:
        """Sizes below 1 raise ValueError."""
        with pytest.raises(ValueError, match="Batch size"):
            partition([], size)


class TestMakeBatches:
    """Tests for indexed batches."""

    def test_indices_and_default_names(self) -> None:
        """Batches are numbered from 0 and named "no N"."""
        records = [_trade("S", "X", i) for i in range(7)]
        batches = list(make_batches(records, 3))
        assert [b.index for b in batches] == [0, 1, 2]
        assert [b.transaction_name for b in batches] == ["no 0", "no 1", "no 2"]
        assert len(batches[-1]) == 1

    def test_custom_name_template(self) -> None:
        """The name template receives the batch index."""
        batches = list(make_batches([_trade("S", "X", 1)], 5, "trades-{index:03d}"))
        assert batches[0].transaction_name == "trades-000"


# =====================================================================
# Best trades
# =====================================================================


class TestGroupByInstrument:
    """Tests for the instrument grouping helper."""

    def test_groups_preserve_record_order(self) -> None:
        """Each group keeps the input order."""
        a1, b1, a2 = _trade("B", "A", 1), _trade("B", "B", 2), _trade("B", "A", 3)
        groups = group_by_instrument([a1, b1, a2])
        assert groups == {"A": [a1, a2], "B": [b1]}

    def test_records_without_key_are_excluded(self) -> None:
        """Records with no instrument id are skipped."""
        groups = group_by_instrument(
            [_trade("B", None, 1), _trade("B", "", 2), _trade("B", "A", 3)]
        )
        assert list(groups) == ["A"]


class TestTopN:
    """Tests for the top-N aggregation."""

    def test_reference_example_ascending(self) -> None:
        """Buys rank lowest bounded sum first."""
        records = [_trade("B", "X", 10), _trade("B", "X", 5), _trade("B", "Y", 7)]
        result = top_n(records, Direction.BUY, n=3, cap_per_group=10, rank_ascending=True)
        assert result == [
            BestTrade("Y", 1, Decimal("7")),
            BestTrade("X", 2, Decimal("15")),
        ]

    def test_capped_sum_uses_smallest_prices_for_buys(self) -> None:
        """Buy sums use the cheapest prices up to the cap."""
        records = [_trade("B", "X", p) for p in range(15, 0, -1)]
        (entry,) = top_n(records, Direction.BUY, cap_per_group=10, rank_ascending=True)
        assert entry.bounded_sum == Decimal(55)
        assert entry.trade_count == 15

    def test_capped_sum_uses_largest_prices_for_sells(self) -> None:
        """Sell sums use the highest prices up to the cap."""
        records = [_trade("S", "X", p) for p in range(1, 16)]
        (entry,) = top_n(records, Direction.SELL, cap_per_group=10, rank_ascending=False)
        assert entry.bounded_sum == Decimal(sum(range(6, 16)))
        assert entry.trade_count == 15

    def test_small_group_sums_everything(self) -> None:
        """Groups under the cap sum all prices."""
        records = [_trade("B", "X", "1.5"), _trade("B", "X", "2.25")]
        (entry,) = top_n(records, Direction.BUY, cap_per_group=10)
        assert entry.bounded_sum == Decimal("3.75")

    def test_other_direction_is_ignored(self) -> None:
        """Trades in the other direction do not count."""
        records = [_trade("S", "X", 1), _trade("B", "Y", 2)]
        result = top_n(records, Direction.BUY)
        assert [e.instrument_id for e in result] == ["Y"]

    def test_no_matching_records_returns_empty(self) -> None:
        """No matching trades give an empty ranking."""
        assert top_n([_trade("S", "X", 1)], Direction.BUY) == []
        assert top_n([], Direction.SELL, rank_ascending=False) == []

    def test_limits_to_n_entries(self) -> None:
        """At most n entries are returned."""
        records = [_trade("S", f"I{i}", i) for i in range(1, 8)]
        result = top_n(records, Direction.SELL, n=3, rank_ascending=False)
        assert [e.instrument_id for e in result] == ["I7", "I6", "I5"]

    def test_ties_break_by_instrument_id(self) -> None:
        """Equal sums order by instrument id."""
        base = [_trade("B", "C", 5), _trade("B", "A", 5), _trade("B", "B", 5)]
        for ordering in permutations(base):
            asc = top_n(list(ordering), Direction.BUY, rank_ascending=True)
            assert [e.instrument_id for e in asc] == ["A", "B", "C"]

    def test_ties_break_by_instrument_id_when_descending(self) -> None:
        """Equal sums order by instrument id for sells too."""
        records = [
            _trade("S", "Z", 9),
            _trade("S", "M", 4),
            _trade("S", "K", 4),
            _trade("S", "Q", 1),
        ]
        result = top_n(records, Direction.SELL, n=4, rank_ascending=False)
        assert [e.instrument_id for e in result] == ["Z", "K", "M", "Q"]

    @pytest.mark.parametrize("n,cap", [(0, 10), (3, 0)])
    def test_rejects_non_positive_limits(self, n, cap) -> None:
        """n and cap must be at least 1."""
        with pytest.raises(ValueError):
            top_n([], Direction.BUY, n=n, cap_per_group=cap)


class TestBestTrades:
    """Tests for the direction-aware wrapper."""

    def test_buys_rank_from_lowest(self) -> None:
        """best_trades ranks buys ascending."""
        records = [_trade("B", "CHEAP", 1), _trade("B", "DEAR", 100)]
        assert best_trades(records, Direction.BUY)[0].instrument_id == "CHEAP"

    def test_sells_rank_from_highest(self) -> None:
        """best_trades ranks sells descending."""
        records = [_trade("S", "CHEAP", 1), _trade("S", "DEAR", 100)]
        assert best_trades(records, Direction.SELL)[0].instrument_id == "DEAR"
