"""
Domain entities for the trading bounded context.

Entities represent core business objects.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class Direction(Enum):
    """Trade direction as it appears in the trade list."""

    BUY = "B"
    SELL = "S"

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        """Return the Direction for "B"/"S" or "BUY"/"SELL" (any case).

        Raises:
            ValueError: If the value names no direction.
        """
        if isinstance(value, cls):
            return value
        token = str(value).strip().upper()
        for member in cls:
            if token in (member.value, member.name):
                return member
        raise ValueError(f"Unknown trade direction: {value!r}")


class Operation(Enum):
    """Operation kinds submitted to a transactional sink."""

    INSERT = "insert"


@dataclass(frozen=True)
class TradeRecord:
    """A single trade: direction, instrument (ISIN), quantity and price.

    ``instrument_id`` may be None or empty when the source did not carry
    one; such records are still persisted but never grouped.
    """

    direction: Direction
    instrument_id: Optional[str]
    quantity: Decimal
    price: Decimal

    @classmethod
    def from_fields(
        cls,
        direction: Any,
        instrument_id: Optional[str],
        quantity: Any,
        price: Any,
    ) -> "TradeRecord":
        """Build a record from parsed fields, coercing types only."""
        return cls(
            direction=Direction.parse(direction),
            instrument_id=instrument_id,
            quantity=_to_decimal(quantity),
            price=_to_decimal(price),
        )


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip())


@dataclass(frozen=True)
class Batch:
    """An ordered slice of the record stream, the unit of commitment.

    Attributes:
        index: Position of the batch in the overall partition (0-based).
        records: Records in original relative order.
        transaction_name: Name of the sink transaction used for this batch.
    """

    index: int
    records: tuple[TradeRecord, ...]
    transaction_name: str

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class BestTrade:
    """Aggregate of one instrument's trades within a direction.

    ``trade_count`` is the full group size; ``bounded_sum`` only covers
    the capped, direction-ordered head of the group.
    """

    instrument_id: str
    trade_count: int
    bounded_sum: Decimal

    def render(self) -> str:
        """Return the report line ``<instrument>: <sum>/<count>``."""
        return f"{self.instrument_id}: {self.bounded_sum}/{self.trade_count}"
