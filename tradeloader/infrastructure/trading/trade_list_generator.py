"""
Adapter: Synthetic trade-list generator.

Writes a ``TradesList`` XML document with random trades, used to feed
the loader during development and load tests.

ISINs are drawn from a small pool so that every instrument collects
enough trades for the bounded sums in the report to be meaningful.
"""

import logging
import random
import string
import xml.etree.ElementTree as ET
from decimal import Decimal
from pathlib import Path
from typing import Optional

from tradeloader.domain.trading.entities import Direction
from tradeloader.infrastructure.trading.xml_trade_reader import TRADES_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_INSTRUMENT_COUNT = 25


def _make_isin(rng: random.Random) -> str:
    """Return an ISIN-shaped identifier: country code + 9 chars + check digit."""
    country = rng.choice(("CZ", "SK", "AT", "DE", "US"))
    body = "".join(rng.choices(string.ascii_uppercase + string.digits, k=9))
    return f"{country}{body}{rng.randint(0, 9)}"


class TradeListGenerator:
    """Generates random trade lists.

    Args:
        seed: Optional RNG seed for reproducible files.
        instrument_count: Size of the ISIN pool.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        instrument_count: int = DEFAULT_INSTRUMENT_COUNT,
    ) -> None:
        if instrument_count < 1:
            raise ValueError(f"instrument_count must be >= 1, got {instrument_count}")
        self._rng = random.Random(seed)
        self._isins = [_make_isin(self._rng) for _ in range(instrument_count)]

    def build_document(self, count: int) -> ET.ElementTree:
        """Build an XML tree holding ``count`` trades."""
        ET.register_namespace("", TRADES_NAMESPACE)
        root = ET.Element(f"{{{TRADES_NAMESPACE}}}TradesList")
        for _ in range(count):
            trade = ET.SubElement(root, f"{{{TRADES_NAMESPACE}}}Trade")
            for name, value in self._random_trade_fields():
                ET.SubElement(trade, f"{{{TRADES_NAMESPACE}}}{name}").text = value
        return ET.ElementTree(root)

    def write(self, path: Path, count: int) -> Path:
        """Write ``count`` random trades to ``path`` and return the path."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.build_document(count).write(path, encoding="utf-8", xml_declaration=True)
        logger.info("Wrote %d trades to %s", count, path)
        return path

    def _random_trade_fields(self) -> list[tuple[str, str]]:
        rng = self._rng
        direction = rng.choice((Direction.BUY, Direction.SELL))
        quantity = rng.randint(1, 1000)
        price = Decimal(rng.randint(100, 100_000)) / 100
        return [
            ("Direction", direction.value),
            ("ISIN", rng.choice(self._isins)),
            ("Quantity", str(quantity)),
            ("Price", str(price)),
        ]
