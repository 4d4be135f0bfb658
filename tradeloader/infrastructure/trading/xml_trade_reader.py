"""
Adapter: XML trade-list reader.

Parses the ``TradesList`` document into TradeRecord entities.

Format (namespace ``http://www.cts-tradeit.com``):

    <TradesList xmlns="http://www.cts-tradeit.com">
      <Trade>
        <Direction>B</Direction>
        <ISIN>CZ0003512345</ISIN>
        <Quantity>120</Quantity>
        <Price>10.25</Price>
      </Trade>
      ...
    </TradesList>

A missing ``ISIN`` is tolerated (the record is kept with no instrument id);
a missing or unreadable direction, quantity or price is not. NaN and
Infinity are rejected as unreadable numbers.
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from decimal import InvalidOperation
from pathlib import Path
from typing import Optional

from tradeloader.domain.trading.entities import TradeRecord
from tradeloader.domain.trading.errors import TradeFileFormatError

logger = logging.getLogger(__name__)

TRADES_NAMESPACE = "http://www.cts-tradeit.com"


def _tag(name: str) -> str:
    return f"{{{TRADES_NAMESPACE}}}{name}"


ROOT_TAG = _tag("TradesList")
TRADE_TAG = _tag("Trade")


class XmlTradeListReader:
    """Streams trade records out of a TradesList XML file.

    Usage:
        reader = XmlTradeListReader(Path("TradesList.xml"))
        for record in reader.iter_records():
            ...
        records = reader.read_all()
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def iter_records(self) -> Iterator[TradeRecord]:
        """Yield records in document order without loading the whole tree.

        Raises:
            TradeFileFormatError: On malformed XML or unreadable trade fields.
        """
        root: Optional[ET.Element] = None
        depth = 0
        try:
            for event, element in ET.iterparse(self._path, events=("start", "end")):
                if event == "start":
                    if root is None:
                        if element.tag != ROOT_TAG:
                            raise TradeFileFormatError(
                                str(self._path), f"unexpected root element {element.tag}"
                            )
                        root = element
                    depth += 1
                    continue
                depth -= 1
                if element.tag == TRADE_TAG:
                    yield self._to_record(element)
                    element.clear()
                    # Detach parsed trades so the root does not grow with the file.
                    if depth == 1:
                        root.remove(element)
        except ET.ParseError as exc:
            raise TradeFileFormatError(str(self._path), str(exc)) from exc
        except OSError as exc:
            raise TradeFileFormatError(str(self._path), exc.strerror or str(exc)) from exc

    def read_all(self) -> list[TradeRecord]:
        """Materialize every record once."""
        records = list(self.iter_records())
        logger.info("Read %d trades from %s", len(records), self._path)
        return records

    def _to_record(self, element: ET.Element) -> TradeRecord:
        direction = _child_text(element, "Direction")
        quantity = _child_text(element, "Quantity")
        price = _child_text(element, "Price")
        if direction is None or quantity is None or price is None:
            raise TradeFileFormatError(
                str(self._path), "trade is missing Direction, Quantity or Price"
            )
        try:
            record = TradeRecord.from_fields(
                direction=direction,
                instrument_id=_child_text(element, "ISIN"),
                quantity=quantity,
                price=price,
            )
        except (ValueError, InvalidOperation) as exc:
            raise TradeFileFormatError(str(self._path), str(exc)) from exc
        if not record.quantity.is_finite() or not record.price.is_finite():
            raise TradeFileFormatError(
                str(self._path),
                f"non-finite quantity or price ({quantity}, {price})",
            )
        return record


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = element.find(_tag(name))
    if child is None:
        return None
    return (child.text or "").strip()
