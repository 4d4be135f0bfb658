"""
Adapter: SQLAlchemy trade sink.

Implements the TransactionalSink port on top of a SQLAlchemy engine.
Each named transaction owns one connection for its lifetime; the
connection is released on commit or rollback.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table, create_engine, text
from sqlalchemy.engine import Connection, Engine, Transaction
from sqlalchemy.exc import SQLAlchemyError

from tradeloader.domain.trading.entities import Operation
from tradeloader.domain.trading.errors import SinkError, TransactionStateError
from tradeloader.domain.trading.ports import TransactionalSink

logger = logging.getLogger(__name__)

metadata = MetaData()

trades_table = Table(
    "trades",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("isin", String(12)),
    Column("quantity", Numeric(18, 4), nullable=False),
    Column("price", Numeric(18, 4), nullable=False),
    Column("direction", String(1), nullable=False),
)


def _bind_value(value: Any) -> Any:
    """Convert values the DBAPI may not accept (Decimal on SQLite)."""
    if isinstance(value, Decimal):
        return str(value)
    return value


class SqlAlchemyTradeSink(TransactionalSink):
    """Transactional sink writing to any SQLAlchemy-supported database.

    Usage:
        sink = SqlAlchemyTradeSink.from_url("sqlite:///trades.db")
        sink.ensure_schema()
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._name: Optional[str] = None
        self._conn: Optional[Connection] = None
        self._tx: Optional[Transaction] = None

    @classmethod
    def from_url(cls, url: str) -> "SqlAlchemyTradeSink":
        """Build a sink from a database URL.

        Raises:
            SinkError: If the URL is malformed or names an unknown dialect.
        """
        try:
            engine = create_engine(url, pool_pre_ping=True)
        except SQLAlchemyError as exc:
            raise SinkError(f"Cannot create engine for {url}: {exc}") from exc
        return cls(engine)

    def ensure_schema(self) -> None:
        """Create the trades table if it does not exist.

        Raises:
            SinkError: If the database cannot be reached.
        """
        try:
            metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise SinkError(f"Cannot prepare schema on {self._engine.url}: {exc}") from exc
        logger.debug("Trades table ensured on %s", self._engine.url)

    def begin_transaction(self, name: str) -> None:
        if self._tx is not None:
            raise SinkError(
                f"Cannot begin '{name}': transaction '{self._name}' is still open"
            )
        conn = self._engine.connect()
        try:
            self._tx = conn.begin()
        except Exception:
            conn.close()
            raise
        self._conn = conn
        self._name = name

    def process(self, operation: Operation, statement: str, *parameters: Any) -> None:
        if operation is not Operation.INSERT:
            raise SinkError(f"Unsupported operation: {operation}")
        if self._conn is None:
            raise TransactionStateError(str(self._name), "process")
        binds = {f"p{i}": _bind_value(v) for i, v in enumerate(parameters, start=1)}
        self._conn.execute(text(statement), binds)

    def commit_transaction(self, name: str) -> None:
        if self._tx is None or self._name != name:
            raise TransactionStateError(name, "commit")
        self._tx.commit()
        self._release()

    def rollback_transaction(self, name: str) -> None:
        if self._tx is None or self._name != name:
            return
        try:
            self._tx.rollback()
        finally:
            self._release()

    def count_rows(self) -> int:
        """Return the number of persisted trades."""
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM trades")).scalar_one()

    def close(self) -> None:
        """Roll back anything still open and dispose the engine pool."""
        if self._name is not None:
            self.rollback_transaction(self._name)
        self._engine.dispose()

    def _release(self) -> None:
        if self._conn is not None:
            self._conn.close()
        self._conn = None
        self._tx = None
        self._name = None
