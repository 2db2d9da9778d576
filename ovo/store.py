"""
Ordered key-value store on top of a single SQLite file.

All values live in one ``entries`` table keyed by a TEXT primary key.  The
store exposes the small surface the comment repository needs:

- ``update()`` / ``view()`` open a write or read transaction,
- ``Transaction.set`` upserts one key,
- ``Transaction.ascend_keys`` walks the keys matching a glob pattern in
  ascending order and lets the visitor stop early.

pysqlite (and therefore aiosqlite) does not emit ``BEGIN`` before a
``SELECT``, so a run of reads would not share a snapshot.  Following the
SQLAlchemy recipe for SQLite transactions, the driver's own transaction
handling is switched off on connect and ``BEGIN`` is issued on every
SQLAlchemy-level begin instead.  WAL journaling lets readers proceed while
a single writer commits.
"""
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from sqlalchemy import event, func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from ovo.keys import literal_prefix
from ovo.middleware import install_query_counter
from ovo.models import Base, Entry

logger = logging.getLogger(__name__)

Visitor = Callable[[str, str], bool]


class StoreError(Exception):
    """The storage engine failed, or the store was used while closed."""


def _install_transaction_hooks(engine: AsyncEngine) -> None:
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def _matching(pattern: str):
    # The range condition lets SQLite seek to the literal prefix before
    # GLOB filters the remainder.
    return (Entry.key >= literal_prefix(pattern), Entry.key.op("GLOB")(pattern))


class Transaction:
    """A read or write transaction handed out by ``Store.update``/``Store.view``."""

    def __init__(self, conn: AsyncConnection, writable: bool) -> None:
        self._conn = conn
        self.writable = writable

    async def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any existing value."""
        if not self.writable:
            raise StoreError("set() called inside a read-only transaction")
        stmt = insert(Entry).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Entry.key],
            set_={"value": stmt.excluded.value},
        )
        await self._conn.execute(stmt)

    async def get(self, key: str) -> str | None:
        result = await self._conn.execute(select(Entry.value).where(Entry.key == key))
        return result.scalar_one_or_none()

    async def ascend_keys(self, pattern: str, visitor: Visitor) -> None:
        """
        Call ``visitor(key, value)`` for every key matching *pattern*, in
        ascending key order.  Iteration stops as soon as the visitor returns
        a falsy value.
        """
        q = select(Entry.key, Entry.value).where(*_matching(pattern)).order_by(Entry.key)
        result = await self._conn.execute(q)
        for key, value in result:
            if not visitor(key, value):
                break

    async def count(self, pattern: str) -> int:
        q = select(func.count()).select_from(Entry).where(*_matching(pattern))
        return (await self._conn.execute(q)).scalar_one()


class Store:
    """
    Owner of the engine behind the comment keyspace.

    Constructed once per process and opened/closed explicitly (the FastAPI
    lifespan does both); tests build their own instance against a temporary
    file.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Create the engine and the ``entries`` table if it is missing."""
        if self._engine is not None:
            return
        engine = create_async_engine(self.url, echo=self.echo)
        _install_transaction_hooks(engine)
        install_query_counter(engine)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            await engine.dispose()
            logger.error("Store open failed for %s: %s", self.url, exc)
            raise StoreError(f"cannot open store at {self.url}") from exc
        self._engine = engine
        logger.info("Store opened: %s", self.url)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Store closed: %s", self.url)

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def update(self) -> AsyncIterator[Transaction]:
        """Yield a writable transaction, committed when the block exits cleanly."""
        async with self._transaction(writable=True) as tx:
            yield tx

    @asynccontextmanager
    async def view(self) -> AsyncIterator[Transaction]:
        """Yield a read-only transaction; every scan in it sees one snapshot."""
        async with self._transaction(writable=False) as tx:
            yield tx

    @asynccontextmanager
    async def _transaction(self, writable: bool) -> AsyncIterator[Transaction]:
        if self._engine is None:
            raise StoreError("store is not open")
        try:
            async with self._engine.begin() as conn:
                yield Transaction(conn, writable)
        except SQLAlchemyError as exc:
            logger.error("Store %s transaction failed: %s", "update" if writable else "view", exc)
            raise StoreError(str(exc)) from exc
