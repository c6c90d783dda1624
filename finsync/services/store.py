"""Relational store handle: keyed upserts and remote procedure calls.

Every upsert call runs in its own transaction so one failed batch never rolls
back rows that were already written. Large batches are split into several
statements inside that transaction to stay under PostgreSQL's bind-parameter
limit. Remote procedures are plain PostgreSQL functions invoked as
``SELECT * FROM name(...)``.
"""

import logging
import re
from collections.abc import Iterator, Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from finsync.core.database import Base

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# PostgreSQL wire protocol: at most 32767 bind parameters per statement
MAX_BIND_PARAMS = 32767


def build_upsert(model: type[Base], rows: list[dict], conflict: Sequence[str]):
    """INSERT ... ON CONFLICT (conflict) DO UPDATE every other column from EXCLUDED."""
    table = model.__table__
    stmt = insert(table).values(rows)
    return stmt.on_conflict_do_update(
        index_elements=list(conflict),
        set_={
            col.name: stmt.excluded[col.name]
            for col in table.columns
            if col.name not in conflict
        },
    )


def dedupe_rows(rows: list[dict], conflict: Sequence[str]) -> list[dict]:
    """Keep the last row per conflict key.

    ON CONFLICT DO UPDATE rejects a statement that touches the same row twice.
    """
    latest: dict[tuple, dict] = {}
    for row in rows:
        latest[tuple(row.get(c) for c in conflict)] = row
    return list(latest.values())


def upsert_batches(model: type[Base], rows: list[dict]) -> Iterator[list[dict]]:
    """Split ``rows`` so no single upsert exceeds MAX_BIND_PARAMS."""
    size = max(1, MAX_BIND_PARAMS // len(model.__table__.columns))
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def build_rpc(name: str, params: dict[str, Any]):
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid procedure name: {name!r}")
    args = ", ".join(f"{key} => :{key}" for key in params)
    return text(f"SELECT * FROM {name}({args})").bindparams(**params)


class Store:
    """Per-invocation handle to the PostgreSQL store."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str) -> "Store":
        return cls(create_async_engine(url, pool_pre_ping=True))

    async def upsert(
        self,
        model: type[Base],
        rows: list[dict],
        conflict: Sequence[str] = ("id",),
    ) -> int:
        """Insert-or-update ``rows`` keyed by ``conflict``. Returns rows sent.

        All batches share one transaction, so the call is all-or-nothing.
        """
        if not rows:
            return 0
        rows = dedupe_rows(rows, conflict)
        async with self._sessionmaker() as session, session.begin():
            for batch in upsert_batches(model, rows):
                await session.execute(build_upsert(model, batch, conflict))
        logger.debug("Upserted %d row(s) into %s", len(rows), model.__tablename__)
        return len(rows)

    async def rpc(self, name: str, **params: Any) -> list[dict]:
        """Call a stored procedure and return its rows as plain dicts."""
        stmt = build_rpc(name, params)
        async with self._sessionmaker() as session, session.begin():
            result = await session.execute(stmt)
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings().all()]

    async def close(self) -> None:
        await self._engine.dispose()
