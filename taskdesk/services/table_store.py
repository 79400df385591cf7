# taskdesk/services/table_store.py
"""
Table store used by the request handlers.

Handlers only need four operations on two tables: select, insert, update and
delete, each driven by a filter mapping ``{column: value}``. A list, tuple or
set value means ``column IN (...)`` and ``None`` means ``column IS NULL``.
Rows go in and come out as plain dicts.

``SqlTableStore`` is the SQLAlchemy-backed implementation. Anything that
satisfies ``TableStore`` can be injected instead (see ``get_store``).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from taskdesk.database import Base, SessionLocal
from taskdesk.models import new_id

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Filters = Mapping[str, Any]


class StoreError(Exception):
    """The backing store is unreachable or rejected a query"""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table = table


class TableStore(Protocol):
    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        columns: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Row]: ...

    def insert(self, table: str, values: Mapping[str, Any]) -> Row: ...

    def update(self, table: str, values: Mapping[str, Any], filters: Filters) -> List[Row]: ...

    def delete(self, table: str, filters: Filters) -> int: ...


class SqlTableStore:
    """TableStore over any SQLAlchemy engine (PostgreSQL in production, SQLite in tests)"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table '{name}'", table=name)
        return table

    def _where(self, table: Table, filters: Optional[Filters]):
        clauses = []
        for column_name, value in (filters or {}).items():
            if column_name not in table.c:
                raise StoreError(f"Unknown column '{column_name}' on table '{table.name}'", table=table.name)
            column = table.c[column_name]
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        return clauses

    def select(self, table, filters=None, columns=None, limit=None):
        tbl = self._table(table)
        if columns:
            unknown = [c for c in columns if c not in tbl.c]
            if unknown:
                raise StoreError(f"Unknown column '{unknown[0]}' on table '{table}'", table=table)
            stmt = select(*[tbl.c[c] for c in columns])
        else:
            stmt = select(tbl)
        stmt = stmt.where(*self._where(tbl, filters))
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            with self.session_factory() as db:
                return [dict(row._mapping) for row in db.execute(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Select on {table} failed: {e}")
            raise StoreError(str(e.__cause__ or e), table=table) from e

    def insert(self, table, values):
        tbl = self._table(table)
        row = dict(values)
        # Generate the primary key client side so the row can be read back
        # without relying on RETURNING support.
        pk = tbl.c.id
        if row.get("id") is None:
            row["id"] = new_id()

        try:
            with self.session_factory() as db:
                db.execute(insert(tbl).values(**row))
                db.commit()
                created = db.execute(select(tbl).where(pk == row["id"])).first()
        except SQLAlchemyError as e:
            logger.error(f"Insert into {table} failed: {e}")
            raise StoreError(str(e.__cause__ or e), table=table) from e

        return dict(created._mapping)

    def update(self, table, values, filters):
        tbl = self._table(table)
        where = self._where(tbl, filters)

        try:
            with self.session_factory() as db:
                ids = [r.id for r in db.execute(select(tbl.c.id).where(*where))]
                if not ids:
                    return []
                db.execute(update(tbl).where(tbl.c.id.in_(ids)).values(**dict(values)))
                db.commit()
                return [dict(r._mapping) for r in db.execute(select(tbl).where(tbl.c.id.in_(ids)))]
        except SQLAlchemyError as e:
            logger.error(f"Update on {table} failed: {e}")
            raise StoreError(str(e.__cause__ or e), table=table) from e

    def delete(self, table, filters):
        tbl = self._table(table)
        if not filters:
            raise StoreError(f"Refusing to delete from '{table}' without a filter", table=table)

        try:
            with self.session_factory() as db:
                result = db.execute(delete(tbl).where(*self._where(tbl, filters)))
                db.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Delete on {table} failed: {e}")
            raise StoreError(str(e.__cause__ or e), table=table) from e


def get_store() -> TableStore:
    """FastAPI dependency; tests override it with a store on their own engine"""
    return SqlTableStore(SessionLocal)
