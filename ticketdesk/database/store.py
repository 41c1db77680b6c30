"""
Generic relational store boundary over SQLAlchemy Core.

The repositories never build SQL themselves; they call the four table
operations exposed here (plus ``count``), each of which returns a
``StoreResult`` carrying either rows or a classified ``StoreFailure``:

    store.select('customers', ordering=[Order('company_name')])
    store.insert('customers', {'company_name': 'Acme Air'})
    store.update('customers', {'company_name': 'Acme'}, match_id=customer_id)
    store.delete('customers', match_id=customer_id)

Constraint violations come back as data, never as exceptions. Foreign key
violations are classified as ``REFERENTIAL_INTEGRITY_VIOLATION`` with code
23503 whatever the backend. Only a lost connection propagates.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Union

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from ..models.enums import ErrorKind
from ..models.errors import (
    FOREIGN_KEY_VIOLATION,
    NOT_FOUND_CODE,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    NotFoundError,
    StoreError,
    StoreFailure,
    TrackerError,
)
from ..models.results import StoreResult
from .models import Base

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Fields = Mapping[str, Any]

# SQLite reports constraint failures by message only
_SQLITE_MESSAGES = (
    ("FOREIGN KEY constraint failed", FOREIGN_KEY_VIOLATION),
    ("UNIQUE constraint failed", UNIQUE_VIOLATION),
    ("NOT NULL constraint failed", NOT_NULL_VIOLATION),
)

# MySQL error numbers
_MYSQL_CODES = {
    1451: FOREIGN_KEY_VIOLATION,  # cannot delete or update a parent row
    1452: FOREIGN_KEY_VIOLATION,  # cannot add or update a child row
    1062: UNIQUE_VIOLATION,
    1048: NOT_NULL_VIOLATION,
}

_KIND_BY_CODE = {
    FOREIGN_KEY_VIOLATION: ErrorKind.REFERENTIAL_INTEGRITY_VIOLATION,
    UNIQUE_VIOLATION: ErrorKind.UNIQUE_VIOLATION,
}


class Filter(NamedTuple):
    """Row filter. ``op`` is one of eq, neq, in, ieq (case-insensitive eq), ilike."""
    column: str
    op: str = "eq"
    value: Any = None


class Order(NamedTuple):
    """
    Ordering term.

    ``nulls_last`` sorts NULLs after every value in both directions and
    ``ignore_case`` compares text by its lower-cased form.
    """
    column: str
    ascending: bool = True
    nulls_last: bool = False
    ignore_case: bool = False


def error_code(exc: DBAPIError) -> Optional[str]:
    """Extract a SQLSTATE-style code from a DBAPI error, whatever the driver."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)

    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return _MYSQL_CODES.get(args[0], str(args[0]))

    message = str(orig)
    for prefix, sqlstate in _SQLITE_MESSAGES:
        if message.startswith(prefix):
            return sqlstate
    return None


def classify_integrity_error(exc: IntegrityError, table: Optional[str] = None) -> StoreFailure:
    """Map an IntegrityError onto the error kinds the action layer understands."""
    code = error_code(exc)
    kind = _KIND_BY_CODE.get(code, ErrorKind.STORE)
    return StoreFailure(kind=kind, message=str(exc.orig), code=code, table=table)


class RelationalStore:
    """
    Table-level query/mutation interface bound to one engine.

    Every operation runs in its own transaction. The store holds no state
    besides the engine and metadata, so a single instance can serve
    concurrent requests.
    """

    def __init__(self, engine: Engine, metadata: Optional[MetaData] = None):
        self.engine = engine
        self.metadata = metadata if metadata is not None else Base.metadata

    # -- helpers ---------------------------------------------------------

    def _table(self, name: str) -> Table:
        try:
            return self.metadata.tables[name]
        except KeyError:
            raise StoreError(f"Unknown table '{name}'", table=name)

    @staticmethod
    def _column(table: Table, name: str):
        try:
            return table.c[name]
        except KeyError:
            raise StoreError(f"Unknown column '{name}' on table '{table.name}'", table=table.name)

    def _check_fields(self, table: Table, fields: Fields) -> None:
        for name in fields:
            self._column(table, name)

    @staticmethod
    def _primary_key(table: Table):
        return list(table.primary_key.columns)[0]

    def _where(self, table: Table, filters: Optional[Iterable[Filter]]):
        clauses = []
        for flt in filters or ():
            column = self._column(table, flt.column)
            if flt.op == "eq":
                clauses.append(column.is_(None) if flt.value is None else column == flt.value)
            elif flt.op == "neq":
                clauses.append(column.is_not(None) if flt.value is None else column != flt.value)
            elif flt.op == "in":
                clauses.append(column.in_(list(flt.value)))
            elif flt.op == "ieq":
                clauses.append(func.lower(column) == str(flt.value).lower())
            elif flt.op == "ilike":
                clauses.append(column.ilike(flt.value))
            else:
                raise StoreError(f"Unsupported filter operator '{flt.op}'", table=table.name)
        return clauses

    def _order_by(self, table: Table, ordering: Optional[Sequence[Order]]):
        terms = []
        for order in ordering or ():
            column = self._column(table, order.column)
            if order.nulls_last:
                terms.append(column.is_(None).asc())
            key = func.lower(column) if order.ignore_case else column
            terms.append(key.asc() if order.ascending else key.desc())
        return terms

    @staticmethod
    def _fetch_by_ids(conn: Connection, table: Table, pk, ids: List[Any]) -> List[Row]:
        rows = {row[pk.name]: row for row in (
            dict(r._mapping) for r in conn.execute(select(table).where(pk.in_(ids)))
        )}
        return [rows[i] for i in ids if i in rows]

    def _run(self, operation: str, table: str, work: Callable[[], Any]) -> StoreResult:
        """Execute ``work`` and convert anticipated failures into a StoreResult."""
        try:
            return StoreResult(data=work())
        except TrackerError as e:
            if e.kind == ErrorKind.NOT_FOUND:
                logger.info(f"Store {operation} on {table}: {e.message}")
            else:
                logger.error(f"Store {operation} on {table} rejected: {e.message}")
            e.table = e.table or table
            return StoreResult(error=e.to_failure())
        except IntegrityError as e:
            failure = classify_integrity_error(e, table=table)
            if failure.kind == ErrorKind.REFERENTIAL_INTEGRITY_VIOLATION:
                logger.warning(f"Store {operation} on {table} blocked by foreign key: {failure.message}")
            else:
                logger.error(f"Store {operation} on {table} violated a constraint ({failure.code}): {failure.message}")
            return StoreResult(error=failure)
        except DBAPIError as e:
            if e.connection_invalidated:
                logger.error(f"Store {operation} on {table} lost its connection: {e}")
                raise
            logger.error(f"Store {operation} on {table} failed: {e.orig}")
            return StoreResult(error=StoreFailure(
                kind=ErrorKind.STORE, message=str(e.orig), code=error_code(e), table=table
            ))
        except SQLAlchemyError as e:
            logger.error(f"Store {operation} on {table} failed: {e}")
            return StoreResult(error=StoreFailure(kind=ErrorKind.STORE, message=str(e), table=table))

    # -- operations ------------------------------------------------------

    def select(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Iterable[Filter]] = None,
        ordering: Optional[Sequence[Order]] = None,
        limit: Optional[int] = None,
    ) -> StoreResult[List[Row]]:
        """Select rows as dictionaries."""
        def work():
            tbl = self._table(table)
            selected = [self._column(tbl, name) for name in columns] if columns else [tbl]
            query = select(*selected).where(*self._where(tbl, filters)).order_by(*self._order_by(tbl, ordering))
            if limit is not None:
                query = query.limit(limit)
            with self.engine.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(query)]

        return self._run("select", table, work)

    def insert(self, table: str, fields: Union[Fields, Sequence[Fields]]) -> StoreResult[List[Row]]:
        """
        Insert one row or several rows in a single transaction.

        Returns the stored rows, including generated ids and timestamps,
        in insertion order.
        """
        rows = [fields] if isinstance(fields, Mapping) else list(fields)

        def work():
            tbl = self._table(table)
            pk = self._primary_key(tbl)
            ids = []
            with self.engine.begin() as conn:
                for row in rows:
                    self._check_fields(tbl, row)
                    result = conn.execute(insert(tbl).values(**row))
                    ids.append(result.inserted_primary_key[0])
                return self._fetch_by_ids(conn, tbl, pk, ids)

        return self._run("insert", table, work)

    def update(self, table: str, fields: Fields, match_id: Any) -> StoreResult[Row]:
        """Update the row whose primary key equals ``match_id`` and return it."""
        def work():
            tbl = self._table(table)
            self._check_fields(tbl, fields)
            pk = self._primary_key(tbl)
            with self.engine.begin() as conn:
                if fields:
                    result = conn.execute(update(tbl).where(pk == match_id).values(**fields))
                    if result.rowcount == 0:
                        raise NotFoundError(f"No row in {table} with id {match_id}", code=NOT_FOUND_CODE)
                rows = self._fetch_by_ids(conn, tbl, pk, [match_id])
                if not rows:
                    raise NotFoundError(f"No row in {table} with id {match_id}", code=NOT_FOUND_CODE)
                return rows[0]

        return self._run("update", table, work)

    def delete(self, table: str, match_id: Any) -> StoreResult[Any]:
        """Delete the row whose primary key equals ``match_id``."""
        def work():
            tbl = self._table(table)
            pk = self._primary_key(tbl)
            with self.engine.begin() as conn:
                result = conn.execute(delete(tbl).where(pk == match_id))
                if result.rowcount == 0:
                    raise NotFoundError(f"No row in {table} with id {match_id}", code=NOT_FOUND_CODE)
            return match_id

        return self._run("delete", table, work)

    def count(
        self,
        table: str,
        filters: Optional[Iterable[Filter]] = None,
        group_by: Optional[str] = None,
    ) -> StoreResult[Union[int, Dict[Any, int]]]:
        """Count rows, optionally grouped by one column."""
        def work():
            tbl = self._table(table)
            where = self._where(tbl, filters)
            with self.engine.connect() as conn:
                if group_by is None:
                    return conn.execute(select(func.count()).select_from(tbl).where(*where)).scalar_one()
                column = self._column(tbl, group_by)
                query = select(column, func.count()).where(*where).group_by(column)
                return {value: total for value, total in conn.execute(query)}

        return self._run("count", table, work)


__all__ = [
    'Filter',
    'Order',
    'RelationalStore',
    'classify_integrity_error',
    'error_code',
]
