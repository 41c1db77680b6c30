"""
Base repository mapping store rows onto record models.

Repositories hold no business rules: they pick the table, translate rows
into Pydantic records and pass store failures through untouched.
"""

import logging
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from ..database.store import Filter, Order, RelationalStore
from ..models.results import StoreResult

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class TableRepository(Generic[M]):
    """
    list / get_by_id / insert / update / delete over one table.

    Subclasses set ``table``, ``model`` and ``default_ordering``.
    """

    table: str = ""
    model: Type[M] = None
    default_ordering: Sequence[Order] = ()

    def __init__(self, store: RelationalStore):
        self.store = store

    def _to_model(self, row: Mapping[str, Any]) -> M:
        return self.model.model_validate(dict(row))

    def _to_models(self, rows: Iterable[Mapping[str, Any]]) -> List[M]:
        return [self._to_model(row) for row in rows]

    def list(
        self,
        filters: Optional[Iterable[Filter]] = None,
        ordering: Optional[Sequence[Order]] = None,
    ) -> StoreResult[List[M]]:
        ordering = ordering if ordering is not None else self.default_ordering
        return self.store.select(self.table, filters=filters, ordering=ordering).map(self._to_models)

    def get_by_id(self, record_id: Any) -> StoreResult[Optional[M]]:
        """Fetch one record; a missing id yields ``data=None`` rather than an error."""
        result = self.store.select(self.table, filters=[Filter("id", "eq", record_id)], limit=1)
        return result.map(lambda rows: self._to_model(rows[0]) if rows else None)

    def exists(self, record_id: Any) -> StoreResult[bool]:
        result = self.store.select(self.table, columns=["id"], filters=[Filter("id", "eq", record_id)], limit=1)
        return result.map(bool)

    def insert(self, fields: Mapping[str, Any]) -> StoreResult[M]:
        return self.store.insert(self.table, fields).map(lambda rows: self._to_model(rows[0]))

    def update(self, record_id: Any, fields: Mapping[str, Any]) -> StoreResult[M]:
        return self.store.update(self.table, fields, match_id=record_id).map(self._to_model)

    def delete(self, record_id: Any) -> StoreResult[Any]:
        return self.store.delete(self.table, match_id=record_id)

    def count(self, group_by: Optional[str] = None) -> StoreResult[Any]:
        return self.store.count(self.table, group_by=group_by)

    @staticmethod
    def by_id(records: Iterable[M]) -> Dict[Any, M]:
        return {record.id: record for record in records}
