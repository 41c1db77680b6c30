"""Fare class repository."""

from typing import Optional

from ..database.store import Filter, Order
from ..models.records import FareClassModel
from ..models.results import StoreResult
from .base import TableRepository


class FareClassRepository(TableRepository[FareClassModel]):
    table = "fare_classes"
    model = FareClassModel
    default_ordering = (Order("name", ignore_case=True), Order("created_at"), Order("id"))

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> StoreResult[Optional[FareClassModel]]:
        """Case-insensitive lookup by name, optionally ignoring one record."""
        filters = [Filter("name", "ieq", name)]
        if exclude_id:
            filters.append(Filter("id", "neq", exclude_id))
        return self.store.select(self.table, filters=filters, limit=1).map(
            lambda rows: self._to_model(rows[0]) if rows else None
        )
