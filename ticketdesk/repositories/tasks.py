"""Task repository."""

from typing import List, Sequence

from ..database.store import Order
from ..models.records import TaskModel
from ..models.results import StoreResult
from .base import TableRepository

# Columns tasks may be sorted by
SORTABLE_COLUMNS = ("due_date", "title", "status", "created_at", "updated_at")


class TaskRepository(TableRepository[TaskModel]):
    table = "tasks"
    model = TaskModel
    default_ordering = (Order("due_date", nulls_last=True), Order("id"))

    @staticmethod
    def ordering_for(sort_by: str, ascending: bool = True) -> Sequence[Order]:
        """
        Ordering for a sort column: tasks without a value go last and ties
        keep stored (id) order in both directions.
        """
        return (Order(sort_by, ascending=ascending, nulls_last=True), Order("id"))

    def list_sorted(self, sort_by: str = "due_date", ascending: bool = True) -> StoreResult[List[TaskModel]]:
        return self.list(ordering=self.ordering_for(sort_by, ascending))
