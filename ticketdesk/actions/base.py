"""
Shared plumbing for the domain actions.

Every mutation follows the same path:

    received input -> validated -> persisted -> views invalidated

Validation failures and store failures end the path early with a
``FormState`` describing what went wrong and nothing invalidated. Only a
successful mutation reaches ``succeeded``, which notifies the context's
invalidation sinks exactly once and reports the stale views in the result.
"""

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from ..cache.views import ViewCache
from ..database.store import RelationalStore
from ..models.enums import ViewName
from ..models.errors import NotFoundError, ReferentialIntegrityError, TrackerError
from ..models.results import FormState, SortSpec, StoreResult
from ..repositories import (
    BookingRepository,
    CustomerRepository,
    FareClassRepository,
    PredefinedSectorRepository,
    TaskRepository,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

InvalidationListener = Callable[[Tuple[ViewName, ...]], None]


@dataclass
class ActionContext:
    """
    Per-request handle passed to every action.

    Args:
        store: Relational store the repositories run against
        view_cache: Optional Valkey cache that list actions read through
        on_invalidate: Optional callback told which views went stale
    """
    store: RelationalStore
    view_cache: Optional[ViewCache] = None
    on_invalidate: Optional[InvalidationListener] = None

    @cached_property
    def customers(self) -> CustomerRepository:
        return CustomerRepository(self.store)

    @cached_property
    def sectors(self) -> PredefinedSectorRepository:
        return PredefinedSectorRepository(self.store)

    @cached_property
    def fare_classes(self) -> FareClassRepository:
        return FareClassRepository(self.store)

    @cached_property
    def bookings(self) -> BookingRepository:
        return BookingRepository(self.store)

    @cached_property
    def tasks(self) -> TaskRepository:
        return TaskRepository(self.store)

    def invalidate(self, views: Iterable[ViewName]) -> Tuple[ViewName, ...]:
        views = tuple(dict.fromkeys(ViewName(view) for view in views))
        if self.view_cache is not None:
            self.view_cache.invalidate(views)
        if self.on_invalidate is not None:
            self.on_invalidate(views)
        return views

    def read_view(
        self,
        view: ViewName,
        model: Type[M],
        loader: Callable[[], StoreResult[List[M]]],
        *parts: Any,
    ) -> StoreResult[List[M]]:
        if self.view_cache is None:
            return loader()
        return self.view_cache.read_through(view, model, loader, *parts)


# -- form states ---------------------------------------------------------

def validation_failed(errors: Dict[str, List[str]]) -> FormState:
    return FormState(message="Validation failed", errors=errors)


def missing_id(entity: str, operation: str) -> FormState:
    return FormState(message=f"Error: Missing {entity} ID for {operation}.")


def failed(
    error: TrackerError,
    entity: str,
    verb: str,
    integrity_message: Optional[str] = None,
) -> FormState:
    """
    Turn a caught TrackerError into the operator-facing message.

    Args:
        error: The failure raised by ``StoreResult.unwrap``
        entity: Entity name used in messages ("customer", "fare class")
        verb: Infinitive of the attempted operation ("add", "delete")
        integrity_message: Message for a blocked delete naming the dependency
    """
    if isinstance(error, NotFoundError):
        return FormState(message=f"Error: {entity.capitalize()} not found.")
    if isinstance(error, ReferentialIntegrityError) and integrity_message:
        return FormState(message=f"Database Error: {integrity_message}")
    return FormState(message=f"Database Error: Failed to {verb} {entity}. {error.message}")


def succeeded(
    ctx: ActionContext,
    message: str,
    views: Sequence[ViewName],
    record_id: Optional[Union[str, int]] = None,
) -> FormState:
    invalidated = ctx.invalidate(views)
    return FormState(message=message, record_id=record_id, invalidated=invalidated)


# -- listing -------------------------------------------------------------

def resolve_sort(sort: Optional[SortSpec], allowed: Sequence[str], default: SortSpec) -> SortSpec:
    """Fall back to the entity's default ordering for missing or unknown sort columns."""
    if sort is None:
        return default
    if sort.sort_by not in allowed:
        logger.warning(f"Unsupported sort column '{sort.sort_by}', using '{default.sort_by}'")
        return SortSpec(sort_by=default.sort_by, ascending=sort.ascending)
    return sort


def sort_parts(sort: SortSpec) -> Tuple[str, str]:
    return sort.sort_by, "asc" if sort.ascending else "desc"


def load_list(result: StoreResult[List[M]], what: str) -> List[M]:
    """Unwrap a list result; a store failure is logged and yields an empty list."""
    if not result.ok:
        logger.error(f"Failed to fetch {what}: {result.error.message}")
        return []
    return result.data
