"""
Result shapes shared by the store, repositories and actions.

``StoreResult`` distinguishes data from a classified store failure.
``FormState`` is what every action hands back to the presentation layer.
``SortSpec`` is the explicit sort specification taken by list actions.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union
from pydantic import BaseModel, Field, ConfigDict

from .enums import ViewName
from .errors import StoreFailure

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Either ``data`` or a ``StoreFailure`` in ``error``."""
    data: Optional[T] = None
    error: Optional[StoreFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the data, raising the matching TrackerError on failure."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.data

    def map(self, func: Callable[[T], U]) -> "StoreResult[U]":
        if self.error is not None:
            return StoreResult(error=self.error)
        return StoreResult(data=func(self.data))


class FormState(BaseModel):
    """
    Structured outcome of a domain action.

    ``errors`` holds field-level validation messages, ``record_id`` the id
    of the created or touched record, and ``invalidated`` the views that
    must be refetched. ``invalidated`` is empty whenever the action failed.
    """
    model_config = ConfigDict(frozen=True)

    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None
    record_id: Optional[Union[str, int]] = None
    invalidated: Tuple[ViewName, ...] = Field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return bool(self.message) and self.message.startswith("Success")


class SortSpec(BaseModel):
    """Sort specification for list actions."""
    model_config = ConfigDict(frozen=True)

    sort_by: str = Field(..., min_length=1)
    ascending: bool = True
