"""
Valkey-backed cache of list views.

List actions read through this cache; every successful mutation returns
the views it made stale and the action context passes them to
``ViewCache.invalidate``, which drops every cached variant of each view:

    view:tasks:due_date:asc   -> JSON list of task records
    view:customers:all        -> JSON list of customer records

The cache is an optimisation only. A Valkey failure is logged and the
caller falls back to the store.
"""

import json
import logging
from typing import Any, Callable, Iterable, List, Optional, Type, TypeVar

import valkey
from valkey import exceptions as valkey_errors
from pydantic import BaseModel, ValidationError

from ..models.enums import ViewName
from ..models.results import StoreResult
from .config import ValkeyConfig

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_CACHE_ERRORS = (
    valkey_errors.ConnectionError,
    valkey_errors.TimeoutError,
    valkey_errors.ResponseError,
)


class ViewCache:
    """Cache-aside store for list views keyed by view name and parameters."""

    def __init__(
        self,
        config: ValkeyConfig,
        client: Optional[valkey.Valkey] = None,
        ttl: int = 300,
        prefix: str = "view",
    ):
        """
        Args:
            config: Connection settings
            client: Ready Valkey client; built lazily from ``config`` when omitted
            ttl: Seconds a cached view lives before it is refetched anyway
            prefix: Key namespace
        """
        self.config = config
        self._client = client
        self.ttl = ttl
        self.prefix = prefix

    @property
    def client(self) -> valkey.Valkey:
        if self._client is None:
            self._client = valkey.Valkey(**self.config.to_connection_kwargs())
            logger.info(f"View cache connected to {self.config}")
        return self._client

    def key(self, view: ViewName, *parts: Any) -> str:
        suffix = ":".join(str(part) for part in parts if part is not None) or "all"
        return f"{self.prefix}:{ViewName(view).value}:{suffix}"

    def get(self, view: ViewName, *parts: Any) -> Optional[List[Any]]:
        key = self.key(view, *parts)
        try:
            raw = self.client.get(key)
        except _CACHE_ERRORS as e:
            logger.warning(f"View cache get failed for {key}: {e}")
            return None
        if raw is None:
            logger.debug(f"View cache miss: {key}")
            return None
        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"View cache entry {key} is unreadable, treating as a miss: {e}")
            return None
        if not isinstance(payload, list):
            logger.warning(f"View cache entry {key} is not a list, treating as a miss")
            return None
        logger.debug(f"View cache hit: {key}")
        return payload

    def set(self, view: ViewName, payload: List[Any], *parts: Any) -> bool:
        key = self.key(view, *parts)
        try:
            self.client.set(key, json.dumps(payload), ex=self.ttl)
            return True
        except _CACHE_ERRORS as e:
            logger.warning(f"View cache set failed for {key}: {e}")
            return False

    def read_through(
        self,
        view: ViewName,
        model: Type[M],
        loader: Callable[[], StoreResult[List[M]]],
        *parts: Any,
    ) -> StoreResult[List[M]]:
        """Serve a list view from the cache, loading and caching it on a miss."""
        cached = self.get(view, *parts)
        if cached is not None:
            try:
                return StoreResult(data=[model.model_validate(item) for item in cached])
            except (ValidationError, ValueError) as e:
                logger.warning(f"View cache entry for {ViewName(view).value} no longer matches {model.__name__}: {e}")

        result = loader()
        if result.ok:
            self.set(view, [record.model_dump(mode="json") for record in result.data], *parts)
        return result

    def invalidate(self, views: Iterable[ViewName]) -> int:
        """Delete every cached variant of the given views; returns the number of keys removed."""
        removed = 0
        for view in views:
            pattern = f"{self.prefix}:{ViewName(view).value}:*"
            try:
                keys = list(self.client.scan_iter(match=pattern))
                if keys:
                    removed += self.client.delete(*keys)
            except _CACHE_ERRORS as e:
                logger.warning(f"View cache invalidation failed for {pattern}: {e}")
        logger.debug(f"View cache invalidated {removed} keys")
        return removed
