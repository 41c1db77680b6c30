"""
Test suite for the Valkey-backed list view cache.

The Valkey client is replaced with a MagicMock; a small dict-backed fake
is used where the tests need values to survive between calls.
"""

import fnmatch
import json
from unittest.mock import MagicMock

import pytest
from valkey.exceptions import ConnectionError as ValkeyConnectionError

from ticketdesk.actions import ActionContext, add_customer, list_customers, update_customer
from ticketdesk.cache import ValkeyConfig, ViewCache
from ticketdesk.models import CustomerModel, ErrorKind, SortSpec, StoreFailure, StoreResult, ViewName
from ticketdesk.utils.config import TrackerConfig


class FakeValkey:
    """Minimal in-memory stand-in for the commands the view cache uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def scan_iter(self, match=None):
        return [key for key in list(self.data) if match is None or fnmatch.fnmatch(key, match)]

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def fake_valkey():
    return FakeValkey()


@pytest.fixture
def view_cache(fake_valkey):
    return ViewCache(client=fake_valkey, config=ValkeyConfig(), ttl=60)


class TestViewCacheKeys:
    """Test cases for cache key construction."""

    def test_key_with_parts(self, view_cache):
        """Test key built from view name and parameters."""
        assert view_cache.key(ViewName.TASKS, "due_date", "asc") == "view:tasks:due_date:asc"

    def test_key_without_parts(self, view_cache):
        """Test key for an unparameterised view."""
        assert view_cache.key(ViewName.SECTORS) == "view:sectors:all"

    def test_key_accepts_plain_name(self, view_cache):
        """Test key built from a plain string view name."""
        assert view_cache.key("customers", "company_name") == "view:customers:company_name"


class TestViewCache:
    """Test cases for reading through and invalidating the cache."""

    def test_read_through_caches_on_miss(self, view_cache, fake_valkey):
        """Test a miss loads once and caches the serialized list."""
        customer = CustomerModel(id="c1", company_name="Acme Air", created_at="2026-10-01T09:00:00")
        loader = MagicMock(return_value=StoreResult(data=[customer]))

        first = view_cache.read_through(ViewName.CUSTOMERS, CustomerModel, loader)
        second = view_cache.read_through(ViewName.CUSTOMERS, CustomerModel, loader)

        assert loader.call_count == 1
        assert first.data == second.data == [customer]
        assert fake_valkey.ttls["view:customers:all"] == 60
        assert json.loads(fake_valkey.data["view:customers:all"])[0]["company_name"] == "Acme Air"

    def test_failed_load_is_not_cached(self, view_cache, fake_valkey):
        """Test a failed load leaves nothing in the cache."""
        failure = StoreResult(error=StoreFailure(kind=ErrorKind.STORE, message="boom"))

        result = view_cache.read_through(ViewName.CUSTOMERS, CustomerModel, lambda: failure)

        assert not result.ok
        assert fake_valkey.data == {}

    def test_invalidate_removes_every_variant(self, view_cache, fake_valkey):
        """Test invalidation drops every parameter variant of a view."""
        fake_valkey.set("view:tasks:due_date:asc", "[]")
        fake_valkey.set("view:tasks:title:desc", "[]")
        fake_valkey.set("view:customers:all", "[]")

        removed = view_cache.invalidate([ViewName.TASKS])

        assert removed == 2
        assert list(fake_valkey.data) == ["view:customers:all"]

    def test_connection_errors_are_logged_not_raised(self):
        """Test an unreachable server degrades to the loader."""
        client = MagicMock()
        client.get.side_effect = ValkeyConnectionError("refused")
        client.set.side_effect = ValkeyConnectionError("refused")
        client.scan_iter.side_effect = ValkeyConnectionError("refused")
        cache = ViewCache(client=client, config=ValkeyConfig())
        loader = MagicMock(return_value=StoreResult(data=[]))

        result = cache.read_through(ViewName.CUSTOMERS, CustomerModel, loader)

        assert result.data == []
        loader.assert_called_once()
        assert cache.invalidate([ViewName.CUSTOMERS]) == 0

    def test_unreadable_entry_is_a_miss(self, view_cache, fake_valkey):
        """Test a cached value that is not JSON is reloaded."""
        customer = CustomerModel(id="c1", company_name="Acme Air", created_at="2026-10-01T09:00:00")
        fake_valkey.set("view:customers:all", "{not json")
        loader = MagicMock(return_value=StoreResult(data=[customer]))

        result = view_cache.read_through(ViewName.CUSTOMERS, CustomerModel, loader)

        assert result.data == [customer]
        loader.assert_called_once()
        assert json.loads(fake_valkey.data["view:customers:all"])[0]["id"] == "c1"

    def test_outdated_entry_is_a_miss(self, view_cache, fake_valkey):
        """Test a cached list in an old record shape is reloaded."""
        customer = CustomerModel(id="c1", company_name="Acme Air", created_at="2026-10-01T09:00:00")
        fake_valkey.set("view:customers:all", json.dumps([{"id": "c1", "name": "Acme Air"}]))
        loader = MagicMock(return_value=StoreResult(data=[customer]))

        result = view_cache.read_through(ViewName.CUSTOMERS, CustomerModel, loader)

        assert result.data == [customer]
        loader.assert_called_once()

    def test_non_list_entry_is_a_miss(self, view_cache, fake_valkey):
        """Test a cached scalar is ignored by get."""
        fake_valkey.set("view:customers:all", "42")

        assert view_cache.get(ViewName.CUSTOMERS) is None


class TestActionContextWithCache:
    """Test cases for actions reading through and invalidating the cache."""

    @pytest.fixture
    def cached_ctx(self, store, view_cache, invalidations):
        return ActionContext(store=store, view_cache=view_cache, on_invalidate=invalidations.append)

    def test_list_is_served_from_cache(self, cached_ctx, fake_valkey):
        """Test listing stores the view under its sort key."""
        add_customer(cached_ctx, {"company_name": "Acme Air"})

        list_customers(cached_ctx)

        assert "view:customers:company_name:asc" in fake_valkey.data

    def test_mutation_invalidates_cached_list(self, cached_ctx, invalidations):
        """Test an update makes the next list reflect the change."""
        state = add_customer(cached_ctx, {"company_name": "Acme Air"})
        assert [c.company_name for c in list_customers(cached_ctx)] == ["Acme Air"]

        update_customer(cached_ctx, state.record_id, {"company_name": "Acme Airways"})

        assert [c.company_name for c in list_customers(cached_ctx)] == ["Acme Airways"]
        assert invalidations[-1] == (ViewName.CUSTOMERS, ViewName.BOOKINGS, ViewName.TASKS)

    def test_sort_variants_cached_separately(self, cached_ctx, fake_valkey):
        """Test each sort order gets its own cache entry."""
        add_customer(cached_ctx, {"company_name": "Alpha Air"})
        add_customer(cached_ctx, {"company_name": "Zulu Air"})

        ascending = list_customers(cached_ctx)
        descending = list_customers(cached_ctx, SortSpec(sort_by="company_name", ascending=False))

        assert [c.company_name for c in descending] == [c.company_name for c in reversed(ascending)]
        assert "view:customers:company_name:desc" in fake_valkey.data

    def test_failed_mutation_leaves_cache_alone(self, cached_ctx, fake_valkey, invalidations):
        """Test a rejected form does not invalidate anything."""
        add_customer(cached_ctx, {"company_name": "Acme Air"})
        list_customers(cached_ctx)
        invalidations.clear()

        add_customer(cached_ctx, {"company_name": ""})

        assert "view:customers:company_name:asc" in fake_valkey.data
        assert invalidations == []


class TestValkeyConfig:
    """Test cases for Valkey connection settings."""

    def test_password_hidden(self):
        """Test the password is passed through but never printed."""
        config = ValkeyConfig(password="secret")

        assert "secret" not in str(config)
        assert config.to_connection_kwargs()["password"] == "secret"

    def test_no_password_kwarg_when_unset(self):
        """Test no password keyword without a password."""
        assert "password" not in ValkeyConfig().to_connection_kwargs()

    def test_from_tracker_config(self):
        """Test settings are taken from the validated tracker configuration."""
        tracker = TrackerConfig(valkey_host="cache", valkey_port=6380, valkey_password="secret", valkey_database=2)

        config = ValkeyConfig.from_tracker_config(tracker)

        assert config == ValkeyConfig(host="cache", port=6380, password="secret", database=2)
        assert config.to_connection_kwargs()["db"] == 2
