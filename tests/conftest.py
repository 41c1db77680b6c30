"""
Shared fixtures for the ticketdesk test suite.

Every test gets its own in-memory SQLite database (StaticPool, foreign keys
on) and an action context that records the views each mutation
invalidates.
"""

import pytest

from ticketdesk.actions import ActionContext, add_booking, add_customer, add_fare_class, add_sector
from ticketdesk.database.config import DatabaseConfig


@pytest.fixture
def db_config():
    """In-memory database with all tables created."""
    config = DatabaseConfig(database_url="sqlite://")
    config.create_tables()
    yield config
    config.close()


@pytest.fixture
def store(db_config):
    return db_config.store


@pytest.fixture
def invalidations():
    """Every invalidation notification, in order."""
    return []


@pytest.fixture
def ctx(store, invalidations):
    return ActionContext(store=store, on_invalidate=invalidations.append)


@pytest.fixture
def customer_id(ctx):
    state = add_customer(ctx, {"company_name": "Acme Air"})
    assert state.success, state.message
    return state.record_id


@pytest.fixture
def sector_ids(ctx):
    """Outbound and return sectors between SIN and KUL."""
    outbound = add_sector(ctx, {"origin_code": "sin", "destination_code": "kul"})
    inbound = add_sector(ctx, {"origin_code": "KUL", "destination_code": "SIN"})
    assert outbound.success and inbound.success
    return outbound.record_id, inbound.record_id


@pytest.fixture
def fare_class_id(ctx):
    state = add_fare_class(ctx, {"name": "Economy", "description": "Standard seating"})
    assert state.success, state.message
    return state.record_id


def sector_form(sector_id, status="Confirmed", num_pax="2", **extra):
    form = {
        "predefined_sector_id": sector_id,
        "travel_date": "2026-11-02",
        "status": status,
        "num_pax": num_pax,
    }
    form.update(extra)
    return form


@pytest.fixture
def booking_id(ctx, customer_id, sector_ids):
    state = add_booking(ctx, {
        "customer_id": customer_id,
        "booking_type": "One-Way",
        "booking_reference": "BK-001",
        "sectors": [sector_form(sector_ids[0])],
    })
    assert state.success, state.message
    return state.record_id
