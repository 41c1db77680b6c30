"""
Database package for the ticketdesk system.

This package provides the SQLAlchemy table definitions, database
configuration and the generic relational store used by the repositories.
"""

from .models import (
    Base,
    Customer,
    PredefinedSector,
    FareClass,
    Booking,
    BookingSector,
    Task,
    create_all_tables,
    drop_all_tables
)

from .store import (
    Filter,
    Order,
    RelationalStore,
    classify_integrity_error,
    error_code,
)

from .config import (
    DatabaseConfig,
    get_database_config,
    initialize_database,
)

__all__ = [
    # Models
    'Base',
    'Customer',
    'PredefinedSector',
    'FareClass',
    'Booking',
    'BookingSector',
    'Task',
    'create_all_tables',
    'drop_all_tables',

    # Store
    'Filter',
    'Order',
    'RelationalStore',
    'classify_integrity_error',
    'error_code',

    # Configuration
    'DatabaseConfig',
    'get_database_config',
    'initialize_database',
]
