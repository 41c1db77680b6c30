"""
Repository layer: typed read/write operations per entity over the
relational store.
"""

from .base import TableRepository
from .customers import CustomerRepository
from .sectors import PredefinedSectorRepository
from .fare_classes import FareClassRepository
from .bookings import BookingRepository
from .tasks import TaskRepository, SORTABLE_COLUMNS

__all__ = [
    "TableRepository",
    "CustomerRepository",
    "PredefinedSectorRepository",
    "FareClassRepository",
    "BookingRepository",
    "TaskRepository",
    "SORTABLE_COLUMNS",
]
