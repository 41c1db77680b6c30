"""
Enums for the ticketdesk application.

This module contains the enumeration types used throughout the application
for consistent data validation and type safety.
"""

from enum import Enum


class BookingType(str, Enum):
    """Booking itinerary type."""
    ONE_WAY = "One-Way"
    RETURN = "Return"


class BookingStatus(str, Enum):
    """Overall booking status."""
    CONFIRMED = "Confirmed"
    WAITING_LIST = "Waiting List"
    TICKETED = "Ticketed"
    CANCELLED = "Cancelled"
    PENDING = "Pending"
    UNCONFIRMED = "Unconfirmed"


class SectorStatus(str, Enum):
    """Per-sector status; a subset of BookingStatus."""
    CONFIRMED = "Confirmed"
    WAITING_LIST = "Waiting List"


class TaskStatus(str, Enum):
    """Follow-up task status."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ErrorKind(str, Enum):
    """Classification of anticipated failures."""
    VALIDATION = "validation"
    REFERENTIAL_INTEGRITY_VIOLATION = "referential_integrity_violation"
    UNIQUE_VIOLATION = "unique_violation"
    NOT_FOUND = "not_found"
    STORE = "store"


class ViewName(str, Enum):
    """Dependent views that are refetched after a mutation."""
    CUSTOMERS = "customers"
    BOOKINGS = "bookings"
    DASHBOARD = "dashboard"
    TASKS = "tasks"
    FARES = "fares"
    SECTORS = "sectors"
