"""
Ticketdesk Pydantic models package.

This package contains the record models, enums, error taxonomy and result
shapes used throughout the ticketdesk application.
"""

# Enums
from .enums import (
    BookingType,
    BookingStatus,
    SectorStatus,
    TaskStatus,
    ErrorKind,
    ViewName,
)

# Record models
from .records import (
    CustomerModel,
    PredefinedSectorModel,
    FareClassModel,
    BookingSectorModel,
    BookingModel,
    BookingWithDetails,
    BookingSummaryModel,
    TaskModel,
    TaskWithBookingInfo,
)

# Errors
from .errors import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    NOT_NULL_VIOLATION,
    NOT_FOUND_CODE,
    StoreFailure,
    TrackerError,
    ValidationFailed,
    ReferentialIntegrityError,
    UniqueViolationError,
    NotFoundError,
    StoreError,
)

# Results
from .results import (
    StoreResult,
    FormState,
    SortSpec,
)

__all__ = [
    # Enums
    "BookingType",
    "BookingStatus",
    "SectorStatus",
    "TaskStatus",
    "ErrorKind",
    "ViewName",

    # Records
    "CustomerModel",
    "PredefinedSectorModel",
    "FareClassModel",
    "BookingSectorModel",
    "BookingModel",
    "BookingWithDetails",
    "BookingSummaryModel",
    "TaskModel",
    "TaskWithBookingInfo",

    # Errors
    "FOREIGN_KEY_VIOLATION",
    "UNIQUE_VIOLATION",
    "NOT_NULL_VIOLATION",
    "NOT_FOUND_CODE",
    "StoreFailure",
    "TrackerError",
    "ValidationFailed",
    "ReferentialIntegrityError",
    "UniqueViolationError",
    "NotFoundError",
    "StoreError",

    # Results
    "StoreResult",
    "FormState",
    "SortSpec",
]
