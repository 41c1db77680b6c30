"""
Validation layer: pure functions turning raw form input into typed values
or field-level error maps.
"""

from .schemas import (
    FormSchema,
    CustomerInput,
    FareClassInput,
    SectorInput,
    TaskInput,
    BookingSectorInput,
    BookingInput,
    BookingUpdateInput,
)

from .validators import (
    FORM_ERROR_KEY,
    ValidationResult,
    flatten_errors,
    read_form,
    validate_form,
    validate_customer,
    validate_fare_class,
    validate_sector,
    validate_task,
    validate_booking,
    validate_booking_update,
)

__all__ = [
    "FormSchema",
    "CustomerInput",
    "FareClassInput",
    "SectorInput",
    "TaskInput",
    "BookingSectorInput",
    "BookingInput",
    "BookingUpdateInput",
    "FORM_ERROR_KEY",
    "ValidationResult",
    "flatten_errors",
    "read_form",
    "validate_form",
    "validate_customer",
    "validate_fare_class",
    "validate_sector",
    "validate_task",
    "validate_booking",
    "validate_booking_update",
]
