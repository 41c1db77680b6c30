"""
Input schemas for the ticketdesk forms.

Each schema receives every one of its fields (absent form fields arrive as
None) and normalises raw form strings before the declared types are
checked. Required-field and format failures are raised as
``PydanticCustomError`` so the messages shown to the operator are exactly
the ones written here.
"""

import json
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from ..models.enums import BookingStatus, BookingType, SectorStatus, TaskStatus


# -- field helpers -------------------------------------------------------

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def required_text(value: Any, message: str, max_length: Optional[int] = None, too_long: Optional[str] = None) -> str:
    if _is_blank(value) or not isinstance(value, str):
        raise PydanticCustomError("required", message)
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise PydanticCustomError("too_long", too_long or f"Cannot exceed {max_length} characters.")
    return value


def optional_text(value: Any, max_length: int, too_long: str) -> Optional[str]:
    if _is_blank(value):
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Must be text.")
    value = value.strip()
    if len(value) > max_length:
        raise PydanticCustomError("too_long", too_long)
    return value


def optional_date(value: Any, message: str) -> Optional[date]:
    """Parse YYYY-MM-DD or a full ISO timestamp into a calendar date."""
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise PydanticCustomError("date_type", message)
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise PydanticCustomError("date_parsing", message)


def uuid_text(value: Any, message: str, required: bool = True) -> Optional[str]:
    if _is_blank(value):
        if required:
            raise PydanticCustomError("uuid_required", message)
        return None
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, TypeError):
        raise PydanticCustomError("uuid_parsing", message)


def choice(value: Any, enum_class: Type[Enum], message: str) -> Enum:
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError):
        raise PydanticCustomError("enum", message)


class FormSchema(BaseModel):
    """Base for form schemas; defaults are validated so missing fields get the same messages."""
    model_config = ConfigDict(validate_default=True, extra="ignore", frozen=True)


# -- customers -----------------------------------------------------------

class CustomerInput(FormSchema):
    company_name: str = None

    @field_validator("company_name", mode="before")
    @classmethod
    def _company_name(cls, v):
        return required_text(v, "Company name is required", 255, "Company name cannot exceed 255 characters.")


# -- fare classes --------------------------------------------------------

class FareClassInput(FormSchema):
    name: str = None
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return required_text(v, "Fare class name is required.", 50, "Name cannot exceed 50 characters.")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return optional_text(v, 255, "Description cannot exceed 255 characters.")


# -- predefined sectors --------------------------------------------------

def _airport_code(value: Any, label: str) -> str:
    if _is_blank(value) or not isinstance(value, str) or len(value.strip()) < 3:
        raise PydanticCustomError("too_short", f"{label} code must be at least 3 characters")
    value = value.strip().upper()
    if len(value) > 10:
        raise PydanticCustomError("too_long", f"{label} code cannot exceed 10 characters")
    return value


class SectorInput(FormSchema):
    origin_code: str = None
    destination_code: str = None
    description: Optional[str] = None

    @field_validator("origin_code", mode="before")
    @classmethod
    def _origin(cls, v):
        return _airport_code(v, "Origin")

    @field_validator("destination_code", mode="before")
    @classmethod
    def _destination(cls, v):
        return _airport_code(v, "Destination")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return optional_text(v, 255, "Description cannot exceed 255 characters.")


# -- tasks ---------------------------------------------------------------

class TaskInput(FormSchema):
    """
    Task form. ``status`` stays None when the form leaves it out; the add
    action then defaults it to Pending and the update action keeps the
    stored status.
    """
    title: str = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None
    booking_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return required_text(v, "Title is required.", 255, "Title cannot exceed 255 characters.")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return optional_text(v, 2000, "Description cannot exceed 2000 characters.")

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return optional_date(v, "Due date must be a valid date.")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        if _is_blank(v):
            return None
        return choice(v, TaskStatus, "Status must be Pending, In Progress or Completed.")

    @field_validator("booking_id", mode="before")
    @classmethod
    def _booking_id(cls, v):
        return optional_text(v, 36, "Invalid booking ID format.")


# -- bookings ------------------------------------------------------------

class BookingSectorInput(FormSchema):
    predefined_sector_id: str = None
    travel_date: Optional[date] = None
    fare_class_id: Optional[str] = None
    flight_number: Optional[str] = None
    status: SectorStatus = None
    num_pax: int = None

    @field_validator("predefined_sector_id", mode="before")
    @classmethod
    def _sector(cls, v):
        return uuid_text(v, "Please select a valid sector.")

    @field_validator("travel_date", mode="before")
    @classmethod
    def _travel_date(cls, v):
        return optional_date(v, "Travel date must be a valid date.")

    @field_validator("fare_class_id", mode="before")
    @classmethod
    def _fare_class(cls, v):
        return uuid_text(v, "Please select a valid fare class.", required=False)

    @field_validator("flight_number", mode="before")
    @classmethod
    def _flight_number(cls, v):
        return optional_text(v, 20, "Flight number cannot exceed 20 characters.")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        if _is_blank(v):
            raise PydanticCustomError("required", "Sector status is required.")
        return choice(v, SectorStatus, "Sector status must be Confirmed or Waiting List.")

    @field_validator("num_pax", mode="before")
    @classmethod
    def _num_pax(cls, v):
        # zero is allowed for sectors still being arranged
        if isinstance(v, bool) or _is_blank(v):
            raise PydanticCustomError("int_type", "Must be a whole number.")
        try:
            number = int(str(v).strip())
        except ValueError:
            raise PydanticCustomError("int_parsing", "Must be a whole number.")
        if number < 0:
            raise PydanticCustomError("too_small", "Passenger count cannot be negative.")
        if number > 999:
            raise PydanticCustomError("too_large", "Maximum 999 passengers.")
        return number


class BookingInput(FormSchema):
    customer_id: str = None
    booking_type: BookingType = None
    booking_reference: str = None
    deadline: Optional[date] = None
    sectors: List[BookingSectorInput] = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer(cls, v):
        return uuid_text(v, "Please select a valid customer.")

    @field_validator("booking_type", mode="before")
    @classmethod
    def _booking_type(cls, v):
        if _is_blank(v):
            raise PydanticCustomError("required", "Booking type is required.")
        return choice(v, BookingType, "Booking type must be One-Way or Return.")

    @field_validator("booking_reference", mode="before")
    @classmethod
    def _reference(cls, v):
        return required_text(v, "Booking reference is required.", 50, "Booking reference cannot exceed 50 characters.")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, v):
        return optional_date(v, "Deadline must be a valid date.")

    @field_validator("sectors", mode="before")
    @classmethod
    def _parse_sectors(cls, v):
        if isinstance(v, str):
            try:
                v = json.loads(v) if v.strip() else None
            except ValueError:
                raise PydanticCustomError("sectors_json", "Sectors could not be read.")
        if not v:
            raise PydanticCustomError("too_short", "At least one sector is required.")
        if not isinstance(v, (list, tuple)):
            raise PydanticCustomError("sectors_json", "Sectors could not be read.")
        return list(v)

    @field_validator("sectors")
    @classmethod
    def _sector_count(cls, v, info: ValidationInfo):
        booking_type = info.data.get("booking_type")
        if booking_type == BookingType.ONE_WAY and len(v) != 1:
            raise PydanticCustomError("sector_count", "One-Way bookings must have exactly one sector.")
        if booking_type == BookingType.RETURN and len(v) != 2:
            raise PydanticCustomError("sector_count", "Return bookings must have exactly two sectors.")
        return v


class BookingUpdateInput(FormSchema):
    booking_reference: str = None
    customer_id: str = None
    status: BookingStatus = None
    deadline: Optional[date] = None

    @field_validator("booking_reference", mode="before")
    @classmethod
    def _reference(cls, v):
        return required_text(v, "Booking reference is required", 50, "Booking reference cannot exceed 50 characters.")

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer(cls, v):
        return uuid_text(v, "Please select a valid customer")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        if _is_blank(v):
            raise PydanticCustomError("required", "Booking status is required for update.")
        return choice(v, BookingStatus, "Invalid booking status.")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, v):
        return optional_date(v, "Deadline must be a valid date.")
