"""
Record models for the ticketdesk application.

This module contains the Pydantic models that repositories map store rows
into: customers, predefined sectors, fare classes, bookings with their
sectors, and follow-up tasks including the composite task view that
carries a booking summary.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, computed_field

from .enums import BookingStatus, BookingType, SectorStatus, TaskStatus


class CustomerModel(BaseModel):
    """Customer company that bookings are made for."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_name: str = Field(..., max_length=255, description="Company name")
    created_at: datetime


class PredefinedSectorModel(BaseModel):
    """
    Predefined origin/destination pair.

    Reference data used to pre-fill booking sectors; listed ordered by
    origin code then destination code.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    origin_code: str = Field(..., max_length=10, description="Origin airport/city code")
    destination_code: str = Field(..., max_length=10, description="Destination airport/city code")
    description: Optional[str] = Field(None, max_length=255)
    created_at: datetime

    @property
    def label(self) -> str:
        return f"{self.origin_code}-{self.destination_code}"


class FareClassModel(BaseModel):
    """Named fare class attachable to booking sectors."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = Field(..., max_length=50, description="Fare class name")
    description: Optional[str] = Field(None, max_length=255)
    created_at: datetime
    updated_at: datetime


class BookingSectorModel(BaseModel):
    """
    One flight leg of a booking.

    The origin/destination codes are filled in when the sector is read
    together with its predefined sector.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str
    predefined_sector_id: str
    travel_date: Optional[date] = None
    status: SectorStatus
    fare_class_id: Optional[str] = None
    flight_number: Optional[str] = Field(None, max_length=20)
    num_pax: int
    created_at: datetime

    origin_code: Optional[str] = None
    destination_code: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        if not self.origin_code or not self.destination_code:
            return None
        return f"{self.origin_code}-{self.destination_code}"


class BookingModel(BaseModel):
    """Ticket booking for a customer."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str = Field(..., description="Associated customer ID")
    booking_reference: str = Field(..., max_length=50)
    booking_type: BookingType
    num_pax: int = Field(..., description="Total passengers over all sectors")
    deadline: Optional[date] = None
    status: BookingStatus
    created_at: datetime
    updated_at: datetime


class BookingWithDetails(BookingModel):
    """Booking joined with its customer name and sectors for display."""

    customer_name: Optional[str] = None
    sectors: List[BookingSectorModel] = Field(default_factory=list)

    @computed_field
    @property
    def route(self) -> Optional[str]:
        labels = [sector.label for sector in self.sectors if sector.label]
        return " / ".join(labels) if labels else None


class BookingSummaryModel(BaseModel):
    """Minimal booking fields shown next to a task."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_reference: str
    customer_name: Optional[str] = None
    route: Optional[str] = None
    status: BookingStatus


class TaskModel(BaseModel):
    """Follow-up task, optionally tied to a booking."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: TaskStatus = TaskStatus.PENDING
    booking_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


class TaskWithBookingInfo(TaskModel):
    """
    Task joined with a summary of its linked booking.

    ``booking`` is None when no booking is linked or when the linked
    booking can no longer be found.
    """

    booking: Optional[BookingSummaryModel] = None
