"""
Booking actions.

A booking is written in two steps: the booking row, then its sectors in a
single insert. If the sectors are rejected the booking row is deleted
again so no booking is left without sectors. Booking status and passenger
count are derived from the sectors on creation:

- status is Waiting List when any sector is waiting-listed, else Confirmed
- num_pax is the sum of the sector passenger counts
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..database.store import Order
from ..models.enums import BookingStatus, SectorStatus, ViewName
from ..models.errors import TrackerError
from ..models.records import (
    BookingWithDetails,
    CustomerModel,
    FareClassModel,
    PredefinedSectorModel,
)
from ..models.results import FormState, SortSpec
from ..validation import BookingInput, validate_booking, validate_booking_update
from .base import (
    ActionContext,
    failed,
    load_list,
    missing_id,
    resolve_sort,
    sort_parts,
    succeeded,
    validation_failed,
)
from .customers import list_customers
from .fare_classes import list_fare_classes
from .sectors import list_sectors

logger = logging.getLogger(__name__)

DEFAULT_SORT = SortSpec(sort_by="created_at", ascending=False)
SORTABLE = ("created_at", "updated_at", "booking_reference", "deadline", "status")

IN_USE_MESSAGE = "Cannot delete booking because it is linked to existing tasks."
CUSTOMER_NOT_FOUND = {"customer_id": ["Customer not found."]}


class BookingFormOptions(BaseModel):
    """Dropdown contents for the booking form, each in its display order."""
    customers: List[CustomerModel] = Field(default_factory=list)
    sectors: List[PredefinedSectorModel] = Field(default_factory=list)
    fare_classes: List[FareClassModel] = Field(default_factory=list)


def booking_status_for(booking: BookingInput) -> BookingStatus:
    if any(sector.status == SectorStatus.WAITING_LIST for sector in booking.sectors):
        return BookingStatus.WAITING_LIST
    return BookingStatus.CONFIRMED


def _sector_rows(booking_id: str, booking: BookingInput) -> List[Dict[str, Any]]:
    return [
        {
            "booking_id": booking_id,
            "predefined_sector_id": sector.predefined_sector_id,
            "travel_date": sector.travel_date,
            "fare_class_id": sector.fare_class_id,
            "flight_number": sector.flight_number,
            "status": sector.status.value,
            "num_pax": sector.num_pax,
        }
        for sector in booking.sectors
    ]


def add_booking(ctx: ActionContext, form: Any) -> FormState:
    validated = validate_booking(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    booking = validated.value

    try:
        if not ctx.customers.exists(booking.customer_id).unwrap():
            return validation_failed(CUSTOMER_NOT_FOUND)
        created = ctx.bookings.insert({
            "customer_id": booking.customer_id,
            "booking_reference": booking.booking_reference,
            "booking_type": booking.booking_type.value,
            "num_pax": sum(sector.num_pax for sector in booking.sectors),
            "deadline": booking.deadline,
            "status": booking_status_for(booking).value,
        }).unwrap()
    except TrackerError as e:
        return failed(e, "booking", "create")

    sectors = ctx.bookings.insert_sectors(_sector_rows(created.id, booking))
    if not sectors.ok:
        logger.warning(f"Sectors for booking {created.id} rejected, rolling the booking back")
        rollback = ctx.bookings.delete(created.id)
        if not rollback.ok:
            logger.error(f"Rollback of booking {created.id} failed: {rollback.error.message}")
        return FormState(
            message=(
                "Database Error: Failed to add sectors after booking was created. "
                f"Booking creation rolled back. {sectors.error.message}"
            )
        )

    logger.info(f"Booking {created.id} ({created.booking_reference}) added with {len(sectors.data)} sector(s)")
    return succeeded(
        ctx,
        "Successfully added booking",
        [ViewName.BOOKINGS, ViewName.DASHBOARD],
        record_id=created.id,
    )


def update_booking(ctx: ActionContext, booking_id: str, form: Any) -> FormState:
    if not booking_id:
        return missing_id("booking", "update")

    validated = validate_booking_update(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    booking = validated.value

    try:
        if not ctx.customers.exists(booking.customer_id).unwrap():
            return validation_failed(CUSTOMER_NOT_FOUND)
        ctx.bookings.update(booking_id, {
            "booking_reference": booking.booking_reference,
            "customer_id": booking.customer_id,
            "status": booking.status.value,
            "deadline": booking.deadline,
        }).unwrap()
    except TrackerError as e:
        return failed(e, "booking", "update")

    logger.info(f"Booking {booking_id} updated")
    # tasks show the booking reference and status
    return succeeded(
        ctx,
        "Successfully updated booking",
        [ViewName.BOOKINGS, ViewName.DASHBOARD, ViewName.TASKS],
        record_id=booking_id,
    )


def delete_booking(ctx: ActionContext, booking_id: str) -> FormState:
    """Delete a booking and, through the cascade, its sectors."""
    if not booking_id:
        return missing_id("booking", "delete")

    try:
        ctx.bookings.delete(booking_id).unwrap()
    except TrackerError as e:
        return failed(e, "booking", "delete", integrity_message=IN_USE_MESSAGE)

    logger.info(f"Booking {booking_id} deleted")
    return succeeded(
        ctx,
        "Successfully deleted booking",
        [ViewName.BOOKINGS, ViewName.DASHBOARD],
        record_id=booking_id,
    )


def list_bookings(ctx: ActionContext, sort: Optional[SortSpec] = None) -> List[BookingWithDetails]:
    """Bookings with customer name and sectors, newest first by default."""
    sort = resolve_sort(sort, SORTABLE, DEFAULT_SORT)
    ordering = (Order(sort.sort_by, sort.ascending, nulls_last=True), Order("id"))
    result = ctx.read_view(
        ViewName.BOOKINGS,
        BookingWithDetails,
        lambda: ctx.bookings.list_with_details(ordering=ordering),
        *sort_parts(sort),
    )
    return load_list(result, "bookings")


def get_booking_by_id(ctx: ActionContext, booking_id: str) -> Optional[BookingWithDetails]:
    if not booking_id:
        return None
    result = ctx.bookings.get_with_details(booking_id)
    if not result.ok:
        logger.error(f"Failed to fetch booking {booking_id}: {result.error.message}")
        return None
    return result.data


def get_booking_form_options(ctx: ActionContext) -> BookingFormOptions:
    return BookingFormOptions(
        customers=list_customers(ctx),
        sectors=list_sectors(ctx),
        fare_classes=list_fare_classes(ctx),
    )


def get_booking_status_counts(ctx: ActionContext) -> Dict[str, int]:
    result = ctx.bookings.status_counts()
    if not result.ok:
        logger.error(f"Failed to count bookings by status: {result.error.message}")
        return {}
    return result.data
