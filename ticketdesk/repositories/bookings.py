"""
Booking repository.

Besides the plain table operations this repository composes the display
shapes that need data from several tables: bookings with their customer
name and sectors, and the booking summaries shown next to tasks. The
composition is done with secondary lookups by id rather than SQL joins so
it only needs the generic store interface.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..database.store import Filter, Order
from ..models.errors import TrackerError
from ..models.records import (
    BookingModel,
    BookingSectorModel,
    BookingSummaryModel,
    BookingWithDetails,
)
from ..models.results import StoreResult
from .base import TableRepository

logger = logging.getLogger(__name__)


class BookingRepository(TableRepository[BookingModel]):
    table = "bookings"
    model = BookingModel
    default_ordering = (Order("created_at", ascending=False), Order("id"))

    sectors_table = "booking_sectors"
    sector_ordering = (Order("travel_date", nulls_last=True), Order("created_at"), Order("id"))

    def insert_sectors(self, rows: Sequence[Mapping[str, Any]]) -> StoreResult[List[BookingSectorModel]]:
        """Insert all sectors of a booking in one transaction."""
        return self.store.insert(self.sectors_table, rows).map(
            lambda inserted: [BookingSectorModel.model_validate(row) for row in inserted]
        )

    def sectors_for(self, booking_ids: Iterable[str]) -> StoreResult[Dict[str, List[BookingSectorModel]]]:
        """Sectors grouped by booking id, with origin/destination codes filled in."""
        booking_ids = list(booking_ids)
        grouped: Dict[str, List[BookingSectorModel]] = {booking_id: [] for booking_id in booking_ids}
        if not booking_ids:
            return StoreResult(data=grouped)

        try:
            rows = self.store.select(
                self.sectors_table,
                filters=[Filter("booking_id", "in", booking_ids)],
                ordering=self.sector_ordering,
            ).unwrap()
            sector_ids = {row["predefined_sector_id"] for row in rows}
            routes = {
                row["id"]: row for row in self.store.select(
                    "predefined_sectors",
                    columns=["id", "origin_code", "destination_code"],
                    filters=[Filter("id", "in", sorted(sector_ids))],
                ).unwrap()
            } if sector_ids else {}
        except TrackerError as e:
            return StoreResult(error=e.to_failure())

        for row in rows:
            route = routes.get(row["predefined_sector_id"], {})
            sector = BookingSectorModel.model_validate({
                **row,
                "origin_code": route.get("origin_code"),
                "destination_code": route.get("destination_code"),
            })
            grouped.setdefault(sector.booking_id, []).append(sector)
        return StoreResult(data=grouped)

    def with_details(self, bookings: Sequence[BookingModel]) -> StoreResult[List[BookingWithDetails]]:
        customer_ids = sorted({booking.customer_id for booking in bookings})
        try:
            customers = {
                row["id"]: row["company_name"] for row in self.store.select(
                    "customers",
                    columns=["id", "company_name"],
                    filters=[Filter("id", "in", customer_ids)],
                ).unwrap()
            } if customer_ids else {}
            sectors = self.sectors_for(booking.id for booking in bookings).unwrap()
        except TrackerError as e:
            return StoreResult(error=e.to_failure())

        return StoreResult(data=[
            BookingWithDetails(
                **booking.model_dump(),
                customer_name=customers.get(booking.customer_id),
                sectors=sectors.get(booking.id, []),
            )
            for booking in bookings
        ])

    def list_with_details(self, ordering: Optional[Sequence[Order]] = None) -> StoreResult[List[BookingWithDetails]]:
        try:
            bookings = self.list(ordering=ordering).unwrap()
        except TrackerError as e:
            return StoreResult(error=e.to_failure())
        return self.with_details(bookings)

    def get_with_details(self, booking_id: str) -> StoreResult[Optional[BookingWithDetails]]:
        try:
            booking = self.get_by_id(booking_id).unwrap()
        except TrackerError as e:
            return StoreResult(error=e.to_failure())
        if booking is None:
            return StoreResult(data=None)
        return self.with_details([booking]).map(lambda details: details[0])

    def summaries(self, booking_ids: Iterable[str]) -> StoreResult[Dict[str, BookingSummaryModel]]:
        """Booking summaries by id; ids that no longer exist are simply absent."""
        booking_ids = sorted(set(booking_ids))
        if not booking_ids:
            return StoreResult(data={})
        try:
            bookings = self.list(filters=[Filter("id", "in", booking_ids)]).unwrap()
            details = self.with_details(bookings).unwrap()
        except TrackerError as e:
            return StoreResult(error=e.to_failure())

        return StoreResult(data={
            booking.id: BookingSummaryModel(
                id=booking.id,
                booking_reference=booking.booking_reference,
                customer_name=booking.customer_name,
                route=booking.route,
                status=booking.status,
            )
            for booking in details
        })

    def status_counts(self) -> StoreResult[Dict[str, int]]:
        return self.count(group_by="status")
