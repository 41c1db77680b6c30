"""Predefined sector repository."""

from ..database.store import Order
from ..models.records import PredefinedSectorModel
from .base import TableRepository


class PredefinedSectorRepository(TableRepository[PredefinedSectorModel]):
    """Sectors always list by origin code, then destination code."""
    table = "predefined_sectors"
    model = PredefinedSectorModel
    default_ordering = (Order("origin_code"), Order("destination_code"))
