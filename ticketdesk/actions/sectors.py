"""
Predefined sector actions.

Sectors are reference data for the booking form. They are always listed by
origin code then destination code, and each origin/destination pair may
exist only once.
"""

import logging
from typing import Any, List

from ..models.enums import ViewName
from ..models.errors import TrackerError, UniqueViolationError
from ..models.records import PredefinedSectorModel
from ..models.results import FormState
from ..validation import SectorInput, validate_sector
from .base import (
    ActionContext,
    failed,
    load_list,
    missing_id,
    succeeded,
    validation_failed,
)

logger = logging.getLogger(__name__)

IN_USE_MESSAGE = "Cannot delete sector because it is associated with existing booking sectors."


def _duplicate(sector: SectorInput) -> FormState:
    return FormState(
        message=(
            f"Database Error: A sector with origin {sector.origin_code} and "
            f"destination {sector.destination_code} already exists."
        )
    )


def _fields(sector: SectorInput) -> dict:
    return {
        "origin_code": sector.origin_code,
        "destination_code": sector.destination_code,
        "description": sector.description,
    }


def add_sector(ctx: ActionContext, form: Any) -> FormState:
    validated = validate_sector(form)
    if not validated.ok:
        return validation_failed(validated.errors)

    try:
        sector = ctx.sectors.insert(_fields(validated.value)).unwrap()
    except UniqueViolationError:
        return _duplicate(validated.value)
    except TrackerError as e:
        return failed(e, "sector", "add")

    logger.info(f"Sector {sector.id} ({sector.label}) added")
    return succeeded(ctx, "Successfully added sector", [ViewName.SECTORS], record_id=sector.id)


def update_sector(ctx: ActionContext, sector_id: str, form: Any) -> FormState:
    if not sector_id:
        return missing_id("sector", "update")

    validated = validate_sector(form)
    if not validated.ok:
        return validation_failed(validated.errors)

    try:
        ctx.sectors.update(sector_id, _fields(validated.value)).unwrap()
    except UniqueViolationError:
        return _duplicate(validated.value)
    except TrackerError as e:
        return failed(e, "sector", "update")

    logger.info(f"Sector {sector_id} updated")
    # booking routes are rendered from sector codes
    return succeeded(
        ctx,
        "Successfully updated sector",
        [ViewName.SECTORS, ViewName.BOOKINGS, ViewName.TASKS],
        record_id=sector_id,
    )


def delete_sector(ctx: ActionContext, sector_id: str) -> FormState:
    if not sector_id:
        return missing_id("sector", "delete")

    try:
        ctx.sectors.delete(sector_id).unwrap()
    except TrackerError as e:
        return failed(e, "sector", "delete", integrity_message=IN_USE_MESSAGE)

    logger.info(f"Sector {sector_id} deleted")
    return succeeded(ctx, "Successfully deleted sector", [ViewName.SECTORS], record_id=sector_id)


def list_sectors(ctx: ActionContext) -> List[PredefinedSectorModel]:
    """All predefined sectors ordered by origin code, then destination code."""
    result = ctx.read_view(ViewName.SECTORS, PredefinedSectorModel, ctx.sectors.list)
    return load_list(result, "predefined sectors")
