"""
Fare class actions.

Fare class names are unique by convention: the add and update actions
check case-insensitively for another fare class with the same name before
writing.
"""

import logging
from typing import Any, List, Optional

from ..database.store import Order
from ..models.enums import ViewName
from ..models.errors import TrackerError
from ..models.records import FareClassModel
from ..models.results import FormState, SortSpec
from ..validation import validate_fare_class
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

logger = logging.getLogger(__name__)

DEFAULT_SORT = SortSpec(sort_by="name", ascending=True)
SORTABLE = ("name", "created_at", "updated_at")

IN_USE_MESSAGE = "Cannot delete fare class as it is linked to booking sectors."


def add_fare_class(ctx: ActionContext, form: Any) -> FormState:
    validated = validate_fare_class(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    fare_class = validated.value

    try:
        if ctx.fare_classes.find_by_name(fare_class.name).unwrap() is not None:
            return validation_failed({"name": ["This fare class name is already taken."]})
        created = ctx.fare_classes.insert({
            "name": fare_class.name,
            "description": fare_class.description,
        }).unwrap()
    except TrackerError as e:
        return failed(e, "fare class", "add")

    logger.info(f"Fare class {created.id} ({created.name}) added")
    return succeeded(ctx, "Successfully added fare class", [ViewName.FARES], record_id=created.id)


def update_fare_class(ctx: ActionContext, fare_class_id: str, form: Any) -> FormState:
    if not fare_class_id:
        return missing_id("fare class", "update")

    validated = validate_fare_class(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    fare_class = validated.value

    try:
        if ctx.fare_classes.find_by_name(fare_class.name, exclude_id=fare_class_id).unwrap() is not None:
            return validation_failed({"name": ["Another fare class with this name already exists."]})
        ctx.fare_classes.update(fare_class_id, {
            "name": fare_class.name,
            "description": fare_class.description,
        }).unwrap()
    except TrackerError as e:
        return failed(e, "fare class", "update")

    logger.info(f"Fare class {fare_class_id} updated")
    return succeeded(ctx, "Successfully updated fare class", [ViewName.FARES], record_id=fare_class_id)


def delete_fare_class(ctx: ActionContext, fare_class_id: str) -> FormState:
    if not fare_class_id:
        return missing_id("fare class", "delete")

    try:
        ctx.fare_classes.delete(fare_class_id).unwrap()
    except TrackerError as e:
        return failed(e, "fare class", "delete", integrity_message=IN_USE_MESSAGE)

    logger.info(f"Fare class {fare_class_id} deleted")
    return succeeded(ctx, "Successfully deleted fare class", [ViewName.FARES], record_id=fare_class_id)


def list_fare_classes(ctx: ActionContext, sort: Optional[SortSpec] = None) -> List[FareClassModel]:
    """Fare classes, alphabetical by name unless another sort is asked for."""
    sort = resolve_sort(sort, SORTABLE, DEFAULT_SORT)
    ordering = (Order(sort.sort_by, sort.ascending, ignore_case=sort.sort_by == "name"), Order("id"))
    result = ctx.read_view(
        ViewName.FARES,
        FareClassModel,
        lambda: ctx.fare_classes.list(ordering=ordering),
        *sort_parts(sort),
    )
    return load_list(result, "fare classes")


def get_fare_class_by_id(ctx: ActionContext, fare_class_id: str) -> Optional[FareClassModel]:
    if not fare_class_id:
        return None
    result = ctx.fare_classes.get_by_id(fare_class_id)
    if not result.ok:
        logger.error(f"Failed to fetch fare class {fare_class_id}: {result.error.message}")
        return None
    return result.data
