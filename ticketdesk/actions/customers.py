"""
Customer actions.

Customers referenced by bookings cannot be deleted; the store's foreign key
rejects the delete and the operator is told which dependency blocks it.
"""

import logging
from typing import Any, List, Optional

from ..database.store import Order
from ..models.enums import ViewName
from ..models.errors import TrackerError
from ..models.records import CustomerModel
from ..models.results import FormState, SortSpec
from ..validation import validate_customer
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

DEFAULT_SORT = SortSpec(sort_by="company_name", ascending=True)
SORTABLE = ("company_name", "created_at")

IN_USE_MESSAGE = "Cannot delete customer because they are associated with existing bookings."


def add_customer(ctx: ActionContext, form: Any) -> FormState:
    validated = validate_customer(form)
    if not validated.ok:
        return validation_failed(validated.errors)

    try:
        customer = ctx.customers.insert({"company_name": validated.value.company_name}).unwrap()
    except TrackerError as e:
        return failed(e, "customer", "add")

    logger.info(f"Customer {customer.id} added")
    return succeeded(ctx, "Successfully added customer", [ViewName.CUSTOMERS], record_id=customer.id)


def update_customer(ctx: ActionContext, customer_id: str, form: Any) -> FormState:
    if not customer_id:
        return missing_id("customer", "update")

    validated = validate_customer(form)
    if not validated.ok:
        return validation_failed(validated.errors)

    try:
        ctx.customers.update(customer_id, {"company_name": validated.value.company_name}).unwrap()
    except TrackerError as e:
        return failed(e, "customer", "update")

    logger.info(f"Customer {customer_id} updated")
    # booking lists show the company name
    return succeeded(
        ctx,
        "Successfully updated customer",
        [ViewName.CUSTOMERS, ViewName.BOOKINGS, ViewName.TASKS],
        record_id=customer_id,
    )


def delete_customer(ctx: ActionContext, customer_id: str) -> FormState:
    if not customer_id:
        return missing_id("customer", "delete")

    try:
        ctx.customers.delete(customer_id).unwrap()
    except TrackerError as e:
        return failed(e, "customer", "delete", integrity_message=IN_USE_MESSAGE)

    logger.info(f"Customer {customer_id} deleted")
    return succeeded(ctx, "Successfully deleted customer", [ViewName.CUSTOMERS], record_id=customer_id)


def list_customers(ctx: ActionContext, sort: Optional[SortSpec] = None) -> List[CustomerModel]:
    sort = resolve_sort(sort, SORTABLE, DEFAULT_SORT)
    ordering = (
        Order(sort.sort_by, sort.ascending, ignore_case=sort.sort_by == "company_name"),
        Order("created_at"),
        Order("id"),
    )
    result = ctx.read_view(
        ViewName.CUSTOMERS,
        CustomerModel,
        lambda: ctx.customers.list(ordering=ordering),
        *sort_parts(sort),
    )
    return load_list(result, "customers")


def get_customer_by_id(ctx: ActionContext, customer_id: str) -> Optional[CustomerModel]:
    if not customer_id:
        return None
    result = ctx.customers.get_by_id(customer_id)
    if not result.ok:
        logger.error(f"Failed to fetch customer {customer_id}: {result.error.message}")
        return None
    return result.data
