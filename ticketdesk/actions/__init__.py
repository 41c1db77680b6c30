"""
Domain action layer.

Each action validates raw form input, persists through the repositories
and returns a ``FormState``. Actions never raise for anticipated failures;
the presentation layer only has to render ``message`` and ``errors``.
"""

from .base import ActionContext, InvalidationListener

from .customers import (
    add_customer,
    update_customer,
    delete_customer,
    list_customers,
    get_customer_by_id,
)

from .fare_classes import (
    add_fare_class,
    update_fare_class,
    delete_fare_class,
    list_fare_classes,
    get_fare_class_by_id,
)

from .sectors import (
    add_sector,
    update_sector,
    delete_sector,
    list_sectors,
)

from .bookings import (
    BookingFormOptions,
    add_booking,
    update_booking,
    delete_booking,
    list_bookings,
    get_booking_by_id,
    get_booking_form_options,
    get_booking_status_counts,
)

from .tasks import (
    add_task,
    update_task,
    set_task_completed,
    delete_task,
    get_tasks,
    get_task_by_id,
    filter_visible_tasks,
)

__all__ = [
    "ActionContext",
    "InvalidationListener",

    # Customers
    "add_customer",
    "update_customer",
    "delete_customer",
    "list_customers",
    "get_customer_by_id",

    # Fare classes
    "add_fare_class",
    "update_fare_class",
    "delete_fare_class",
    "list_fare_classes",
    "get_fare_class_by_id",

    # Sectors
    "add_sector",
    "update_sector",
    "delete_sector",
    "list_sectors",

    # Bookings
    "BookingFormOptions",
    "add_booking",
    "update_booking",
    "delete_booking",
    "list_bookings",
    "get_booking_by_id",
    "get_booking_form_options",
    "get_booking_status_counts",

    # Tasks
    "add_task",
    "update_task",
    "set_task_completed",
    "delete_task",
    "get_tasks",
    "get_task_by_id",
    "filter_visible_tasks",
]
