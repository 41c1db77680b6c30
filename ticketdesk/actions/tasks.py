"""
Task actions.

Tasks are listed with a summary of their linked booking. The summary is
composed from a secondary booking lookup, so a task whose booking id no
longer resolves is shown with ``booking=None`` instead of failing the
whole list.

Completed tasks are hidden by ``filter_visible_tasks``, a display filter
applied to the already fetched list.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..models.enums import TaskStatus, ViewName
from ..models.errors import TrackerError
from ..models.records import TaskModel, TaskWithBookingInfo
from ..models.results import FormState, SortSpec, StoreResult
from ..repositories import SORTABLE_COLUMNS
from ..validation import TaskInput, validate_task
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

DEFAULT_SORT = SortSpec(sort_by="due_date", ascending=True)

BOOKING_NOT_FOUND = {"booking_id": ["Linked booking not found."]}

TASK_VIEWS = (ViewName.TASKS, ViewName.DASHBOARD)


def _booking_missing(ctx: ActionContext, task: TaskInput) -> bool:
    """True when the task names a booking that does not exist."""
    if task.booking_id is None:
        return False
    return not ctx.bookings.exists(task.booking_id).unwrap()


def add_task(ctx: ActionContext, form: Any) -> FormState:
    validated = validate_task(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    task = validated.value

    try:
        if _booking_missing(ctx, task):
            return validation_failed(BOOKING_NOT_FOUND)
        created = ctx.tasks.insert({
            "title": task.title,
            "description": task.description,
            "due_date": task.due_date,
            "status": (task.status or TaskStatus.PENDING).value,
            "booking_id": task.booking_id,
        }).unwrap()
    except TrackerError as e:
        return failed(e, "task", "create")

    logger.info(f"Task #{created.id} created")
    return succeeded(ctx, "Successfully created task", TASK_VIEWS, record_id=created.id)


def update_task(ctx: ActionContext, task_id: Optional[int], form: Any) -> FormState:
    """Update every task field; a status left out of the form keeps the stored one."""
    if not task_id:
        return missing_id("task", "update")

    validated = validate_task(form)
    if not validated.ok:
        return validation_failed(validated.errors)
    task = validated.value

    fields = {
        "title": task.title,
        "description": task.description,
        "due_date": task.due_date,
        "booking_id": task.booking_id,
    }
    if task.status is not None:
        fields["status"] = task.status.value

    try:
        if _booking_missing(ctx, task):
            return validation_failed(BOOKING_NOT_FOUND)
        ctx.tasks.update(task_id, fields).unwrap()
    except TrackerError as e:
        return failed(e, "task", "update")

    logger.info(f"Task #{task_id} updated")
    return succeeded(ctx, "Successfully updated task", TASK_VIEWS, record_id=task_id)


def set_task_completed(ctx: ActionContext, task_id: Optional[int], completed: bool = True) -> FormState:
    """Mark a task Completed, or reopen it as Pending, leaving other fields alone."""
    if not task_id:
        return missing_id("task", "update")

    status = TaskStatus.COMPLETED if completed else TaskStatus.PENDING
    try:
        ctx.tasks.update(task_id, {"status": status.value}).unwrap()
    except TrackerError as e:
        return failed(e, "task", "update")

    verb = "completed" if completed else "reopened"
    logger.info(f"Task #{task_id} {verb}")
    return succeeded(ctx, f"Successfully {verb} task", TASK_VIEWS, record_id=task_id)


def delete_task(ctx: ActionContext, task_id: Optional[int]) -> FormState:
    if not task_id:
        return missing_id("task", "delete")

    try:
        ctx.tasks.delete(task_id).unwrap()
    except TrackerError as e:
        return failed(e, "task", "delete")

    logger.info(f"Task #{task_id} deleted")
    return succeeded(ctx, "Successfully deleted task", TASK_VIEWS, record_id=task_id)


def _with_booking_info(ctx: ActionContext, tasks: List[TaskModel]) -> StoreResult[List[TaskWithBookingInfo]]:
    try:
        summaries = ctx.bookings.summaries(
            task.booking_id for task in tasks if task.booking_id
        ).unwrap()
    except TrackerError as e:
        return StoreResult(error=e.to_failure())

    joined = []
    for task in tasks:
        booking = summaries.get(task.booking_id) if task.booking_id else None
        if task.booking_id and booking is None:
            logger.warning(f"Task #{task.id} links to missing booking {task.booking_id}")
        joined.append(TaskWithBookingInfo(**task.model_dump(exclude={"completed"}), booking=booking))
    return StoreResult(data=joined)


def get_tasks(ctx: ActionContext, sort: Optional[SortSpec] = None) -> List[TaskWithBookingInfo]:
    """
    All tasks with their booking summary.

    Tasks are ordered by the requested column (due date ascending by
    default). Tasks without a value in that column come last and tasks
    with equal values keep their stored order.
    """
    sort = resolve_sort(sort, SORTABLE_COLUMNS, DEFAULT_SORT)

    def load() -> StoreResult[List[TaskWithBookingInfo]]:
        try:
            tasks = ctx.tasks.list_sorted(sort.sort_by, sort.ascending).unwrap()
        except TrackerError as e:
            return StoreResult(error=e.to_failure())
        return _with_booking_info(ctx, tasks)

    result = ctx.read_view(ViewName.TASKS, TaskWithBookingInfo, load, *sort_parts(sort))
    return load_list(result, "tasks")


def get_task_by_id(ctx: ActionContext, task_id: Optional[int]) -> Optional[TaskModel]:
    if not task_id:
        return None
    result = ctx.tasks.get_by_id(task_id)
    if not result.ok:
        logger.error(f"Failed to fetch task #{task_id}: {result.error.message}")
        return None
    return result.data


def filter_visible_tasks(tasks: Iterable[TaskModel], show_completed: bool = False) -> List[TaskModel]:
    tasks = list(tasks)
    if show_completed:
        return tasks
    return [task for task in tasks if not task.completed]
