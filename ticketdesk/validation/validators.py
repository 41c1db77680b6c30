"""
Form validation entry points.

Every ``validate_*`` function takes raw, untyped form input (a mapping from
field name to string, or anything with a ``get`` method) and returns a
``ValidationResult`` holding either the typed value or a mapping from
field name to error messages. Nothing here raises for malformed input and
nothing has side effects, so the same function serves add and edit flows.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError

from .schemas import (
    BookingInput,
    BookingUpdateInput,
    CustomerInput,
    FareClassInput,
    FormSchema,
    SectorInput,
    TaskInput,
)

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=FormSchema)

FORM_ERROR_KEY = "_form"


@dataclass(frozen=True)
class ValidationResult(Generic[S]):
    value: Optional[S] = None
    errors: Optional[Dict[str, List[str]]] = None

    @property
    def ok(self) -> bool:
        return self.errors is None


def flatten_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """
    Group pydantic errors by field.

    Nested locations are joined with dots (``sectors.0.num_pax``); errors
    without a location are filed under ``_form``.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or FORM_ERROR_KEY
        errors.setdefault(key, []).append(error["msg"])
    return errors


def read_form(form: Any, fields: List[str], aliases: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Pick the schema's fields out of the raw form; absent fields become None."""
    getter = getattr(form, "get", None)
    if getter is None:
        return {name: None for name in fields}

    data = {}
    for name in fields:
        value = getter(name)
        if value is None and aliases and name in aliases:
            value = getter(aliases[name])
        data[name] = value
    return data


def validate_form(schema: Type[S], form: Any, aliases: Optional[Mapping[str, str]] = None) -> ValidationResult[S]:
    data = read_form(form, list(schema.model_fields), aliases)
    try:
        return ValidationResult(value=schema.model_validate(data))
    except ValidationError as e:
        errors = flatten_errors(e)
        logger.info(f"{schema.__name__} validation failed for fields: {sorted(errors)}")
        return ValidationResult(errors=errors)


def validate_customer(form: Any) -> ValidationResult[CustomerInput]:
    return validate_form(CustomerInput, form)


def validate_fare_class(form: Any) -> ValidationResult[FareClassInput]:
    return validate_form(FareClassInput, form)


def validate_sector(form: Any) -> ValidationResult[SectorInput]:
    return validate_form(SectorInput, form)


def validate_task(form: Any) -> ValidationResult[TaskInput]:
    return validate_form(TaskInput, form)


def validate_booking(form: Any) -> ValidationResult[BookingInput]:
    """Validate a new booking; sectors may come as a list or as JSON under ``sectors_json``."""
    return validate_form(BookingInput, form, aliases={"sectors": "sectors_json"})


def validate_booking_update(form: Any) -> ValidationResult[BookingUpdateInput]:
    return validate_form(BookingUpdateInput, form)
