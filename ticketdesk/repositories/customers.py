"""Customer repository."""

from ..database.store import Order
from ..models.records import CustomerModel
from .base import TableRepository


class CustomerRepository(TableRepository[CustomerModel]):
    table = "customers"
    model = CustomerModel
    default_ordering = (Order("company_name", ignore_case=True), Order("created_at"), Order("id"))
