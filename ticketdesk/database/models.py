"""
SQLAlchemy database models for the ticketdesk system.

This module defines the tables behind the booking tracker:
- Customer: companies bookings are made for
- PredefinedSector: reference origin/destination pairs
- FareClass: named fare classes attachable to booking sectors
- Booking: a customer's ticket booking
- BookingSector: the flight legs of a booking
- Task: follow-up tasks optionally tied to a booking

Foreign keys from bookings to customers, from booking sectors to predefined
sectors and fare classes, and from tasks to bookings are not cascaded, so
deleting a referenced row fails with a foreign-key violation. Booking
sectors are deleted together with their booking.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, Text, Index, UniqueConstraint
)
from sqlalchemy.orm import declarative_base

# Create the declarative base for all models
Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    """Customer company. Referenced by zero or more bookings."""
    __tablename__ = 'customers'

    id = Column(String(36), primary_key=True, default=_new_id)
    company_name = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<Customer(id={self.id}, company_name='{self.company_name}')>"


class PredefinedSector(Base):
    """Origin/destination pair used to pre-fill booking sectors."""
    __tablename__ = 'predefined_sectors'
    __table_args__ = (
        UniqueConstraint('origin_code', 'destination_code', name='uq_predefined_sectors_route'),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    origin_code = Column(String(10), nullable=False)
    destination_code = Column(String(10), nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<PredefinedSector(id={self.id}, route='{self.origin_code}-{self.destination_code}')>"


class FareClass(Base):
    """Fare class. Names are unique by convention, checked case-insensitively by the actions."""
    __tablename__ = 'fare_classes'

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(50), nullable=False, index=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<FareClass(id={self.id}, name='{self.name}')>"


class Booking(Base):
    """Ticket booking for a customer, made up of one or more sectors."""
    __tablename__ = 'bookings'

    id = Column(String(36), primary_key=True, default=_new_id)
    customer_id = Column(String(36), ForeignKey('customers.id'), nullable=False, index=True)
    booking_reference = Column(String(50), nullable=False, index=True)
    booking_type = Column(String(20), nullable=False)
    num_pax = Column(Integer, nullable=False, default=0)
    deadline = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Booking(id={self.id}, reference='{self.booking_reference}', status='{self.status}')>"


class BookingSector(Base):
    """One flight leg of a booking."""
    __tablename__ = 'booking_sectors'

    id = Column(String(36), primary_key=True, default=_new_id)
    booking_id = Column(String(36), ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False, index=True)
    predefined_sector_id = Column(String(36), ForeignKey('predefined_sectors.id'), nullable=False, index=True)
    travel_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False)
    fare_class_id = Column(String(36), ForeignKey('fare_classes.id'), nullable=True, index=True)
    flight_number = Column(String(20), nullable=True)
    num_pax = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<BookingSector(id={self.id}, booking_id={self.booking_id}, status='{self.status}')>"


class Task(Base):
    """Follow-up task, optionally linked to a booking."""
    __tablename__ = 'tasks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True, index=True)
    status = Column(String(20), nullable=False, default='Pending')
    booking_id = Column(String(36), ForeignKey('bookings.id'), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"


# Composite indexes for the list views
Index('idx_tasks_due_date_id', Task.due_date, Task.id)


def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine):
    """
    Drop all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.drop_all(bind=engine)


# Export all models and utilities
__all__ = [
    'Base',
    'Customer',
    'PredefinedSector',
    'FareClass',
    'Booking',
    'BookingSector',
    'Task',
    'create_all_tables',
    'drop_all_tables'
]
