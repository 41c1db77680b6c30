"""
Ticketdesk: back-office tracker for airline ticket bookings.

The package records customers, predefined origin/destination sectors,
fare classes, bookings built from those sectors, and follow-up tasks
tied to bookings. It is organised in layers:
1. Validation of raw form input
2. Repositories over a generic relational store
3. Domain actions returning structured form states
"""

__version__ = "0.1.0"
