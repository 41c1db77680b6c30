"""
Valkey cache package for ticketdesk list views.
"""

from .config import ValkeyConfig
from .views import ViewCache

__all__ = [
    "ValkeyConfig",
    "ViewCache",
]
