"""Utility helpers for the ticketdesk application."""

from .config import TrackerConfig, configure_logging, get_config, load_config

__all__ = [
    "TrackerConfig",
    "configure_logging",
    "get_config",
    "load_config",
]
