"""
Main entry point for the ticketdesk back office.
"""

import logging

from ticketdesk.actions import ActionContext, get_booking_status_counts
from ticketdesk.cache import ValkeyConfig, ViewCache
from ticketdesk.database import initialize_database
from ticketdesk.utils.config import configure_logging, get_config

logger = logging.getLogger(__name__)


def build_context(db_config, config) -> ActionContext:
    """Action context for the configured store, with the view cache when enabled."""
    view_cache = None
    if config.view_cache_enabled:
        view_cache = ViewCache(ValkeyConfig.from_tracker_config(config), ttl=config.view_cache_ttl)
    return ActionContext(store=db_config.store, view_cache=view_cache)


def main() -> int:
    """Main entry point for ticketdesk."""
    print("Ticketdesk: booking and task tracker")
    print("=" * 50)

    try:
        config = get_config()
        configure_logging(config.log_level)
        print("✓ Configuration loaded successfully")

        db_config = initialize_database(config.database_url, echo=config.database_echo)
        info = db_config.get_connection_info()
        print(f"✓ Database ready: {info['database_type']} ({info['database_url']})")

        ctx = build_context(db_config, config)
        if ctx.view_cache is not None:
            print(f"✓ View cache: {ctx.view_cache.config} (ttl {ctx.view_cache.ttl}s)")

        counts = get_booking_status_counts(ctx)
        total = sum(counts.values())
        print(f"📚 {total} booking(s) on file")
        for status, count in sorted(counts.items()):
            print(f"   {status}: {count}")

    except Exception as e:
        logger.exception("Startup failed")
        print(f"❌ Failed to start ticketdesk: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
