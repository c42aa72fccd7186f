"""
Background Scheduler
====================
Runs one recurring job:

  refresh_park_catalog — every CATALOG_REFRESH_HOURS (default 24h)
      • fetches the resort/park listing from queue-times parks.json
      • swaps it into the running catalog
      • on failure the bundled/previous catalog stays in place

Wait times are never prefetched: the TTL cache fills on demand.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging
from datetime import datetime, timezone

from waitwise import config, runtime
from waitwise.parks.catalog import refresh_catalog

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler(timezone="UTC")


def start_scheduler():
    scheduler.add_job(
        refresh_park_catalog,
        trigger=IntervalTrigger(hours=config.CATALOG_REFRESH_HOURS),
        id="refresh_catalog",
        name=f"Refresh park catalog (every {config.CATALOG_REFRESH_HOURS}h)",
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),  # run immediately on startup
    )
    scheduler.start()
    logger.info(f"Scheduler started — catalog refresh: every {config.CATALOG_REFRESH_HOURS}h")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped.")


# ──────────────────────────────────────────────
# Job: park catalog
# ──────────────────────────────────────────────

async def refresh_park_catalog():
    catalog = runtime.get_catalog()
    if catalog is None:
        logger.warning("Catalog refresh skipped — runtime not started.")
        return
    logger.info("─── refresh_park_catalog started ───")
    await refresh_catalog(catalog, runtime.get_http_client())
    logger.info("─── refresh_park_catalog done ───")
