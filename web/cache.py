"""Catalog cache wiring: the once-loaded CatalogStore lives on app.state."""

import logging

from config import Config
from data.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


def init_app_state(state, config: Config, store: CatalogStore | None = None) -> CatalogStore:
    """Attach configs and an (unloaded) CatalogStore to app.state. Called by main.py."""
    if store is None:
        store = CatalogStore(
            source=config.catalog.source,
            timeout=config.catalog.fetch_timeout,
        )
    state.catalog_store = store
    state.catalog_config = config.catalog
    state.site_config = config.site
    state.web_config = config.web
    return store


async def warm_catalog(state) -> bool:
    """Trigger the one-time catalog load. Returns False when it failed."""
    store = getattr(state, "catalog_store", None)
    if store is None:
        return False
    videos = await store.ensure_loaded()
    if store.failed:
        logger.error("Catalog unavailable; API will report the load failure")
        return False
    logger.info("Catalog ready with %d videos", len(videos))
    return True
