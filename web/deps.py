"""FastAPI dependency providers — read from app.state, set by main.py."""

from fastapi import Request

from config import CatalogConfig, SiteConfig
from data.catalog_store import CatalogStore


def get_catalog_store(request: Request) -> CatalogStore:
    """CatalogStore instance (may not be loaded yet)."""
    return request.app.state.catalog_store


async def get_loaded_store(request: Request) -> CatalogStore:
    """CatalogStore after its one-time load has been attempted."""
    store = request.app.state.catalog_store
    await store.ensure_loaded()
    return store


def get_catalog_config(request: Request) -> CatalogConfig:
    """CatalogConfig instance."""
    return request.app.state.catalog_config


def get_site_config(request: Request) -> SiteConfig:
    """SiteConfig instance."""
    return request.app.state.site_config
