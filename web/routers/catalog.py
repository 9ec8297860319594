"""Catalog API route: searchable, category-filtered, paginated video listing."""

from fastapi import APIRouter, Depends, Request, Query
from fastapi.responses import JSONResponse

from config import CatalogConfig, SiteConfig
from data.catalog_query import category_names, query
from data.catalog_store import CatalogStore
from web.deps import get_catalog_config, get_loaded_store, get_site_config
from web.helpers import error_response, video_card
from web.shared import limiter

router = APIRouter()


@router.get("/api/videos")
@limiter.limit("60/minute")
async def api_videos(
    request: Request,
    q: str = Query("", max_length=200),
    category: str = Query("", max_length=200),
    page: int = Query(1),
    per_page: int = Query(0, ge=0, le=100),
    store: CatalogStore = Depends(get_loaded_store),
    cat_cfg: CatalogConfig = Depends(get_catalog_config),
    site: SiteConfig = Depends(get_site_config),
):
    """One page of videos matching the search term and category chip.

    per_page=0 uses the configured page size.
    """
    if store.failed:
        return error_response("load_failed", 503)
    result = query(
        store,
        search=q,
        category=category or None,
        page=page,
        per_page=per_page or cat_cfg.per_page,
    )
    return JSONResponse({
        "videos": [video_card(v, site) for v in result.items],
        "page": result.page,
        "total_pages": result.total_pages,
        "total": result.total_count,
        "has_prev": result.has_prev,
        "has_next": result.has_next,
        "status": f"Page {result.page} of {result.total_pages}",
        "categories": category_names(store),
    })
