"""Page data routes: homepage, categories index, category page."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config import CatalogConfig, SiteConfig
from data.catalog_query import categories_by_size, find_category, latest_videos
from data.catalog_store import CatalogStore
from web.deps import get_catalog_config, get_loaded_store, get_site_config
from web.helpers import category_card, category_intro_text, error_response, video_card
from web.seo import category_meta, home_json_ld
from web.shared import limiter
from utils import slugify

router = APIRouter()


@router.get("/api/home")
@limiter.limit("60/minute")
async def home(
    request: Request,
    store: CatalogStore = Depends(get_loaded_store),
    cat_cfg: CatalogConfig = Depends(get_catalog_config),
    site: SiteConfig = Depends(get_site_config),
):
    """Homepage: latest videos, most popular categories, site JSON-LD."""
    if store.failed:
        return error_response("load_failed", 503)
    return JSONResponse({
        "site": {
            "channel_name": site.channel_name,
            "channel_tagline": site.channel_tagline,
            "channel_url": site.channel_url,
            "playlist_url": site.playlist_url,
            "contact_email": site.contact_email,
        },
        "latest": [video_card(v, site) for v in latest_videos(store, cat_cfg.latest_count)],
        "popular_categories": [
            category_card(name, videos, site)
            for name, videos in categories_by_size(store, limit=cat_cfg.popular_count)
        ],
        "json_ld": home_json_ld(site),
    })


@router.get("/api/categories")
@limiter.limit("60/minute")
async def categories_index(
    request: Request,
    store: CatalogStore = Depends(get_loaded_store),
    site: SiteConfig = Depends(get_site_config),
):
    """All categories, largest first."""
    if store.failed:
        return error_response("load_failed", 503)
    return JSONResponse({
        "categories": [category_card(name, videos, site)
                       for name, videos in categories_by_size(store)],
    })


@router.get("/api/categories/{slug}")
@limiter.limit("60/minute")
async def category_page(
    request: Request,
    slug: str,
    store: CatalogStore = Depends(get_loaded_store),
    site: SiteConfig = Depends(get_site_config),
):
    """One category's videos (newest first) with intro text and meta tags."""
    if store.failed:
        return error_response("load_failed", 503)
    name = find_category(store, slug)
    if not name:
        return error_response("category_not_found", 404)
    videos = store.categories.get(name, [])
    return JSONResponse({
        "category": category_card(name, videos, site),
        "heading": f"{name} Malayalam Kids Songs",
        "intro": category_intro_text(name),
        "videos": [video_card(v, site) for v in videos],
        "meta": category_meta(site, name, slugify(name), len(videos)),
    })
