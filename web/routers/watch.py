"""Video page route: detail payload, related videos, SEO metadata."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config import CatalogConfig, SiteConfig
from data.catalog_query import find_video, related_videos
from data.catalog_store import CatalogStore
from web.deps import get_catalog_config, get_loaded_store, get_site_config
from web.helpers import breadcrumbs, error_response, video_card, video_detail, video_path
from web.seo import video_json_ld, video_meta
from web.shared import limiter

router = APIRouter()


@router.get("/api/videos/{slug}")
@limiter.limit("60/minute")
async def video_page(
    request: Request,
    slug: str,
    store: CatalogStore = Depends(get_loaded_store),
    cat_cfg: CatalogConfig = Depends(get_catalog_config),
    site: SiteConfig = Depends(get_site_config),
):
    """Everything the video page needs in one response."""
    if store.failed:
        return error_response("load_failed", 503)
    video = find_video(store, slug)
    if not video:
        return error_response("video_not_found", 404)
    related = related_videos(video, store.videos, cat_cfg.related_count)
    more = related_videos(video, store.videos, cat_cfg.more_count,
                          exclude_slug=video.slug, fill_from_whole_pool=True)
    return JSONResponse({
        "video": video_detail(video, site),
        "breadcrumbs": breadcrumbs(video, site),
        "related": [video_card(v, site) for v in related],
        "more": [
            {"url": video_path(site, v.slug),
             "label": f"Discover the {v.title} video story"}
            for v in more
        ],
        "meta": video_meta(site, video),
        "json_ld": video_json_ld(site, video),
        "robots": "index, follow",
    })
