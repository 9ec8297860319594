"""Shared constants and payload builders used across web routers.

Everything here returns plain data for the client-rendered pages; no markup.
"""

from fastapi.responses import JSONResponse

from config import SiteConfig
from data.catalog_store import Video
from utils import format_date, format_duration, slugify

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_ERROR_MESSAGES = {
    "load_failed": "We could not load the video library right now. Please refresh the page.",
    "category_not_found": "Category not found.",
    "video_not_found": "Video not found.",
}

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={yt_id}"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{yt_id}"

_EDUCATIONAL_POINTS_MAX = 6
_EDUCATIONAL_TAGS_MAX = 4


def embed_url(video: Video) -> str:
    return YOUTUBE_EMBED_URL.format(yt_id=video.yt_id) if video.yt_id else ""


def error_response(key: str, status_code: int) -> JSONResponse:
    """JSON error body with a user-facing message."""
    return JSONResponse({"error": _ERROR_MESSAGES[key]}, status_code=status_code)


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

def video_path(site: SiteConfig, slug: str) -> str:
    return f"{site.base_path}/videos/{slug}/"


def category_path(site: SiteConfig, name: str) -> str:
    return f"{site.base_path}/categories/{slugify(name)}/"


def thumb_or_default(site: SiteConfig, thumb_url: str) -> str:
    return thumb_url or site.default_thumb


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

def video_card(video: Video, site: SiteConfig) -> dict:
    """Listing-grid payload for one video."""
    return {
        "slug": video.slug,
        "title": video.title,
        "url": video_path(site, video.slug),
        "thumb_url": thumb_or_default(site, video.thumb_url),
        "published": video.published_iso,
        "published_display": format_date(video.published),
        "duration": video.duration,
        "duration_display": format_duration(video.duration),
        "description_short": video.description_short,
    }


def category_card(name: str, videos: list[Video], site: SiteConfig) -> dict:
    """Category tile: first (newest) video's thumbnail plus the count."""
    return {
        "name": name,
        "slug": slugify(name),
        "url": category_path(site, name),
        "count": len(videos),
        "thumb_url": thumb_or_default(site, videos[0].thumb_url if videos else ""),
    }


# ---------------------------------------------------------------------------
# Detail page content
# ---------------------------------------------------------------------------

def category_intro_text(category: str) -> str:
    return (
        f"Sing, dance, and imagine with our {category.lower()} collection. "
        "These Malayalam kids videos blend Kerala rhythms, stories, and bright "
        "characters to make family screen time meaningful."
    )


def educational_points(video: Video) -> list[str]:
    """Learning highlights derived from the first tags and every category, deduplicated."""
    points: list[str] = []
    candidates = [f"Encourages learning about {tag.lower()}."
                  for tag in video.tags[:_EDUCATIONAL_TAGS_MAX]]
    candidates += [f"Celebrates {category.lower()} themes with Malayalam vocabulary."
                   for category in video.categories]
    for point in candidates:
        if point not in points:
            points.append(point)
    return points[:_EDUCATIONAL_POINTS_MAX]


def lyrics_stanzas(lyrics) -> list[list[str]]:
    """Split each stanza into its lines. Non-list or empty lyrics give []."""
    if not lyrics or isinstance(lyrics, str):
        return []
    return [stanza.split("\n") for stanza in lyrics]


def breadcrumbs(video: Video, site: SiteConfig) -> list[dict]:
    return [
        {"label": "Home", "url": f"{site.base_path}/"},
        {"label": "Videos", "url": f"{site.base_path}/videos/"},
        {"label": video.title, "url": None},
    ]


def video_detail(video: Video, site: SiteConfig) -> dict:
    """Full payload for a video page."""
    watch_url = YOUTUBE_WATCH_URL.format(yt_id=video.yt_id) if video.yt_id else ""
    return {
        **video_card(video, site),
        "description_long": video.description_long,
        "tags": list(video.tags),
        "categories": [
            {"name": c, "slug": slugify(c), "url": category_path(site, c)}
            for c in video.categories
        ],
        "embed_url": embed_url(video),
        "watch_url": watch_url,
        "channel_url": site.channel_url,
        "playlist_urls": list(video.playlist_urls),
        "lyrics": lyrics_stanzas(video.lyrics),
        "educational_points": educational_points(video),
    }
