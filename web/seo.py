"""SEO metadata payloads: meta/link tags and schema.org JSON-LD.

The client injects these into <head>; entries with empty values are omitted.
"""

from config import SiteConfig
from data.catalog_store import Video
from web.helpers import embed_url, video_path

_DESCRIPTION_MAX = 157


def _absolute(site: SiteConfig, path: str) -> str:
    """Site-absolute URL for a path under base_path (or the default thumb)."""
    if path.startswith(("http://", "https://")):
        return path
    if site.base_path and path.startswith(site.base_path):
        path = path[len(site.base_path):]
    return f"{site.site_url}{path}"


def default_image(site: SiteConfig) -> str:
    return _absolute(site, site.default_thumb)


def meta_tags(site: SiteConfig, title: str = "", description: str = "", canonical: str = "",
              image: str = "", og_type: str = "website") -> dict:
    """Document title, meta tags and canonical link for one page."""
    image = image or default_image(site)
    candidates = [
        ("name", "description", description),
        ("property", "og:title", title),
        ("property", "og:description", description),
        ("property", "og:type", og_type),
        ("property", "og:url", canonical),
        ("property", "og:image", image),
        ("name", "twitter:title", title),
        ("name", "twitter:description", description),
        ("name", "twitter:card", "player" if og_type == "video.other" else "summary_large_image"),
        ("name", "twitter:image", image),
    ]
    return {
        "title": title,
        "meta": [{"attr": attr, "name": name, "content": content}
                 for attr, name, content in candidates if content],
        "links": [{"rel": "canonical", "href": canonical}] if canonical else [],
    }


def category_meta(site: SiteConfig, name: str, slug: str, count: int) -> dict:
    return meta_tags(
        site,
        title=f"{name} Malayalam Kids Songs – {site.channel_name}",
        description=(f"Enjoy {count} {name.lower()} themed Malayalam kids songs "
                     f"and cartoons from {site.channel_name}."),
        canonical=f"{site.site_url}/categories/{slug}/",
    )


def video_meta(site: SiteConfig, video: Video) -> dict:
    return meta_tags(
        site,
        title=f"{video.title} – {site.channel_name}",
        description=video.description_short[:_DESCRIPTION_MAX],
        canonical=f"{site.site_url}/videos/{video.slug}/",
        image=video.thumb_url,
        og_type="video.other",
    )


def home_json_ld(site: SiteConfig) -> dict:
    """schema.org WebSite with a sitelinks search box."""
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": site.channel_name,
        "url": site.site_url,
        "potentialAction": {
            "@type": "SearchAction",
            "target": f"{site.site_url}/videos/?q={{search_term_string}}",
            "query-input": "required name=search_term_string",
        },
    }


def video_json_ld(site: SiteConfig, video: Video) -> dict:
    """schema.org VideoObject for a video page."""
    return {
        "@context": "https://schema.org",
        "@type": "VideoObject",
        "name": video.title,
        "description": video.description_short,
        "thumbnailUrl": [video.thumb_url] if video.thumb_url else [],
        "uploadDate": video.published_iso,
        "duration": video.duration,
        "embedUrl": embed_url(video),
        "url": _absolute(site, video_path(site, video.slug)),
        "publisher": {
            "@type": "Organization",
            "name": site.channel_name,
            "url": site.channel_url,
            "logo": {
                "@type": "ImageObject",
                "url": default_image(site),
            },
        },
    }
