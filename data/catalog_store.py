"""
In-memory video catalog for Ambambo Kili.
Loads the JSON video list once, sorts it newest-first, and indexes it by category.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx

from utils import category_slug_collisions, parse_published

logger = logging.getLogger(__name__)


class LoadFailure(Exception):
    """The video list could not be retrieved or parsed."""


def _str_tuple(raw: dict, key: str, required: bool = False) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        if required:
            raise LoadFailure(f"Video {raw.get('slug')!r} is missing {key!r}")
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise LoadFailure(f"Video {raw.get('slug')!r} has a non-list {key!r}")
    return tuple(str(item) for item in value)


def _str(raw: dict, key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Video:
    """One catalog entry. Never mutated after load."""
    slug: str
    title: str
    categories: tuple[str, ...]
    published: datetime
    tags: tuple[str, ...] = ()
    yt_id: str = ""
    duration: str = ""
    thumb_url: str = ""
    description_short: str = ""
    description_long: str = ""
    lyrics: tuple[str, ...] = ()
    playlist_urls: tuple[str, ...] = ()
    published_raw: str = field(default="", compare=False)

    @classmethod
    def from_dict(cls, raw) -> "Video":
        """Build a Video from one decoded JSON object. Raises LoadFailure on bad shape."""
        if not isinstance(raw, dict):
            raise LoadFailure(f"Expected a video object, got {type(raw).__name__}")
        for key in ("slug", "title", "published"):
            if not raw.get(key):
                raise LoadFailure(f"Video {raw.get('slug')!r} is missing {key!r}")
        try:
            published = parse_published(raw["published"])
        except ValueError as e:
            raise LoadFailure(f"Video {raw['slug']!r} has a bad published date: {e}") from e
        return cls(
            slug=str(raw["slug"]),
            title=str(raw["title"]),
            categories=_str_tuple(raw, "categories", required=True),
            published=published,
            tags=_str_tuple(raw, "tags"),
            yt_id=_str(raw, "yt_id"),
            duration=_str(raw, "duration"),
            thumb_url=_str(raw, "thumb_url"),
            description_short=_str(raw, "description_short"),
            description_long=_str(raw, "description_long"),
            lyrics=_str_tuple(raw, "lyrics"),
            playlist_urls=_str_tuple(raw, "playlist_urls"),
            published_raw=str(raw["published"]),
        )

    @property
    def published_iso(self) -> str:
        """Source date string when present, else the parsed value in ISO form."""
        return self.published_raw or self.published.isoformat()

    def to_dict(self) -> dict:
        """JSON-ready dict; published keeps the source string when present."""
        return {
            "slug": self.slug,
            "title": self.title,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "published": self.published_iso,
            "yt_id": self.yt_id,
            "duration": self.duration,
            "thumb_url": self.thumb_url,
            "description_short": self.description_short,
            "description_long": self.description_long,
            "lyrics": list(self.lyrics),
            "playlist_urls": list(self.playlist_urls),
        }


class CatalogStore:
    """Once-loaded video collection plus its category index.

    Lifecycle: created empty, populated once by ensure_loaded(), read-only after.
    A failed load leaves the store empty with load_error set; it is not retried.
    """

    def __init__(self, source: str = "data/videos.json", timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.source = source
        self.timeout = timeout
        self._transport = transport
        self._lock = asyncio.Lock()
        self.videos: list[Video] = []
        self.categories: dict[str, list[Video]] = {}
        self.loaded = False
        self.load_error: Optional[LoadFailure] = None

    @property
    def failed(self) -> bool:
        return self.load_error is not None

    async def ensure_loaded(self) -> list[Video]:
        """Load the catalog on first use; later calls return the cached list.

        Never raises: a LoadFailure is logged, stored on load_error, and [] is returned.
        """
        if self.loaded or self.failed:
            return self.videos
        async with self._lock:
            # Another caller may have finished the load while we waited
            if self.loaded or self.failed:
                return self.videos
            try:
                records = await self._retrieve()
                self.load(records)
            except LoadFailure as e:
                self._reset()
                self.load_error = e
                logger.error("Failed to load video catalog from %s: %s", self.source, e)
        return self.videos

    def load(self, records) -> None:
        """Populate the store from decoded JSON records (replaces any prior contents)."""
        if not isinstance(records, list):
            raise LoadFailure(f"Expected a JSON array of videos, got {type(records).__name__}")
        parsed = []
        seen_slugs = set()
        for raw in records:
            video = Video.from_dict(raw)
            if video.slug in seen_slugs:
                logger.warning("Duplicate video slug %r ignored", video.slug)
                continue
            seen_slugs.add(video.slug)
            parsed.append(video)
        # sorted() is stable with reverse=True: equal timestamps keep source order
        self.videos = sorted(parsed, key=lambda v: v.published, reverse=True)
        self._build_category_index()
        self.loaded = True
        self.load_error = None
        logger.info("Loaded video catalog: %d videos, %d categories",
                    len(self.videos), len(self.categories))

    def _build_category_index(self) -> None:
        self.categories = {}
        for video in self.videos:
            for category in video.categories:
                self.categories.setdefault(category, []).append(video)
        for slug, names in category_slug_collisions(self.categories).items():
            logger.warning("Categories %s share the slug %r", names, slug)

    def _reset(self) -> None:
        self.videos = []
        self.categories = {}
        self.loaded = False

    async def _retrieve(self):
        """Fetch and decode the JSON document from a URL or a local path."""
        if self.source.startswith(("http://", "https://")):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    resp = await client.get(self.source)
                    resp.raise_for_status()
                    return resp.json()
            except httpx.HTTPError as e:
                raise LoadFailure(f"Failed to fetch {self.source}: {e}") from e
            except ValueError as e:
                raise LoadFailure(f"Unparsable JSON from {self.source}: {e}") from e

        def _read():
            try:
                return json.loads(Path(self.source).read_text(encoding="utf-8"))
            except OSError as e:
                raise LoadFailure(f"Failed to read {self.source}: {e}") from e
            except ValueError as e:
                raise LoadFailure(f"Unparsable JSON in {self.source}: {e}") from e
        return await asyncio.to_thread(_read)
