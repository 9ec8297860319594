"""
Read-only queries over a loaded CatalogStore: search/category filtering with
pagination, related-video selection, and category lookups.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from data.catalog_store import CatalogStore, Video
from utils import slugify

DEFAULT_PER_PAGE = 12


@dataclass
class QueryResult:
    """One page of filtered videos plus pagination metadata."""
    items: list[Video] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_count: int = 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _matches_search(video: Video, term: str) -> bool:
    """Case-insensitive substring match against title or any tag."""
    if term in video.title.lower():
        return True
    return any(term in tag.lower() for tag in video.tags)


def query(store: CatalogStore, search: str = "", category: Optional[str] = None,
          page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> QueryResult:
    """Filter store.videos by search term AND category, then paginate.

    Empty search / category disable their filter. Out-of-range pages are clamped.
    """
    if per_page <= 0:
        raise ValueError(f"per_page must be positive, got {per_page}")
    filtered = store.videos
    term = (search or "").strip().lower()
    if term:
        filtered = [v for v in filtered if _matches_search(v, term)]
    if category:
        filtered = [v for v in filtered if category in v.categories]

    total_count = len(filtered)
    total_pages = max(1, math.ceil(total_count / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return QueryResult(
        items=list(filtered[start:start + per_page]),
        page=page,
        total_pages=total_pages,
        total_count=total_count,
    )


def related_videos(target: Video, pool: list[Video], count: int,
                   exclude_slug: Optional[str] = None,
                   fill_from_whole_pool: bool = False) -> list[Video]:
    """Pick up to `count` videos sharing a category with `target`, in pool order.

    Shortfalls are filled from the rest of the pool regardless of category.
    `fill_from_whole_pool` is accepted for compatibility and does not change
    the result: the fill always happens.
    """
    if count <= 0:
        return []
    if exclude_slug is None:
        exclude_slug = target.slug
    candidates = []
    seen = {exclude_slug, target.slug}
    for v in pool:
        if v.slug in seen or v is target:
            continue
        seen.add(v.slug)
        candidates.append(v)

    target_categories = set(target.categories)
    related = [v for v in candidates if target_categories.intersection(v.categories)][:count]
    if len(related) < count:
        chosen = {v.slug for v in related}
        extras = [v for v in candidates if v.slug not in chosen]
        related.extend(extras[:count - len(related)])
    return related


def latest_videos(store: CatalogStore, count: int = 8) -> list[Video]:
    """Newest `count` videos."""
    return store.videos[:max(count, 0)]


def categories_by_size(store: CatalogStore, limit: Optional[int] = None) -> list[tuple[str, list[Video]]]:
    """(name, videos) pairs, largest category first; ties keep first-seen order."""
    ranked = sorted(store.categories.items(), key=lambda item: len(item[1]), reverse=True)
    if limit is not None:
        ranked = ranked[:max(limit, 0)]
    return ranked


def category_names(store: CatalogStore) -> list[str]:
    """Category names in alphabetical order."""
    return sorted(store.categories)


def find_category(store: CatalogStore, slug: str) -> Optional[str]:
    """First category (in index order) whose slug matches, else None."""
    for name in store.categories:
        if slugify(name) == slug:
            return name
    return None


def find_video(store: CatalogStore, slug: str) -> Optional[Video]:
    for video in store.videos:
        if video.slug == slug:
            return video
    return None
