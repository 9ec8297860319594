"""Shared pytest fixtures for Ambambo Kili tests."""

from datetime import datetime, timedelta, timezone

import pytest

from config import Config, WebConfig, CatalogConfig, SiteConfig
from data.catalog_store import CatalogStore

_BASE_DATE = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def make_video(slug, categories=("Rhymes",), days_ago=0, title=None, tags=(), **extra) -> dict:
    """Raw JSON-style video record; larger days_ago = older."""
    record = {
        "slug": slug,
        "title": title or slug.replace("-", " ").title(),
        "categories": list(categories),
        "tags": list(tags),
        "published": (_BASE_DATE - timedelta(days=days_ago)).isoformat().replace("+00:00", "Z"),
        "yt_id": f"yt{slug[:9]}",
        "duration": "PT3M25S",
        "thumb_url": f"https://i.ytimg.com/vi/{slug}/hqdefault.jpg",
        "description_short": f"{slug} short description",
        "description_long": f"{slug} long description",
    }
    record.update(extra)
    return record


@pytest.fixture
def sample_records():
    """Small mixed catalog, deliberately out of date order."""
    return [
        make_video("elephant-song", ["Animals", "Rhymes"], days_ago=3,
                   title="Elephant Song", tags=["jungle", "Big Animals"]),
        make_video("onam-festival", ["Festivals"], days_ago=1, tags=["kerala", "onam"]),
        make_video("rain-rain", ["Rhymes"], days_ago=5, tags=["weather"]),
        make_video("sleepy-moon", ["Lullabies & Sleep"], days_ago=2, tags=["night"],
                   lyrics=["Moon moon\nsleepy moon", "Close your eyes"]),
        make_video("counting-mangoes", ["Learning"], days_ago=4, tags=["numbers", "Elephant friends"]),
    ]


@pytest.fixture
def store(sample_records):
    """CatalogStore populated synchronously from sample_records."""
    s = CatalogStore(source="unused.json")
    s.load(sample_records)
    return s


@pytest.fixture
def sample_config(tmp_path):
    """Minimal Config with safe defaults for testing."""
    return Config(
        web=WebConfig(host="127.0.0.1", port=9999),
        catalog=CatalogConfig(source=str(tmp_path / "videos.json"), per_page=12),
        site=SiteConfig(),
    )


@pytest.fixture
def config_yaml(tmp_path):
    """Write a minimal config.yaml and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text("""\
web:
  host: 0.0.0.0
  port: 8080
catalog:
  source: "{source}"
  per_page: 6
  fetch_timeout: 5
site:
  channel_name: "Test Channel"
  site_url: "https://example.org/kids/"
  base_path: "kids"
""".format(source=str(tmp_path / "videos.json")))
    return cfg


@pytest.fixture
def video_factory():
    """The make_video builder, for tests that assemble their own catalogs."""
    return make_video
