"""Configuration management for the Ambambo Kili catalog."""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings, dicts, and lists.

    Supports both ${VAR} and $VAR patterns.
    """
    if isinstance(value, str):
        # Expand ${VAR} pattern
        pattern = re.compile(r'\$\{([^}]+)\}')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), value)
        # Expand $VAR pattern
        pattern = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), result)
        return result
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class WebConfig:
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class CatalogConfig:
    """Video list source and page sizes."""
    source: str = "data/videos.json"  # local path or http(s) URL
    fetch_timeout: float = 10.0  # seconds
    per_page: int = 12
    latest_count: int = 8  # homepage "latest videos" row
    popular_count: int = 6  # homepage "popular categories" row
    related_count: int = 3
    more_count: int = 4  # "More from the channel" links on a video page


@dataclass
class SiteConfig:
    """Channel identity and public URLs used in payloads and SEO metadata."""
    channel_name: str = "Ambambo Kili"
    channel_tagline: str = "Malayalam kids songs, stories, and Kerala cartoons"
    channel_url: str = "https://www.youtube.com/@AmbamboKili"
    playlist_url: str = "https://www.youtube.com/playlist?list=RDXqZsoesa55w"
    site_url: str = "https://icodeforpassion.github.io/ambambokili"
    contact_email: str = "hello@ambambokili.example"
    base_path: str = "/ambambokili"
    default_thumb: str = "/ambambokili/assets/img/placeholder.jpg"


@dataclass
class Config:
    """Main configuration container."""
    web: WebConfig = field(default_factory=WebConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    site: SiteConfig = field(default_factory=SiteConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from YAML file with environment variable expansion."""
        path = Path(path)
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f) or {}

        # Expand environment variables
        expanded_config = expand_env_vars(raw_config)

        web_data = expanded_config.get("web") or {}
        catalog_data = expanded_config.get("catalog") or {}
        site_data = expanded_config.get("site") or {}

        return cls(
            web=WebConfig(**web_data),
            catalog=CatalogConfig(**catalog_data),
            site=SiteConfig(**site_data),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration directly from environment variables."""
        site_defaults = SiteConfig()
        return cls(
            web=WebConfig(
                host=os.environ.get("KILI_WEB_HOST", "0.0.0.0"),
                port=int(os.environ.get("KILI_WEB_PORT", "8080")),
            ),
            catalog=CatalogConfig(
                source=os.environ.get("KILI_CATALOG_SOURCE", "data/videos.json"),
                fetch_timeout=float(os.environ.get("KILI_FETCH_TIMEOUT", "10")),
                per_page=int(os.environ.get("KILI_PER_PAGE", "12")),
            ),
            site=SiteConfig(
                channel_name=os.environ.get("KILI_CHANNEL_NAME", site_defaults.channel_name),
                channel_url=os.environ.get("KILI_CHANNEL_URL", site_defaults.channel_url),
                site_url=os.environ.get("KILI_SITE_URL", site_defaults.site_url),
                base_path=os.environ.get("KILI_BASE_PATH", site_defaults.base_path),
            ),
        )


def load_config(config_path: str | None = None) -> Config:
    """Load configuration from file or environment.

    Tries in order:
    1. Provided config_path
    2. Default paths: config.yaml, config.yml
    3. Environment variables (fallback)
    """
    config: Config | None = None

    if config_path:
        path = Path(config_path)
        if path.exists():
            config = Config.from_yaml(path)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        # Try default paths
        for default_path in ["config.yaml", "config.yml"]:
            path = Path(default_path)
            if path.exists():
                config = Config.from_yaml(path)
                break

    if config is None:
        # Fallback to environment variables
        config = Config.from_env()

    if not config.catalog.source:
        default_source = CatalogConfig.source
        logger.warning("catalog.source is empty, falling back to %s", default_source)
        config.catalog.source = default_source

    # Validate page sizes
    if config.catalog.per_page <= 0:
        logger.warning("catalog.per_page %r is not positive, falling back to 12", config.catalog.per_page)
        config.catalog.per_page = 12

    site_url = config.site.site_url
    if site_url and not site_url.startswith(("http://", "https://")):
        logger.warning("site.site_url %r has no scheme, canonical links will be relative", site_url)
    config.site.site_url = site_url.rstrip("/")
    config.site.base_path = "/" + config.site.base_path.strip("/") if config.site.base_path.strip("/") else ""

    return config
