#!/usr/bin/env python3
"""Ambambo Kili - video catalog data API for the kids' channel website."""

import argparse
import asyncio
import logging
import signal
from urllib.parse import urlparse

import uvicorn
from starlette.middleware.cors import CORSMiddleware

from config import load_config, Config
from web.app import app as fastapi_app
from web.cache import init_app_state, warm_catalog
from web.middleware import SecurityHeadersMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("ambambokili")


def _site_origin(site_url: str) -> str:
    parsed = urlparse(site_url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


class AmbamboKili:
    """Main orchestrator - wires the catalog into FastAPI and serves it."""

    def __init__(self, config: Config):
        self.config = config
        self.store = None
        self.server = None

    def setup(self) -> None:
        """Initialize the catalog store and middleware."""
        self.store = init_app_state(fastapi_app.state, self.config)
        logger.info("Catalog source: %s", self.config.catalog.source)

        fastapi_app.add_middleware(SecurityHeadersMiddleware)
        origin = _site_origin(self.config.site.site_url)
        if origin:
            fastapi_app.add_middleware(
                CORSMiddleware, allow_origins=[origin], allow_methods=["GET"],
            )
        logger.info("Web app initialized")

    async def run(self) -> None:
        """Start everything."""
        self.setup()

        # Load once up front so the first visitor doesn't pay for the fetch
        await warm_catalog(fastapi_app.state)

        config = uvicorn.Config(
            fastapi_app,
            host=self.config.web.host,
            port=self.config.web.port,
            log_level="info",
        )
        self.server = uvicorn.Server(config)
        try:
            await self.server.serve()
        except asyncio.CancelledError:
            logger.info("Server cancelled")

    async def stop(self) -> None:
        """Stop the server."""
        if self.server:
            self.server.should_exit = True
        logger.info("Ambambo Kili stopped")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Ambambo Kili catalog API")
    parser.add_argument("-c", "--config", help="Path to config file", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    app = AmbamboKili(config)

    loop = asyncio.get_running_loop()

    def signal_handler():
        asyncio.create_task(app.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            signal.signal(sig, lambda s, f: signal_handler())

    try:
        await app.run()
    except KeyboardInterrupt:
        await app.stop()


if __name__ == "__main__":
    asyncio.run(main())
