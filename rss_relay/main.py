"""
Main entry point for RSS Relay.

Runs the async loop that polls the feed and relays new articles.
"""

import asyncio
import logging
import os
import signal
import sys
from urllib.parse import urlparse

import coloredlogs
from dotenv import load_dotenv

from rss_relay.config import AppConfig, load_config
from rss_relay.errors import ConfigError
from rss_relay.pipeline import CycleResult, run_poll_cycle
from rss_relay.rss_parser import FeedParser
from rss_relay.scheduler import PollScheduler
from rss_relay.storage import Storage
from rss_relay.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "RSS_RELAY_CONFIG"
DEBUG_ENV_VAR = "RSS_RELAY_DEBUG"


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


class RSSRelay:
    """
    Main RSS relay application.

    Wires the feed parser, storage, notifier and scheduler together.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the relay.

        Parameters
        ----------
        config : AppConfig
            Validated application configuration.
        """
        self.config = config
        self.storage: Storage | None = None
        self.parser: FeedParser | None = None
        self.notifier: TelegramNotifier | None = None
        self.scheduler: PollScheduler | None = None

    async def start(self) -> None:
        """Start the relay and poll until stopped."""
        logger.info("Starting RSS Relay")

        self.storage = Storage(self.config.storage.database_path)
        await self.storage.initialize()

        proxy_url = self.config.feed.proxy
        if proxy_url:
            logger.info("Using proxy: %s", redact_proxy_url(proxy_url))

        self.parser = FeedParser(
            url=self.config.feed.url,
            timeout=self.config.feed.request_timeout,
            user_agent=self.config.feed.user_agent,
            proxy_url=proxy_url,
        )

        self.notifier = TelegramNotifier(self.config.telegram, proxy_url=proxy_url)

        if not await self.notifier.test_connection():
            logger.warning("Telegram not reachable yet, deliveries may fail")

        self.scheduler = PollScheduler(
            self.poll,
            interval=self.config.scheduler.interval,
            allow_overlap=self.config.scheduler.allow_overlap,
        )

        logger.info(
            "Polling %s every %d seconds",
            self.config.feed.url,
            self.config.scheduler.interval,
        )

        try:
            await self.scheduler.run()
        except asyncio.CancelledError:
            logger.info("Scheduler cancelled")

    async def poll(self) -> CycleResult:
        """Run one poll cycle."""
        if not self.parser or not self.storage or not self.notifier:
            raise RuntimeError("Components not initialized")

        result = await run_poll_cycle(
            self.parser,
            self.notifier,
            self.storage,
            on_seen=self.config.pipeline.on_seen,
        )

        if result.delivered:
            logger.info(
                "Relayed %d new article%s",
                len(result.delivered),
                "" if len(result.delivered) == 1 else "s",
            )
        else:
            logger.debug("No new articles")

        return result

    async def stop(self) -> None:
        """Stop the relay gracefully."""
        logger.info("Stopping RSS Relay")

        if self.scheduler:
            await self.scheduler.stop()

        if self.parser:
            await self.parser.close()
        if self.storage:
            await self.storage.close()
        if self.notifier:
            await self.notifier.close()

        logger.info("RSS Relay stopped")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point."""
    load_dotenv()

    setup_logging(os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes"))

    try:
        config = load_config(os.environ.get(CONFIG_PATH_ENV_VAR, "config.yaml"))
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(1)

    relay = RSSRelay(config)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(relay.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        loop.run_until_complete(relay.start())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        loop.run_until_complete(relay.stop())
        loop.close()


if __name__ == "__main__":
    main()
