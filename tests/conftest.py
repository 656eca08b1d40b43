"""
Shared fixtures for RSS Relay tests.

Provides common test fixtures for use across all test modules.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from rss_relay.config import AppConfig, TelegramConfig
from rss_relay.errors import DeliveryError
from rss_relay.models import Article
from rss_relay.storage import Storage


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeSource:
    """Article source returning a fixed list, one call per poll cycle."""

    def __init__(self, articles: list[Article]):
        self.articles = articles
        self.calls = 0

    async def fetch_articles(self) -> list[Article]:
        self.calls += 1
        return list(self.articles)


class RecordingNotifier:
    """Notifier that records messages and can be told to fail."""

    def __init__(self, fail_on: set[str] | None = None):
        self.messages: list[str] = []
        self.fail_on = fail_on or set()

    async def deliver(self, message: str) -> None:
        if message in self.fail_on:
            raise DeliveryError(f"refused: {message}")
        self.messages.append(message)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_rss_content(fixtures_dir: Path) -> bytes:
    """Return contents of sample RSS feed."""
    return (fixtures_dir / "sample_rss.xml").read_bytes()


@pytest.fixture
def sample_article() -> Article:
    """
    Create a sample article for testing.

    Returns
    -------
    Article
        A fully populated article instance.
    """
    return Article(
        guid="g1",
        title="T1",
        link="L1",
        pub_date="Mon, 01 Jan 2024 00:00:00 GMT",
    )


@pytest.fixture
def make_article():
    """Return a factory building articles named after their guid."""

    def factory(guid: str, pub_date: str = "Mon, 01 Jan 2024 00:00:00 GMT") -> Article:
        return Article(
            guid=guid,
            title=f"Title {guid}",
            link=f"https://example.com/{guid}",
            pub_date=pub_date,
        )

    return factory


@pytest.fixture
def make_source():
    """Return a factory building a fake source from a list of articles."""
    return FakeSource


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier that records delivered messages."""
    return RecordingNotifier()


@pytest.fixture
def minimal_telegram_config() -> TelegramConfig:
    """Create a minimal valid Telegram configuration."""
    return TelegramConfig(bot_token="1234567890:ABCdefGHIjklMNOpqrsTUVwxyz")


@pytest.fixture
def minimal_app_config(minimal_telegram_config: TelegramConfig, tmp_path: Path) -> AppConfig:
    """Create a minimal valid app configuration with a temporary database."""
    return AppConfig.model_validate(
        {
            "telegram": minimal_telegram_config.model_dump(),
            "storage": {"database_path": str(tmp_path / "data.db")},
        }
    )


@pytest_asyncio.fixture
async def in_memory_storage() -> AsyncGenerator[Storage, None]:
    """
    Create an in-memory SQLite storage for testing.

    Yields
    ------
    Storage
        An initialized in-memory storage instance.
    """
    storage = Storage(":memory:")
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture
def mock_telegram_bot() -> MagicMock:
    """
    Create a mock Telegram bot.

    Returns
    -------
    MagicMock
        A mock Bot instance with common methods mocked.
    """
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.get_me = AsyncMock(return_value=MagicMock(username="test_bot"))
    bot.shutdown = AsyncMock()
    return bot
