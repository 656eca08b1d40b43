"""
SQLite storage for tracking delivered articles.

Provides async database operations to persist which articles were relayed
and avoid duplicate notifications after restarts.
"""

import logging
import sqlite3
from pathlib import Path

import aiosqlite

from rss_relay.models import DeliveryRecord

logger = logging.getLogger(__name__)


class Storage:
    """
    Async SQLite storage for delivered articles.

    Rows are only ever inserted; the ``guid`` primary key guarantees that
    an article is recorded at most once.
    """

    def __init__(self, database_path: str | Path):
        """
        Initialize storage with database path.

        Parameters
        ----------
        database_path : str | Path
            Path to the SQLite database file.
        """
        self.database_path = Path(database_path)
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """
        Initialize the database connection and create tables.

        Creates the database file and parent directories if they don't exist.
        """
        # Ensure parent directory exists
        self.database_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Initializing database at %s", self.database_path)

        self._connection = await aiosqlite.connect(self.database_path)
        await self._create_tables()

    async def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS articles (
                guid TEXT NOT NULL PRIMARY KEY,
                title TEXT,
                link TEXT,
                pubDate TEXT,
                category TEXT
            )
        """)

        await self._connection.commit()
        logger.debug("Database tables created/verified")

    async def is_delivered(self, guid: str) -> bool:
        """
        Check if an article has already been delivered.

        Parameters
        ----------
        guid : str
            Unique identifier of the article.

        Returns
        -------
        bool
            True if a record exists for this guid.
        """
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        cursor = await self._connection.execute(
            "SELECT 1 FROM articles WHERE guid = ?",
            (guid,),
        )
        result = await cursor.fetchone()
        return result is not None

    async def record_delivery(self, record: DeliveryRecord) -> bool:
        """
        Insert the record of a delivered article.

        Parameters
        ----------
        record : DeliveryRecord
            Record to insert.

        Returns
        -------
        bool
            True if the record was inserted, False if a record with the
            same guid already existed.
        """
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        try:
            await self._connection.execute(
                """
                INSERT INTO articles (guid, title, link, pubDate, category)
                VALUES (?, ?, ?, ?, ?)
                """,
                (record.guid, record.title, record.link, record.pub_date, record.category),
            )
            await self._connection.commit()
        except sqlite3.IntegrityError:
            await self._connection.rollback()
            logger.debug("Article already recorded: %s", record.guid[:50])
            return False

        logger.debug("Recorded delivered article: %s", record.guid[:50])
        return True

    async def get_delivered_count(self) -> int:
        """
        Get the number of delivered articles.

        Returns
        -------
        int
            Number of rows in the articles table.
        """
        if self._connection is None:
            raise RuntimeError("Database not initialized")

        cursor = await self._connection.execute("SELECT COUNT(*) FROM articles")
        result = await cursor.fetchone()
        return result[0] if result else 0

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.debug("Database connection closed")

    async def __aenter__(self) -> "Storage":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
