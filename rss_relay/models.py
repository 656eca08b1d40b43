"""
Data model for articles read from the feed and records of delivered articles.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

logger = logging.getLogger(__name__)

Category = str | list[str] | None


def _parse_datetime(value: str) -> datetime:
    """Parse an RFC 822 date, falling back to ISO-8601."""
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_iso_timestamp(value: str | None) -> str | None:
    """
    Convert a feed timestamp into a UTC ISO-8601 string.

    Parameters
    ----------
    value : str | None
        Feed-native timestamp, usually RFC 822 (``Mon, 01 Jan 2024 00:00:00 GMT``).

    Returns
    -------
    str | None
        Timestamp such as ``2024-01-01T00:00:00.000Z``, or None if the
        value is empty or cannot be parsed.
    """
    if not value or not value.strip():
        return None

    try:
        parsed = _parse_datetime(value.strip())
        # Naive timestamps are taken as UTC
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        parsed = parsed.astimezone(timezone.utc)
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug("Unparseable publication date %r: %s", value, e)
        return None

    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Article:
    """
    Item read from the RSS feed.

    Attributes
    ----------
    guid : str
        Unique identifier of the item within the feed.
    title : str
        Item title.
    link : str
        Item URL.
    pub_date : str
        Publication date as written in the feed.
    category : str | list[str] | None
        No category, a single one, or several in feed order.
    description : str | None
        Item summary.
    """

    guid: str
    title: str = ""
    link: str = ""
    pub_date: str = ""
    category: Category = None
    description: str | None = None

    @classmethod
    def from_feedparser(cls, entry: Any) -> "Article":
        """
        Create an Article from a feedparser entry.

        Parameters
        ----------
        entry : Any
            A feedparser entry object.

        Returns
        -------
        Article
            Article instance.

        Raises
        ------
        ValueError
            If the entry has neither an id nor a link.
        """
        guid = entry.get("id", "") or entry.get("link", "")
        if not guid:
            raise ValueError("Entry has no guid or link")

        terms = [tag.get("term") for tag in entry.get("tags", []) if tag.get("term")]
        category: Category
        if not terms:
            category = None
        elif len(terms) == 1:
            category = terms[0]
        else:
            category = terms

        return cls(
            guid=guid,
            title=entry.get("title", ""),
            link=entry.get("link", ""),
            pub_date=entry.get("published", ""),
            category=category,
            description=entry.get("summary"),
        )

    def message(self) -> str:
        """Return the notification text: title, then link."""
        return f"{self.title}\n{self.link}"

    def iso_timestamp(self) -> str | None:
        """Return the publication date as UTC ISO-8601, or None."""
        return to_iso_timestamp(self.pub_date)

    def encoded_category(self) -> str | None:
        """Return the category as a JSON string, or None if absent."""
        if self.category is None:
            return None
        return json.dumps(self.category, ensure_ascii=False)


@dataclass(frozen=True)
class DeliveryRecord:
    """
    Row of the ``articles`` table, written once an article was delivered.

    Attributes
    ----------
    guid : str
        Article identifier, primary key.
    title : str
        Article title.
    link : str
        Article URL.
    pub_date : str | None
        UTC ISO-8601 publication date, or None if it could not be parsed.
    category : str | None
        JSON-encoded category, or None if the article had none.
    """

    guid: str
    title: str
    link: str
    pub_date: str | None
    category: str | None

    @classmethod
    def from_article(cls, article: Article) -> "DeliveryRecord":
        """Build the record to persist for a delivered article."""
        return cls(
            guid=article.guid,
            title=article.title,
            link=article.link,
            pub_date=article.iso_timestamp(),
            category=article.encoded_category(),
        )
