"""
Poll cycle: fetch the feed, find new articles, deliver and record them.
"""

import logging
from dataclasses import dataclass, field

from rss_relay.config import SeenPolicy
from rss_relay.models import DeliveryRecord
from rss_relay.notifier import Notifier
from rss_relay.rss_parser import ArticleSource
from rss_relay.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """
    Outcome of one poll cycle.

    Attributes
    ----------
    delivered : list[str]
        Guids that were notified and recorded, in feed order.
    duplicates : list[str]
        Guids that were notified but had already been recorded by a
        concurrent cycle.
    stopped_at : str | None
        Guid of the already delivered article that ended the cycle.
    """

    delivered: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    stopped_at: str | None = None


async def run_poll_cycle(
    source: ArticleSource,
    notifier: Notifier,
    storage: Storage,
    on_seen: SeenPolicy = SeenPolicy.STOP,
) -> CycleResult:
    """
    Relay every new article of the feed once.

    Articles are handled in feed order (newest first). Each new article is
    delivered before it is recorded, so a failed delivery leaves it to be
    retried by the next cycle.

    Parameters
    ----------
    source : ArticleSource
        Provides the current articles of the feed.
    notifier : Notifier
        Delivers the message for each new article.
    storage : Storage
        Record of already delivered articles.
    on_seen : SeenPolicy
        Whether an already delivered article ends the cycle or is skipped.

    Returns
    -------
    CycleResult
        What the cycle delivered and where it stopped.

    Raises
    ------
    FetchError, ParseError
        If the feed could not be read. Nothing is delivered.
    DeliveryError
        If a message could not be sent. Articles before it stay recorded.
    """
    result = CycleResult()
    articles = await source.fetch_articles()

    for article in articles:
        if await storage.is_delivered(article.guid):
            if on_seen is SeenPolicy.STOP:
                result.stopped_at = article.guid
                logger.debug("Reached delivered article %s, stopping", article.guid[:50])
                break
            continue

        record = DeliveryRecord.from_article(article)
        if record.pub_date is None:
            logger.warning(
                "Could not parse publication date %r of '%s'",
                article.pub_date,
                article.title[:50],
            )

        logger.info("New article: %s", article.title)
        await notifier.deliver(article.message())

        if await storage.record_delivery(record):
            result.delivered.append(article.guid)
        else:
            result.duplicates.append(article.guid)

    return result
