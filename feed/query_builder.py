"""Builds calendar feed request URLs from queries."""
import logging
from datetime import datetime, timezone
from urllib.parse import quote, quote_plus

from processor.models import Query

logger = logging.getLogger(__name__)


FEED_BASE_URL = "http://www.google.com/calendar/feeds/{calendar_id}/public/full"
ORDER_BY = {
    'date': 'starttime',
    'modified': 'lastmodified',
}


def build_feed_url(query: Query) -> str:
    """
    Translate a Query into a feed request URL.

    Args:
        query: Query with calendar id or URL, date range, sort and limit

    Returns:
        Feed URL with start-min, start-max, orderby, sortorder, q,
        max-results and singleevents parameters as applicable
    """
    url = base_url(query.calendar_id)

    if (query.from_timestamp or query.to_timestamp) and not has_param(url, 'start-min', 'start-max'):
        if query.from_timestamp:
            url += f"start-min={rfc3339(query.from_timestamp)}&"
        if query.to_timestamp:
            url += f"start-max={rfc3339(query.to_timestamp)}&"

    if not has_param(url, 'orderby'):
        url += f"orderby={ORDER_BY.get(query.sort_field, 'starttime')}&"

    if not has_param(url, 'sortorder'):
        url += f"sortorder={'ascending' if query.ascending else 'descending'}&"

    if query.keywords:
        url += f"q={quote_plus(query.keywords)}&"

    if query.limit > 0:
        url += f"max-results={int(query.limit)}&"

    if query.expand_recurring:
        url += "singleevents=true&"

    url = url.rstrip('?&')
    logger.debug(f"Built feed URL: {url}")
    return url


def base_url(calendar_id: str) -> str:
    """Return the feed URL for an id or URL, ready for parameters to be appended."""
    calendar_id = calendar_id.strip()

    if '://' not in calendar_id:
        return FEED_BASE_URL.format(calendar_id=quote(calendar_id, safe='@')) + '?'

    url = calendar_id
    if url.lower().startswith('https://'):
        # The public feed endpoint is only served over plain http
        url = 'http://' + url[len('https://'):]

    if url.endswith('?') or url.endswith('&'):
        return url
    return url + ('&' if '?' in url else '?')


def has_param(url: str, *names: str) -> bool:
    query_string = url.partition('?')[2]
    keys = {pair.partition('=')[0] for pair in query_string.split('&')}
    return any(name in keys for name in names)


def rfc3339(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')
