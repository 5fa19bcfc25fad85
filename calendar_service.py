"""Calendar service: query, fetch or cache, parse, build and render events."""
import dataclasses
import logging
from typing import List, Union

from feed.fetcher import FeedFetcher
from feed.parser import FeedParser, rewrite_vendor_tags
from feed.query_builder import build_feed_url
from processor.collection import EventCollection
from processor.exceptions import CalendarError, ConfigError
from processor.item_builder import CalendarItemBuilder
from processor.models import Markup, Options, Query, RawEntry
from processor.renderer import MarkupRenderer
from processor.selector import parse_selector
from storage.feed_cache import FeedCache

logger = logging.getLogger(__name__)


class CalendarService:
    """Finds calendar events and renders them as markup."""

    def __init__(
        self,
        options: Options = None,
        markup: Markup = None,
        cache: FeedCache = None,
        fetcher: FeedFetcher = None,
        parser: FeedParser = None,
        default_calendar_id: str = ''
    ):
        """
        Initialize the calendar service.

        Args:
            options: Processing and rendering options
            markup: Wrapper strings used by render()
            cache: Feed cache (default: no caching)
            fetcher: HTTP fetcher for feeds
            parser: Feed parser
            default_calendar_id: Calendar used when a query names none
        """
        self.options = options or Options()
        self.markup = markup or Markup()
        self.cache = cache
        self.fetcher = fetcher or FeedFetcher()
        self.parser = parser or FeedParser()
        self.builder = CalendarItemBuilder(self.options)
        self.renderer = MarkupRenderer(self.markup, self.options.timezone)
        self.default_calendar_id = default_calendar_id

        self.events = EventCollection()
        self.error = ''
        self.url = ''

    def find(self, query: Union[Query, str, None] = None) -> EventCollection:
        """
        Find events matching a query.

        Errors are not raised; they leave the collection empty and are
        available from the error attribute.

        Args:
            query: Query object or selector string

        Returns:
            EventCollection with the matching events
        """
        self.events = EventCollection()
        self.error = ''
        self.url = ''

        try:
            query = self._resolve_query(query)
            self.url = build_feed_url(query)
            data = self._load(self.url)
            entries = self.parser.parse(data)
        except CalendarError as e:
            logger.error(f"Calendar lookup failed: {e}", extra={'error_type': type(e).__name__})
            self.error = str(e)
            return self.events

        self.events = self._populate(query, entries)
        return self.events

    def render(self) -> str:
        """Render the events found by the last find(); the error text if there are none."""
        return self.events.render(self.renderer.render_item, self.markup, self.error)

    def _resolve_query(self, query: Union[Query, str, None]) -> Query:
        if query is None:
            query = Query()
        elif isinstance(query, str):
            query = parse_selector(query)
        else:
            query = dataclasses.replace(query)

        if not query.calendar_id:
            query.calendar_id = self.default_calendar_id
        if not query.calendar_id:
            raise ConfigError("No calendar specified")
        return query

    def _load(self, url: str) -> bytes:
        if self.cache is not None:
            data = self.cache.get(url)
            if data is not None:
                return data

        data = rewrite_vendor_tags(self.fetcher.fetch(url))

        if self.cache is not None:
            try:
                self.cache.put(url, data)
            except OSError as e:
                logger.warning(f"Unable to cache calendar feed for {url}: {e}")
        return data

    def _populate(self, query: Query, entries: List[RawEntry]) -> EventCollection:
        events = EventCollection()
        as_html = self._as_html(query)

        # The limit bounds the entries examined, not the events kept
        if query.limit > 0:
            entries = entries[:query.limit]

        for entry in entries:
            try:
                event = self.builder.build(entry, as_html=as_html)
            except ValueError as e:
                logger.warning(f"Skipping calendar entry '{entry.id}': {e}")
                continue

            # Multi-day events overlapping the window but starting earlier
            if query.from_timestamp and event.from_timestamp < query.from_timestamp:
                logger.debug(f"Dropping event '{event.title}' starting before the requested range")
                continue

            events.append(event)

        logger.info(
            f"Found {len(events)} events out of {len(entries)} entries examined",
            extra={'url': self.url}
        )
        return events

    def _as_html(self, query: Query) -> bool:
        if query.html is not None:
            return query.html
        return self.options.render_as_html

    @property
    def has_error(self) -> bool:
        return bool(self.error)
