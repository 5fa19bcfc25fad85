"""Builder turning raw feed entries into normalized events."""
import logging
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz

from processor.models import Event, Options, RawEntry
from processor.sanitizer import TextSanitizer

logger = logging.getLogger(__name__)


class CalendarItemBuilder:
    """Maps RawEntry objects to Event records."""

    def __init__(self, options: Options, sanitizer: TextSanitizer = None):
        """
        Initialize the item builder.

        Args:
            options: Processing options (date format, timezone, HTML flag)
            sanitizer: Sanitizer for free-text fields (default: built from options)
        """
        self.options = options
        self.sanitizer = sanitizer or TextSanitizer(options)
        self.tzinfo = tz.gettz(options.timezone)
        if self.tzinfo is None:
            logger.warning(f"Unknown timezone '{options.timezone}', using UTC")
            self.tzinfo = tz.UTC

    def build(self, entry: RawEntry, as_html: Optional[bool] = None) -> Event:
        """
        Build an Event from a raw feed entry.

        Args:
            entry: Raw feed entry
            as_html: Render the description as HTML (default: Options.render_as_html)

        Returns:
            Event object

        Raises:
            ValueError: If the entry has no usable start time
        """
        if as_html is None:
            as_html = self.options.render_as_html

        from_timestamp = self.parse_timestamp(entry.start)
        if from_timestamp is None:
            raise ValueError(f"Entry '{entry.id or entry.title}' has no start time")

        to_timestamp = self.parse_timestamp(entry.end)
        if to_timestamp is None:
            to_timestamp = from_timestamp

        from_dt = self.localize(from_timestamp)
        to_dt = self.localize(to_timestamp)

        # An event ending at 00:00 belongs to the previous day
        if from_dt.day != to_dt.day and int(to_dt.strftime('%H%M')) < 1:
            to_timestamp -= 1
            to_dt = self.localize(to_timestamp)

        return Event(
            title=self.sanitizer.text(entry.title),
            description=self.sanitizer.description(entry.content, as_html),
            location=self.sanitizer.text(entry.where),
            author=self.sanitizer.text(entry.author),
            from_timestamp=from_timestamp,
            to_timestamp=to_timestamp,
            formatted_from=from_dt.strftime(self.options.date_format),
            formatted_to=to_dt.strftime(self.options.date_format),
            created_timestamp=self.parse_timestamp(entry.published) or 0,
            modified_timestamp=self.parse_timestamp(entry.updated) or 0,
            external_id=entry.id.strip(),
            multi_day=from_dt.day != to_dt.day
        )

    def parse_timestamp(self, value: str) -> Optional[int]:
        """
        Parse an RFC 3339 date-time or a bare date into a Unix timestamp.

        Bare dates (all-day events) are taken as midnight in the configured
        timezone.
        """
        if not value or not value.strip():
            return None
        parsed = date_parser.isoparse(value.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.tzinfo)
        return int(parsed.timestamp())

    def localize(self, timestamp: int) -> datetime:
        return datetime.fromtimestamp(timestamp, tz=self.tzinfo)
