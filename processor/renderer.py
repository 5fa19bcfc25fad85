"""Markup rendering of single calendar events."""
from datetime import datetime

from dateutil import tz

from processor.models import Event, Markup


class MarkupRenderer:
    """Renders an Event using Markup wrapper strings."""

    def __init__(self, markup: Markup = None, timezone: str = 'UTC'):
        self.markup = markup or Markup()
        self.tzinfo = tz.gettz(timezone) or tz.UTC

    def render_item(self, event: Event) -> str:
        """
        Render one event.

        The date-to part is left out when it formats the same as date-from,
        location and description are left out when empty.
        """
        markup = self.markup
        parts = [
            markup.item_open,
            markup.title_open, event.title, markup.title_close,
            self._datetime(markup.date_from_open, event.from_timestamp),
            event.formatted_from,
            markup.date_from_close,
        ]

        if event.formatted_to and event.formatted_to != event.formatted_from:
            parts += [
                self._datetime(markup.date_to_open, event.to_timestamp),
                event.formatted_to,
                markup.date_to_close,
            ]

        if event.location:
            parts += [markup.location_open, event.location, markup.location_close]

        if event.description:
            parts += [markup.description_open, event.description, markup.description_close]

        parts.append(markup.item_close)
        return ''.join(parts)

    def _datetime(self, wrapper: str, timestamp: int) -> str:
        iso = datetime.fromtimestamp(timestamp, tz=self.tzinfo).isoformat()
        return wrapper.replace('{datetime}', iso)
