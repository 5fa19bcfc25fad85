"""Data models for calendar queries, options and events."""
from dataclasses import dataclass, field
from typing import Optional


SORT_FIELDS = ('date', 'modified')


@dataclass
class Query:
    """Mutable set of feed query settings."""
    calendar_id: str = ''
    limit: int = 100
    sort_field: str = 'date'
    ascending: bool = True
    from_timestamp: int = 0
    to_timestamp: int = 0
    keywords: str = ''
    expand_recurring: bool = True
    html: Optional[bool] = None

    def set_id(self, calendar_id: str) -> 'Query':
        self.calendar_id = calendar_id.strip()
        return self

    def set_from(self, timestamp: int) -> 'Query':
        self.from_timestamp = int(timestamp)
        return self

    def set_to(self, timestamp: int) -> 'Query':
        self.to_timestamp = int(timestamp)
        return self

    def set_sort(self, sort_field: str, ascending: bool = True) -> 'Query':
        if sort_field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {sort_field}")
        self.sort_field = sort_field
        self.ascending = ascending
        return self

    def set_limit(self, limit: int) -> 'Query':
        self.limit = max(0, int(limit))
        return self

    def set_keywords(self, keywords: str) -> 'Query':
        self.keywords = keywords.strip()
        return self


@dataclass
class Options:
    """Processing and rendering options."""
    cache_ttl_seconds: int = 3600
    max_text_length: int = 255
    max_description_length: int = 16384
    strip_tags: bool = True
    encode_entities: bool = True
    date_format: str = '%Y-%m-%d %H:%M'
    render_as_html: bool = True
    timezone: str = 'UTC'


@dataclass
class Markup:
    """Wrapper strings used when rendering an event list."""
    list_open: str = '<ul class="calendar-events">'
    list_close: str = '</ul>'
    item_open: str = '<li class="calendar-event">'
    item_close: str = '</li>'
    title_open: str = '<h3 class="calendar-title">'
    title_close: str = '</h3>'
    date_from_open: str = '<time class="calendar-from" datetime="{datetime}">'
    date_from_close: str = '</time>'
    date_to_open: str = ' &ndash; <time class="calendar-to" datetime="{datetime}">'
    date_to_close: str = '</time>'
    location_open: str = '<p class="calendar-location">'
    location_close: str = '</p>'
    description_open: str = '<div class="calendar-description">'
    description_close: str = '</div>'


@dataclass
class RawEntry:
    """Feed entry as found in the calendar document."""
    title: str = ''
    content: str = ''
    where: str = ''
    start: str = ''
    end: str = ''
    published: str = ''
    updated: str = ''
    author: str = ''
    id: str = ''


@dataclass(frozen=True)
class Event:
    """Normalized and sanitized calendar event."""
    title: str
    description: str
    location: str
    author: str
    from_timestamp: int
    to_timestamp: int
    formatted_from: str
    formatted_to: str
    created_timestamp: int
    modified_timestamp: int
    external_id: str
    multi_day: bool = field(default=False)
