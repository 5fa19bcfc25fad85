"""Ordered container of calendar events."""
from typing import Callable, Iterator, List

from processor.models import Event, Markup


SORT_ATTRIBUTES = {
    'date': 'from_timestamp',
    'modified': 'modified_timestamp',
    'title': 'title',
}


class EventCollection:
    """Events in feed order, unless re-sorted."""

    def __init__(self, events: List[Event] = None):
        self._events = list(events or [])

    def append(self, event: Event) -> None:
        self._events.append(event)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __repr__(self) -> str:
        return f"EventCollection({len(self._events)} events)"

    @property
    def count(self) -> int:
        return len(self._events)

    def filter(self, predicate: Callable[[Event], bool]) -> 'EventCollection':
        """Return a new collection with the events matching predicate."""
        return EventCollection([event for event in self._events if predicate(event)])

    def sorted_by(self, field: str = 'date', ascending: bool = True) -> 'EventCollection':
        """
        Return a new collection sorted by an event field.

        Args:
            field: 'date', 'modified', 'title' or any Event attribute name
            ascending: Sort direction

        Returns:
            New EventCollection; this one is left untouched
        """
        attribute = SORT_ATTRIBUTES.get(field, field)
        if attribute not in Event.__dataclass_fields__:
            raise ValueError(f"Unknown sort field: {field}")
        events = sorted(
            self._events,
            key=lambda event: getattr(event, attribute),
            reverse=not ascending
        )
        return EventCollection(events)

    def render(
        self,
        item_renderer: Callable[[Event], str],
        markup: Markup,
        empty_text: str = ''
    ) -> str:
        """
        Render the collection as markup.

        Args:
            item_renderer: Renders a single event
            markup: Wrapper strings for the list
            empty_text: Returned as-is when the collection is empty

        Returns:
            Rendered list, or empty_text when there are no events
        """
        if not self._events:
            return empty_text
        items = ''.join(item_renderer(event) for event in self._events)
        return f"{markup.list_open}{items}{markup.list_close}"
