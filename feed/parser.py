"""Parser for calendar feed documents."""
import logging
import re
from typing import List

from bs4 import BeautifulSoup
from lxml import etree

from processor.exceptions import ParseError
from processor.models import RawEntry

logger = logging.getLogger(__name__)


VENDOR_TAG_PATTERN = re.compile(rb'<(/?)gd:')


def rewrite_vendor_tags(data: bytes) -> bytes:
    """Rewrite <gd:tag> and </gd:tag> to unprefixed tags."""
    return VENDOR_TAG_PATTERN.sub(rb'<\1', data)


class FeedParser:
    """Parses feed bytes into RawEntry objects."""

    def parse(self, data: bytes) -> List[RawEntry]:
        """
        Parse a calendar feed.

        Args:
            data: Raw feed document

        Returns:
            List of RawEntry objects in feed order

        Raises:
            ParseError: If the document is not well-formed XML
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        data = rewrite_vendor_tags(data)

        self._validate(data)

        soup = BeautifulSoup(data, 'xml')
        entries = [self._parse_entry(element) for element in soup.find_all('entry')]

        logger.info(f"Parsed {len(entries)} entries from calendar feed")
        return entries

    def _validate(self, data: bytes) -> None:
        if not data.strip():
            raise ParseError(['Document is empty'])

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            diagnostics = [
                f"line {error.line}, column {error.column}: {error.message}"
                for error in e.error_log
            ] or [str(e)]
            logger.error(f"Calendar feed is not well-formed: {diagnostics}")
            raise ParseError(diagnostics) from e

    def _parse_entry(self, element) -> RawEntry:
        when = element.find('when', recursive=False) or element.find('when')
        where = element.find('where', recursive=False) or element.find('where')
        author = element.find('author')

        return RawEntry(
            title=self._text(element, 'title'),
            content=self._text(element, 'content'),
            where=where.get('valueString', '') if where is not None else '',
            start=when.get('startTime', '') if when is not None else '',
            end=when.get('endTime', '') if when is not None else '',
            published=self._text(element, 'published'),
            updated=self._text(element, 'updated'),
            author=self._text(author, 'name') if author is not None else '',
            id=self._text(element, 'id')
        )

    @staticmethod
    def _text(element, name: str) -> str:
        child = element.find(name, recursive=False)
        return child.get_text() if child is not None else ''
