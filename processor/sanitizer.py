"""Sanitizer for untrusted text coming from calendar feeds."""
import html
import logging
import re

from bs4 import BeautifulSoup

from processor.models import Options

logger = logging.getLogger(__name__)


URL_PATTERN = re.compile(r'(?<![\w/])((?:https?://|www\.)[^\s<>]+)', re.IGNORECASE)
TRAILING_PUNCTUATION = '.,;:!?)\''


class TextSanitizer:
    """Strips, truncates and encodes feed text according to Options."""

    def __init__(self, options: Options):
        """
        Initialize the sanitizer.

        Args:
            options: Processing options (tag stripping, entity encoding, lengths)
        """
        self.options = options

    def text(self, value: str, max_length: int = None) -> str:
        """
        Sanitize a single line of text.

        Args:
            value: Raw text, possibly containing markup
            max_length: Maximum length in characters (default: Options.max_text_length)

        Returns:
            Sanitized single-line text
        """
        if max_length is None:
            max_length = self.options.max_text_length
        value = self._clean(value, max_length, multiline=False)
        return self.encode(value) if self.options.encode_entities else value

    def textarea(self, value: str, max_length: int = None) -> str:
        """Sanitize multi-line text, keeping line breaks."""
        if max_length is None:
            max_length = self.options.max_description_length
        value = self._clean(value, max_length, multiline=True)
        return self.encode(value) if self.options.encode_entities else value

    def description(self, value: str, as_html: bool) -> str:
        """
        Sanitize a free-text description.

        Args:
            value: Raw description from the feed
            as_html: Whether the result is rendered as HTML

        Returns:
            Sanitized description, HTML formatted when as_html is set
        """
        max_length = self.options.max_description_length

        if not as_html:
            return self.textarea(value, max_length)

        if not self.options.strip_tags and self.has_markup(value):
            # Re-serialize so markup cut by truncation is closed again
            truncated = self.truncate(value.strip(), max_length)
            return str(BeautifulSoup(truncated, 'html.parser'))

        value = self._clean(value, max_length, multiline=True)
        return self.paragraphs(self.linkify(self.encode(value)))

    def _clean(self, value: str, max_length: int, multiline: bool) -> str:
        if not value:
            return ''

        value = html.unescape(value)
        if self.options.strip_tags:
            value = self.strip_tags(value)

        if multiline:
            value = value.replace('\r\n', '\n').replace('\r', '\n')
            lines = [' '.join(line.split()) for line in value.split('\n')]
            value = re.sub(r'\n{3,}', '\n\n', '\n'.join(lines))
        else:
            value = ' '.join(value.split())

        return self.truncate(value.strip(), max_length)

    @staticmethod
    def has_markup(value: str) -> bool:
        return bool(value) and re.search(r'<[a-zA-Z/!]', value) is not None

    def strip_tags(self, value: str) -> str:
        """Remove all markup, leaving only text content."""
        # get_text decodes entities, which can produce new tags
        while self.has_markup(value):
            stripped = BeautifulSoup(value, 'html.parser').get_text()
            if stripped == value:
                break
            value = stripped
        return value

    @staticmethod
    def truncate(value: str, max_length: int) -> str:
        """Truncate to max_length characters (not bytes)."""
        if max_length is None or max_length <= 0 or len(value) <= max_length:
            return value
        return value[:max_length]

    @staticmethod
    def encode(value: str) -> str:
        """Encode &, <, > and double quotes as HTML entities."""
        return html.escape(value, quote=False).replace('"', '&quot;')

    @staticmethod
    def linkify(value: str) -> str:
        """
        Turn bare URLs into anchor tags.

        Args:
            value: Entity encoded plain text

        Returns:
            Text with http(s):// and www. URLs wrapped in <a> tags
        """
        def replace(match):
            url = match.group(1)
            trailing = ''
            while url and url[-1] in TRAILING_PUNCTUATION:
                trailing = url[-1] + trailing
                url = url[:-1]
            href = url if '://' in url else f"http://{url}"
            return f'<a href="{href}">{url}</a>{trailing}'

        return URL_PATTERN.sub(replace, value)

    @staticmethod
    def paragraphs(value: str) -> str:
        """Wrap blank-line separated blocks in <p> and convert single newlines to <br />."""
        blocks = [block.strip() for block in re.split(r'\n{2,}', value)]
        return '\n'.join(
            '<p>' + block.replace('\n', '<br />\n') + '</p>'
            for block in blocks if block
        )
