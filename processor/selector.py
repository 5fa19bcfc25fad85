"""Parser for 'field=value, field=value' query selectors."""
import logging
import re
from typing import List

from dateutil import parser as date_parser
from dateutil import tz

from processor.exceptions import ConfigError
from processor.models import Query

logger = logging.getLogger(__name__)


TERM_PATTERN = re.compile(r'^\s*([a-zA-Z_]+)\s*([=<>!%*~^$|&]+)\s*(.*?)\s*$', re.DOTALL)
TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def parse_selector(selector: str, query: Query = None) -> Query:
    """
    Parse a selector string into a Query.

    Args:
        selector: Selector such as "id=abc, from=2011-12-01, limit=10"
        query: Query to update (default: a new Query)

    Returns:
        The updated Query

    Raises:
        ConfigError: On unknown fields, operators other than '=' or bad values
    """
    query = query if query is not None else Query()

    for term in split_terms(selector):
        match = TERM_PATTERN.match(term)
        if not match:
            raise ConfigError(f"Invalid selector term: '{term}'")

        name, operator, value = match.groups()
        name = name.lower()
        value = unquote(value)

        if operator != '=':
            raise ConfigError(
                f"Operator '{operator}' is not supported for '{name}', only '=' is allowed"
            )

        try:
            apply_term(query, name, value)
        except ValueError as e:
            raise ConfigError(f"Invalid value for '{name}': {value} ({e})") from e

    logger.debug(f"Parsed selector '{selector}' into {query}")
    return query


def apply_term(query: Query, name: str, value: str) -> None:
    if name == 'id':
        query.set_id(value)
    elif name == 'from':
        query.set_from(parse_time(value))
    elif name == 'to':
        query.set_to(parse_time(value))
    elif name == 'keywords':
        query.set_keywords(value)
    elif name == 'limit':
        query.set_limit(int(value))
    elif name == 'sort':
        ascending = not value.startswith('-')
        query.set_sort(value.lstrip('-+').lower(), ascending)
    elif name == 'html':
        query.html = parse_bool(value)
    else:
        raise ConfigError(f"Unknown selector field: '{name}'")


def split_terms(selector: str) -> List[str]:
    """Split on commas outside of quoted values."""
    terms = []
    current = []
    quote = None

    for char in selector or '':
        if quote:
            if char == quote:
                quote = None
        elif char in ('"', "'"):
            quote = char
        elif char == ',':
            terms.append(''.join(current))
            current = []
            continue
        current.append(char)

    terms.append(''.join(current))
    return [term for term in terms if term.strip()]


def unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_time(value: str) -> int:
    """Parse a Unix timestamp or a date string (UTC unless an offset is given)."""
    value = value.strip()
    if value.lstrip('-').isdigit():
        return int(value)
    parsed = date_parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.UTC)
    return int(parsed.timestamp())


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got '{value}'")
