"""AWS Lambda handler rendering a calendar feed as HTML."""
import json
import logging
import os
import time
from typing import Dict, Any

from calendar_service import CalendarService
from feed.fetcher import FeedFetcher
from processor.models import Options, Query
from storage.feed_cache import FeedCache


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_options() -> Options:
    """
    Read processing options from environment variables.

    Returns:
        Options populated from CACHE_TTL_SECONDS, MAX_TEXT_LENGTH,
        DATE_FORMAT, TIMEZONE and RENDER_AS_HTML
    """
    defaults = Options()
    return Options(
        cache_ttl_seconds=int(os.environ.get('CACHE_TTL_SECONDS', defaults.cache_ttl_seconds)),
        max_text_length=int(os.environ.get('MAX_TEXT_LENGTH', defaults.max_text_length)),
        date_format=os.environ.get('DATE_FORMAT', defaults.date_format),
        timezone=os.environ.get('TIMEZONE', defaults.timezone),
        render_as_html=env_flag('RENDER_AS_HTML', defaults.render_as_html)
    )


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler: render calendar events for a selector.

    Args:
        event: API Gateway event; queryStringParameters may carry 'selector' or 'id'
        context: Lambda context object

    Returns:
        Response dict with statusCode, headers and the rendered HTML body
    """
    # Read configuration from environment variables
    calendar_id = os.environ.get('CALENDAR_ID', '')
    cache_dir = os.environ.get('CACHE_DIR', '/tmp/calendar-cache')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = os.environ.get('TIMEOUT_SECONDS')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    params = (event or {}).get('queryStringParameters') or {}

    try:
        options = load_options()
        logger.info(
            "Lambda execution started",
            extra={
                'calendar_id': calendar_id,
                'cache_dir': cache_dir,
                'cache_ttl_seconds': options.cache_ttl_seconds
            }
        )

        service = CalendarService(
            options=options,
            cache=FeedCache(cache_dir, ttl_seconds=options.cache_ttl_seconds),
            fetcher=FeedFetcher(timeout=float(timeout_seconds) if timeout_seconds else None),
            default_calendar_id=calendar_id
        )

        if params.get('selector'):
            query = params['selector']
        else:
            query = Query(calendar_id=params.get('id', ''))

        events = service.find(query)
        body = service.render()
        duration = time.time() - start_time

        if service.has_error:
            logger.error(
                f"Calendar lookup failed: {service.error}",
                extra={'duration_seconds': round(duration, 2)}
            )
            return {
                'statusCode': 502,
                'headers': {'Content-Type': 'text/plain; charset=utf-8'},
                'body': body
            }

        logger.info(
            "Lambda execution completed successfully",
            extra={
                'duration_seconds': round(duration, 2),
                'events_found': len(events),
                'url': service.url
            }
        )

        return {
            'statusCode': 200,
            'headers': {'Content-Type': 'text/html; charset=utf-8'},
            'body': body
        }

    except Exception as e:
        duration = time.time() - start_time

        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )

        return {
            'statusCode': 500,
            'body': json.dumps({
                'message': 'Calendar rendering failed',
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': round(duration, 2)
            })
        }
