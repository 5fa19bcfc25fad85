"""File-backed cache for raw calendar feeds."""
import glob
import hashlib
import logging
import os
import tempfile
import time
from typing import Callable, Optional

from processor.exceptions import CacheReadError

logger = logging.getLogger(__name__)


class FeedCache:
    """Stores one raw feed per request URL, keyed by the URL's hash."""

    SUFFIX = '.xml.cache'

    def __init__(
        self,
        cache_dir: str,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the feed cache.

        Args:
            cache_dir: Directory holding the cache files
            ttl_seconds: Maximum age of a cached feed; 0 disables caching
            clock: Returns the current time in seconds (injectable for tests)
        """
        self.cache_dir = cache_dir
        self.ttl_seconds = max(0, int(ttl_seconds))
        self.clock = clock

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def path_for(self, url: str) -> str:
        key = hashlib.md5(url.encode('utf-8')).hexdigest()
        return os.path.join(self.cache_dir, key + self.SUFFIX)

    def get(self, url: str) -> Optional[bytes]:
        """
        Return the cached feed for url if it is fresh.

        Args:
            url: Feed request URL

        Returns:
            Cached bytes, or None when caching is disabled, the entry is
            missing or older than the TTL

        Raises:
            CacheReadError: If an existing entry cannot be inspected or read
        """
        if not self.enabled:
            return None

        path = self.path_for(url)
        try:
            mtime = os.path.getmtime(path)
        except FileNotFoundError:
            logger.debug(f"No cached feed for {url}")
            return None
        except OSError as e:
            raise CacheReadError(path, str(e)) from e

        age = self.clock() - mtime
        if age > self.ttl_seconds:
            logger.info(f"Cached feed for {url} is stale ({int(age)}s old)")
            return None

        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise CacheReadError(path, str(e)) from e

        logger.info(f"Using cached feed for {url} ({int(age)}s old)")
        return data

    def put(self, url: str, data: bytes) -> bool:
        """
        Store the feed for url, replacing any previous entry.

        The file is written next to its destination and moved into place,
        so readers never see a partial write.

        Returns:
            True if the entry was written, False when caching is disabled
        """
        if not self.enabled:
            return False

        os.makedirs(self.cache_dir, exist_ok=True)
        path = self.path_for(url)

        fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, suffix='.tmp')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
            # mkstemp creates 0600 files
            os.chmod(path, 0o644)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"Cached {len(data)} bytes for {url}")
        return True

    def evict_all(self) -> int:
        """
        Remove every cached feed.

        Returns:
            Count of removed entries
        """
        removed = 0
        for path in glob.glob(os.path.join(self.cache_dir, '*' + self.SUFFIX)):
            try:
                os.unlink(path)
                removed += 1
            except FileNotFoundError:
                continue

        logger.info(f"Evicted {removed} cached feeds from {self.cache_dir}")
        return removed

    def install(self) -> None:
        os.makedirs(self.cache_dir, exist_ok=True)

    def uninstall(self) -> None:
        """Evict all entries and remove the cache directory if nothing else is in it."""
        self.evict_all()
        try:
            os.rmdir(self.cache_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Cache directory {self.cache_dir} not removed: {e}")
