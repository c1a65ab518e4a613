"""
On-disk cache for the SOFA feed.

Two flat files live in the cache directory: the raw body of the last feed
document received with a 200 response, and the last ETag the server sent.
Neither file expires. Reads never raise; a missing or unreadable file is an
empty value. Writes go through a temporary file and an atomic replace so a
concurrent reader never observes a partially written file.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from sofacheck.constants import (
    CACHE_DIR_PERMISSIONS,
    CACHE_FILE_PERMISSIONS,
    ETAG_CACHE_FILE,
    FEED_CACHE_FILE,
)
from sofacheck.log_utils import logger

Pathish = Union[str, Path]


@dataclass(frozen=True)
class CacheEntry:
    """Snapshot of the persisted feed body and its revalidation token."""

    body: bytes = b""
    etag: str = ""


def _atomic_write_bytes(file_path: Path, data: bytes) -> bool:
    """
    Write bytes to a file atomically by writing to a temporary file and replacing the target on success.

    Returns:
        bool: `True` if the temporary write and atomic replace succeeded, `False` on any error.
    """
    try:
        temp_fd, temp_path = tempfile.mkstemp(
            dir=os.fspath(file_path.parent), prefix="tmp-", suffix=".tmp"
        )
    except OSError as e:
        logger.error(f"Could not create temporary file for {file_path}: {e}")
        return False

    try:
        with os.fdopen(temp_fd, "wb") as temp_f:
            temp_f.write(data)
        os.chmod(temp_path, CACHE_FILE_PERMISSIONS)
        os.replace(temp_path, file_path)
    except OSError as e:
        logger.error(f"Could not write to {file_path}: {e}")
        return False
    finally:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                pass
    return True


class FeedCache:
    """
    Reads and writes the cached feed body and ETag under a single directory.

    The directory is created lazily by ensure_directory(); the fetcher calls it
    before any read or write.
    """

    def __init__(self, cache_dir: Pathish):
        self.cache_dir = Path(cache_dir)
        self.body_file = self.cache_dir / FEED_CACHE_FILE
        self.etag_file = self.cache_dir / ETAG_CACHE_FILE

    def ensure_directory(self) -> bool:
        """
        Create the cache directory if it does not exist.

        Returns:
            bool: `True` if the directory exists afterwards, `False` if it could not be
            created. Failure is logged; callers carry on without a cache.
        """
        try:
            self.cache_dir.mkdir(
                mode=CACHE_DIR_PERMISSIONS, parents=True, exist_ok=True
            )
        except OSError as e:
            logger.error(f"Failed to create cache directory {self.cache_dir}: {e}")
            return False
        return True

    def read_body(self) -> bytes:
        """Return the cached feed body, or b"" if it is missing or unreadable."""
        try:
            return self.body_file.read_bytes()
        except FileNotFoundError:
            return b""
        except OSError as e:
            logger.warning(f"Could not read cached feed {self.body_file}: {e}")
            return b""

    def read_etag(self) -> str:
        """Return the cached ETag with surrounding whitespace removed, or ""."""
        try:
            return self.etag_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read cached ETag {self.etag_file}: {e}")
            return ""

    def write_body(self, data: bytes) -> bool:
        if not _atomic_write_bytes(self.body_file, data):
            logger.warning("Feed body was not cached; continuing with in-memory copy")
            return False
        logger.debug(f"Cached {len(data)} bytes of feed data at {self.body_file}")
        return True

    def write_etag(self, etag: str) -> bool:
        if not _atomic_write_bytes(self.etag_file, etag.encode("utf-8")):
            logger.warning("ETag was not cached; next request will be unconditional")
            return False
        logger.debug(f"Cached ETag {etag}")
        return True

    def discard_etag(self) -> bool:
        """Remove the cached ETag so the next request is unconditional."""
        try:
            self.etag_file.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Failed to remove cached ETag {self.etag_file}: {e}")
            return False
        logger.info(f"Discarded cached ETag {self.etag_file}")
        return True

    def entry(self) -> CacheEntry:
        return CacheEntry(body=self.read_body(), etag=self.read_etag())

    def clear(self) -> bool:
        """
        Remove the cached body and ETag.

        Returns:
            bool: `True` if both files are gone afterwards, `False` if either removal failed.
        """
        success = True
        for cache_file in (self.body_file, self.etag_file):
            try:
                cache_file.unlink()
                logger.info(f"Removed cache file {cache_file}")
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to remove cache file {cache_file}: {e}")
                success = False
        return success
