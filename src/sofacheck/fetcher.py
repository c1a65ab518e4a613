"""
Conditional retrieval of the SOFA feed.

One GET is issued per call. The cached ETag is sent as If-None-Match when one
exists, a 200 response refreshes the cache, a 304 response promotes the cached
body, and anything else falls back to whatever body is already cached.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from sofacheck.cache import FeedCache
from sofacheck.config import FeedConfig
from sofacheck.exceptions import FeedFetchError
from sofacheck.log_utils import logger


class FetchKind(Enum):
    FRESH = "fresh"
    NOT_MODIFIED = "not_modified"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class FetchOutcome:
    """
    Result of a feed fetch.

    Attributes:
        kind: How the server (or the transport) answered.
        body: Feed bytes to evaluate. For UNAVAILABLE this is the stale cached body
            when one exists, otherwise empty.
        status_code: HTTP status of the response, or None if no response arrived.
    """

    kind: FetchKind
    body: bytes = b""
    status_code: Optional[int] = None

    @property
    def usable(self) -> bool:
        return bool(self.body)


def build_request_headers(user_agent: str, etag: str) -> dict:
    headers = {"User-Agent": user_agent}
    if etag:
        headers["If-None-Match"] = etag
    return headers


def _fallback(
    cache: FeedCache, reason: str, status_code: Optional[int]
) -> FetchOutcome:
    cached_body = cache.read_body()
    if cached_body:
        logger.warning(f"Failed to fetch new data ({reason}), using cached data")
        return FetchOutcome(FetchKind.UNAVAILABLE, cached_body, status_code)

    logger.error(f"Failed to fetch SOFA data ({reason}) and no cache available")
    return FetchOutcome(FetchKind.UNAVAILABLE, status_code=status_code)


def _send_request(
    config: FeedConfig,
    headers: dict,
    session: Optional[requests.Session],
) -> requests.Response:
    getter = session.get if session is not None else requests.get
    try:
        return getter(config.url, headers=headers, timeout=config.timeout)
    except requests.exceptions.RequestException as e:
        raise FeedFetchError(
            "Request for SOFA feed failed", url=config.url, details=str(e)
        ) from e


def fetch_feed(
    config: Optional[FeedConfig] = None,
    cache: Optional[FeedCache] = None,
    session: Optional[requests.Session] = None,
) -> FetchOutcome:
    """
    Fetch the feed, revalidating against the cached ETag.

    Parameters:
        config: Feed settings; defaults to FeedConfig.default().
        cache: Cache store; defaults to a FeedCache in the config's cache directory.
        session: Optional requests session used instead of the module-level requests.get.

    Returns:
        FetchOutcome: FRESH with the new body on 200, NOT_MODIFIED with the cached
        body on 304, or UNAVAILABLE. An UNAVAILABLE outcome carries the stale cached
        body after a transport error or an unexpected status when one is cached; it
        is empty if nothing is cached. When the cache directory cannot be created
        the request is still made, unconditionally, and nothing is persisted.

        A new ETag from a 200 response is stored only once its body is cached. A 304
        with no cached body discards the stored ETag.
    """
    config = config or FeedConfig.default()
    cache = cache or FeedCache(config.resolved_cache_dir)

    cache_usable = cache.ensure_directory()
    if not cache_usable:
        logger.warning("Continuing without the feed cache")

    etag = cache.read_etag() if cache_usable else ""
    headers = build_request_headers(config.user_agent, etag)

    logger.debug(
        f"Fetching SOFA feed from {config.url}"
        + (f" (If-None-Match: {etag})" if etag else "")
    )
    try:
        response = _send_request(config, headers, session)
    except FeedFetchError as e:
        logger.error(str(e))
        return _fallback(cache, "network error", None)

    status_code = response.status_code
    new_etag = response.headers.get("ETag")

    if status_code == 304:
        cached_body = cache.read_body() if cache_usable else b""
        if not cached_body:
            logger.error("Server reported 304 Not Modified but no cached feed exists")
            if cache_usable:
                # Next request must be unconditional to repopulate the body
                cache.discard_etag()
            return FetchOutcome(FetchKind.UNAVAILABLE, status_code=status_code)
        if new_etag:
            cache.write_etag(new_etag)
        logger.info("Using cached SOFA feed (304 Not Modified)")
        return FetchOutcome(FetchKind.NOT_MODIFIED, cached_body, status_code)

    if status_code == 200:
        body = response.content
        if cache_usable and cache.write_body(body) and new_etag:
            cache.write_etag(new_etag)
        logger.info(f"Fetched {len(body)} bytes of fresh SOFA feed data")
        return FetchOutcome(FetchKind.FRESH, body, status_code)

    if new_etag and cache_usable:
        cache.write_etag(new_etag)
    return _fallback(cache, f"HTTP {status_code}", status_code)
