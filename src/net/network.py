"""Centralized network utilities with retry logic and exponential backoff.

This module provides HTTP request handling for card art downloads with:
- Automatic retries with exponential backoff
- Jitter to prevent thundering herd
- No retries on client errors (a 404 means the art does not exist)
"""

import random
import time
from dataclasses import dataclass
from typing import Optional

import requests

from core.logging import get_logger
from errors import NetworkError

logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    base_delay: float = 0.5  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True
    retry_on_429: bool = True  # Rate limit errors
    retry_on_5xx: bool = True  # Server errors
    timeout: int = 30  # seconds

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt with exponential backoff and jitter."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)

        if self.jitter:
            # Add random jitter (0-50% of delay)
            delay += random.uniform(0, delay * 0.5)

        return delay

    def should_retry(self, status_code: int) -> bool:
        if status_code == 429:
            return self.retry_on_429
        return 500 <= status_code < 600 and self.retry_on_5xx


DEFAULT_CONFIG = RetryConfig()


def fetch_bytes(
    url: str,
    *,
    headers: Optional[dict[str, str]] = None,
    config: Optional[RetryConfig] = None,
    user_agent: str = "DeckImages/1.0",
    session: Optional[requests.Session] = None,
) -> bytes:
    """Fetch URL content as bytes with retry logic.

    Args:
        url: URL to fetch
        headers: Optional HTTP headers
        config: Retry configuration (uses default if None)
        user_agent: User-Agent header value
        session: Optional requests session to reuse connections

    Returns:
        Response body as bytes

    Raises:
        NetworkError: On a non-2xx response, an empty body, or when all
            retries fail with a connection error or timeout
    """
    if config is None:
        config = DEFAULT_CONFIG

    request_headers = {"User-Agent": user_agent, "Accept": "*/*"}
    if headers:
        request_headers.update(headers)

    http = session or requests
    last_error: Optional[Exception] = None

    for attempt in range(config.max_retries):
        try:
            response = http.get(url, headers=request_headers, timeout=config.timeout)
        except (requests.ConnectionError, requests.Timeout) as error:
            last_error = error
            if attempt < config.max_retries - 1:
                time.sleep(config.get_delay(attempt))
                continue
            break

        if response.ok:
            if not response.content:
                raise NetworkError(f"Empty response body from {url}")
            return response.content

        last_error = NetworkError(f"HTTP {response.status_code} from {url}")
        if config.should_retry(response.status_code) and attempt < config.max_retries - 1:
            logger.debug(
                "Retrying {} after HTTP {} (attempt {})",
                url,
                response.status_code,
                attempt + 1,
            )
            time.sleep(config.get_delay(attempt))
            continue

        # Don't retry on client errors (4xx except 429)
        break

    if isinstance(last_error, NetworkError):
        raise last_error
    raise NetworkError(
        f"Failed to fetch {url} after {config.max_retries} attempts: {last_error}"
    ) from last_error
