"""
Remote image relay.

Avatars and backgrounds on a contributor board usually live on a CDN that does
not allow cross-origin reads, so they are fetched server side and handed to the
renderer as bytes. Fetches are retried with exponential backoff on rate limits,
server errors and dropped connections, up to a fixed number of attempts, each
bounded by its own timeout.
"""
import base64
from typing import Dict, NamedTuple, Optional, TYPE_CHECKING
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from contributor_board.core.exceptions import RelayError, RelayUpstreamError
from contributor_board.core.logger import get_logger

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

logger = get_logger(__name__)

FALLBACK_AVATAR_ENDPOINT = "https://ui-avatars.com/api/"

BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Sec-Fetch-Dest": "image",
    "Sec-Fetch-Mode": "no-cors",
    "Sec-Fetch-Site": "cross-site",
}


class RelayedImage(NamedTuple):
    content: bytes
    content_type: str

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


class _RetryableStatus(Exception):
    """Internal signal: the upstream answered 429 or 5xx and the fetch may be retried."""
    def __init__(self, response: httpx.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def needs_relay(reference: Optional[str]) -> bool:
    """False for empty, site-relative, data: and blob: references, which need no fetching."""
    if not reference:
        return False
    return not reference.startswith(("/", "data:", "blob:"))


def fallback_avatar_url(name: str) -> str:
    """Generated initials avatar used when a contributor's picture cannot be relayed."""
    return f"{FALLBACK_AVATAR_ENDPOINT}?name={quote(name)}&background=random&color=fff&size=128"


class ImageRelay:
    """
    Fetches remote images with bounded retries.

    Attributes:
        max_attempts (int): Attempt ceiling, the first try included.
        timeout_seconds (float): Timeout applied to each attempt.
        backoff_base_seconds (float): Wait before the second attempt; doubles on each retry.
        referer (str): Referer header sent to image hosts.
    """
    DEFAULT_MAX_ATTEMPTS = 3
    DEFAULT_TIMEOUT_SECONDS = 15.0
    DEFAULT_BACKOFF_BASE_SECONDS = 1.0
    DEFAULT_REFERER = "https://www.facebook.com/"

    def __init__(self, config: Optional['ConfigurationManager'] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initializes the ImageRelay.

        Args:
            config (Optional[ConfigurationManager]): Source of `components.image_relay.*` settings.
                If None, defaults are used.
            transport (Optional[httpx.AsyncBaseTransport]): Custom httpx transport, mainly for tests.
        """
        settings = (config.get('components.image_relay', {}) if config else {}) or {}
        self.max_attempts = int(settings.get('max_attempts', self.DEFAULT_MAX_ATTEMPTS))
        self.timeout_seconds = float(settings.get('timeout_seconds', self.DEFAULT_TIMEOUT_SECONDS))
        self.backoff_base_seconds = float(settings.get('backoff_base_seconds', self.DEFAULT_BACKOFF_BASE_SECONDS))
        self.referer = settings.get('referer', self.DEFAULT_REFERER)
        self._transport = transport

        if self.max_attempts < 1:
            raise RelayError(f"max_attempts must be at least 1, got {self.max_attempts}")

    async def fetch(self, url: str) -> RelayedImage:
        """
        Fetches an image, retrying transient failures.

        Args:
            url (str): Absolute URL of the image.

        Returns:
            RelayedImage: The image bytes and their content type.

        Raises:
            RelayUpstreamError: If the host answers with a non-success status (after retries for 429/5xx).
            RelayError: If the URL is invalid or network failures exhaust the attempt budget.
        """
        if not url:
            raise RelayError("Missing URL parameter")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_base_seconds, min=0, max=60),
            retry=retry_if_exception_type((_RetryableStatus, httpx.TransportError)),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
                headers={**BROWSER_HEADERS, "Referer": self.referer},
            ) as client:
                async for attempt in retrying:
                    with attempt:
                        response = await self._get(client, url, attempt.retry_state.attempt_number)
        except _RetryableStatus as e:
            raise RelayUpstreamError(url, e.response.status_code, e.response.reason_phrase)
        except httpx.InvalidURL as e:
            raise RelayError(f"Invalid image URL '{url}'", original_exception=e)
        except httpx.TransportError as e:
            logger.error(f"Relay gave up on {url} after {self.max_attempts} attempts: {e!r}")
            raise RelayError(f"Failed to fetch '{url}' after {self.max_attempts} attempts", original_exception=e)

        content_type = response.headers.get("content-type", "application/octet-stream")
        logger.debug(f"Relayed {len(response.content)} bytes ({content_type}) from {url}.")
        return RelayedImage(content=response.content, content_type=content_type)

    async def _get(self, client: httpx.AsyncClient, url: str, attempt_number: int) -> httpx.Response:
        logger.debug(f"Relay attempt {attempt_number}: fetching {url}")
        response = await client.get(url)
        if response.is_success:
            return response
        if response.status_code == 429 or response.status_code >= 500:
            raise _RetryableStatus(response)
        logger.error(f"Upstream refused {url}: {response.status_code} {response.reason_phrase}")
        raise RelayUpstreamError(url, response.status_code, response.reason_phrase)

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(f"Relay attempt {retry_state.attempt_number} failed ({exc}). Retrying in {wait:.1f}s.")
