"""
HTTP infrastructure for provider adapters.

Provides:
- APIKeyRotator: Round-robin rotation over comma-separated API keys
- RetryConfig: Exponential backoff configuration
- HTTPClient: Long-lived async HTTP client with retry and key rotation

Adapters own the translation from transport failures (HTTPClientError) into
their provider error; retries never happen above this layer.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass
class APIKeyRotator:
    """
    Round-robin API key rotation from a comma-separated setting.

    Example:
        rotator = APIKeyRotator.from_env_var("key1,key2,key3")
        key = await rotator.get_key()  # key1, then key2, ...
    """

    keys: list[str]
    _current_index: int = field(default=0, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @classmethod
    def from_env_var(cls, value: str | None) -> "APIKeyRotator | None":
        """
        Create rotator from comma-separated environment variable value.

        Returns:
            APIKeyRotator instance or None if no keys provided
        """
        if not value:
            return None
        keys = [k.strip() for k in value.split(",") if k.strip()]
        if not keys:
            return None
        return cls(keys=keys)

    async def get_key(self) -> str:
        """Get the next API key in round-robin rotation."""
        async with self._lock:
            key = self.keys[self._current_index]
            self._current_index = (self._current_index + 1) % len(self.keys)
            return key

    @property
    def key_count(self) -> int:
        """Return the number of available keys."""
        return len(self.keys)


@dataclass
class RetryConfig:
    """
    Exponential backoff configuration for HTTP retries.

    Formula: min(max_backoff, base_delay * 2^attempt) * (1 + random(0, jitter_factor))
    """

    max_retries: int = 3
    max_backoff_seconds: float = 60.0
    base_delay: float = 1.0
    jitter_factor: float = 0.1

    def calculate_backoff(self, attempt: int) -> float:
        """
        Calculate backoff duration for a given retry attempt.

        Args:
            attempt: The retry attempt number (0-indexed)

        Returns:
            Backoff duration in seconds with jitter applied
        """
        delay = min(self.base_delay * (2**attempt), self.max_backoff_seconds)
        return delay + delay * self.jitter_factor * random.random()

    def is_retryable_status(self, status_code: int) -> bool:
        """429 and transient 5xx responses are retried."""
        return status_code in RETRYABLE_STATUS_CODES

    def is_retryable_exception(self, exc: Exception) -> bool:
        """Timeouts and connection/read failures are retried."""
        return isinstance(exc, (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError))


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(HTTPClientError):
    """Raised when rate limit is hit and all retries exhausted."""


class HTTPClient:
    """
    Async HTTP client with retry logic and API key rotation.

    Features:
    - Exponential backoff with jitter on 429/5xx and transport errors
    - Optional bearer token or rotated API key per request
    - Lazily created httpx.AsyncClient, reused across requests
    - Usable as an async context manager or closed explicitly with aclose()

    Example:
        async with HTTPClient(RetryConfig(max_retries=2)) as client:
            response = await client.post(
                "https://api-inference.huggingface.co/models/facebook/bart-large-cnn",
                json_body={"inputs": text},
                bearer_token=token,
            )
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            retry_config: Configuration for retry behavior. Uses defaults if None.
            timeout: Request timeout in seconds.
            client: Pre-built httpx client (not closed by aclose()).
        """
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HTTPClient":
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform GET request with retry logic. See request()."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform POST request with retry logic. See request()."""
        return await self.request("POST", url, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        bearer_token: str | None = None,
        api_key_rotator: APIKeyRotator | None = None,
        api_key_header: str | None = None,
        api_key_param: str | None = None,
    ) -> httpx.Response:
        """
        Execute an HTTP request, retrying transient failures.

        Args:
            method: HTTP method (GET or POST)
            url: Request URL
            params: Query parameters
            headers: Request headers
            json_body: JSON body to send (POST)
            bearer_token: Sent as ``Authorization: Bearer <token>``
            api_key_rotator: Optional key rotator, a fresh key per attempt
            api_key_header: Header name for the rotated key
            api_key_param: Query parameter name for the rotated key

        Returns:
            httpx.Response on success (status < 400)

        Raises:
            HTTPClientError: On non-retryable errors or after retries exhausted
            RateLimitError: When rate limited and retries exhausted
        """
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        client = self._get_client()
        max_attempts = self.retry_config.max_retries + 1

        for attempt in range(max_attempts):
            request_headers = dict(headers) if headers else {}
            request_params = dict(params) if params else {}
            if bearer_token:
                request_headers["Authorization"] = f"Bearer {bearer_token}"
            if api_key_rotator:
                api_key = await api_key_rotator.get_key()
                if api_key_header:
                    request_headers[api_key_header] = api_key
                elif api_key_param:
                    request_params[api_key_param] = api_key

            try:
                response = await client.request(
                    method,
                    url,
                    params=request_params or None,
                    headers=request_headers or None,
                    json=json_body if method == "POST" else None,
                )
            except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as e:
                if attempt + 1 < max_attempts:
                    await self._backoff(url, attempt, type(e).__name__)
                    continue
                raise HTTPClientError(f"Request to {url} failed after {attempt + 1} attempts: {e}") from e
            except httpx.HTTPError as e:
                raise HTTPClientError(f"Request to {url} failed: {e}") from e

            if self.retry_config.is_retryable_status(response.status_code):
                if attempt + 1 < max_attempts:
                    await self._backoff(url, attempt, f"status {response.status_code}")
                    continue
                error_cls = RateLimitError if response.status_code == 429 else HTTPClientError
                raise error_cls(
                    f"Request to {url} failed with status {response.status_code} "
                    f"after {attempt + 1} attempts",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            if response.status_code >= 400:
                raise HTTPClientError(
                    f"Request to {url} failed with status {response.status_code}",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            return response

        # Unreachable: the loop either returns or raises
        raise HTTPClientError(f"Request to {url} failed after {max_attempts} attempts")

    async def _backoff(self, url: str, attempt: int, reason: str) -> None:
        backoff = self.retry_config.calculate_backoff(attempt)
        logger.warning(
            f"Retryable {reason} from {url}, attempt {attempt + 1}/"
            f"{self.retry_config.max_retries + 1}, backing off {backoff:.2f}s"
        )
        await asyncio.sleep(backoff)
