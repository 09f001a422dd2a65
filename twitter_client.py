"""
Twitter v1.1 API Client
=======================

This module implements the Twitter API client used by Solotter. It is a thin
async wrapper around Twitter's v1.1 REST API: requests are signed with the
signed-in user's OAuth 1.0a access token and responses are returned as parsed
JSON without interpretation.

The client exposes two operations:
- get: read endpoints (``friends/list``, ``lists/members``, ...), retried with
  exponential backoff on transient failures (transport errors, 429, 5xx)
- post: write endpoints (``lists/members/create_all``, ``statuses/update``, ...),
  never retried since they are not idempotent

Parameters are always passed in the query string; the list membership
endpoints ignore form bodies.

Any failure surfaces as RemoteAPIError (RateLimitError for HTTP 429).
"""

import logging
from typing import Any, Dict, Optional

import httpx
from oauthlib.oauth1 import Client as OAuth1Client
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.twitter.com/1.1"
USER_AGENT = "solotter-web"


class RemoteAPIError(Exception):
    """
    A request to Twitter failed.

    Attributes:
        status_code (Optional[int]): HTTP status, None for transport failures
        payload (Any): Parsed error body (or raw text) returned by Twitter
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RateLimitError(RemoteAPIError):
    """
    Twitter answered HTTP 429.

    Attributes:
        reset_at (Optional[int]): Epoch seconds at which the rate window resets
    """

    def __init__(self, message: str, payload: Any = None, reset_at: Optional[int] = None):
        super().__init__(message, status_code=429, payload=payload)
        self.reset_at = reset_at


def is_transient(error: BaseException) -> bool:
    """Whether a failed GET is worth retrying."""
    if not isinstance(error, RemoteAPIError):
        return False
    if error.status_code is None:
        return isinstance(error.__cause__, httpx.TransportError)
    return error.status_code == 429 or error.status_code >= 500


class OAuth1Auth(httpx.Auth):
    """
    httpx authentication flow signing requests with OAuth 1.0a (HMAC-SHA1).

    Signing itself is delegated to oauthlib.
    """

    def __init__(self, consumer_key: str, consumer_secret: str, token: str, token_secret: str):
        self._signer = OAuth1Client(
            consumer_key,
            client_secret=consumer_secret,
            resource_owner_key=token,
            resource_owner_secret=token_secret
        )

    def auth_flow(self, request: httpx.Request):
        _, headers, _ = self._signer.sign(str(request.url), http_method=request.method)
        request.headers["Authorization"] = headers["Authorization"]
        yield request


class TwitterApiClient:
    """
    Async client for Twitter's v1.1 REST API acting as one user.

    The client owns an ``httpx.AsyncClient``; close it with ``aclose`` or use
    the client as an async context manager.

    Attributes:
        session (httpx.AsyncClient): HTTP client signing every request
        base_url (str): Base URL for Twitter's v1.1 API
        max_attempts (int): Attempts per GET request, including the first
        retry_backoff (float): Multiplier of the exponential backoff, in seconds
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        access_token: str,
        access_token_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        max_attempts: int = 3,
        retry_backoff: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.retry_backoff = retry_backoff
        self.session = httpx.AsyncClient(
            auth=OAuth1Auth(consumer_key, consumer_secret, access_token, access_token_secret),
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=timeout,
            transport=transport,
            follow_redirects=True
        )

    @classmethod
    def from_user_auth(cls, user_auth: Dict[str, Any], settings, **kwargs) -> "TwitterApiClient":
        """
        Create a client from the session's user auth and the app settings.

        Args:
            user_auth (Dict[str, Any]): Session payload with ``oauth_token`` and
                ``oauth_token_secret``
            settings: Application settings carrying the consumer credentials
            **kwargs: Passed through to the constructor (e.g. ``transport``)

        Returns:
            TwitterApiClient: A client acting as the signed-in user
        """
        return cls(
            consumer_key=settings.TWITTER_CONSUMER_KEY or "",
            consumer_secret=settings.TWITTER_CONSUMER_SECRET or "",
            access_token=user_auth["oauth_token"],
            access_token_secret=user_auth["oauth_token_secret"],
            base_url=settings.TWITTER_API_BASE_URL,
            timeout=settings.TWITTER_API_TIMEOUT_SECONDS,
            max_attempts=settings.TWITTER_API_MAX_ATTEMPTS,
            retry_backoff=settings.TWITTER_API_RETRY_BACKOFF_SECONDS,
            **kwargs
        )

    async def __aenter__(self) -> "TwitterApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.session.aclose()

    def _url(self, endpoint: str) -> str:
        # Ensure endpoint starts with a slash and ends with .json if not already
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        if not endpoint.endswith(".json"):
            endpoint = endpoint + ".json"
        return f"{self.base_url}{endpoint}"

    async def _request(self, method: str, endpoint: str, params: Optional[Dict[str, Any]]) -> Any:
        url = self._url(endpoint)
        logger.debug(f"Executing v1.1 API request {method} {endpoint} with params: {params}")

        try:
            response = await self.session.request(method, url, params=params)
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"Twitter API request {method} {endpoint} failed: {e}") from e

        if response.status_code >= 400:
            message = f"Twitter API request {method} {endpoint} failed with status code {response.status_code}"
            try:
                payload = response.json()
            except ValueError:
                payload = response.text

            if response.status_code == 429:
                reset = response.headers.get("x-rate-limit-reset")
                raise RateLimitError(
                    message,
                    payload=payload,
                    reset_at=int(reset) if reset and reset.isdigit() else None
                )
            raise RemoteAPIError(message, status_code=response.status_code, payload=payload)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"Twitter API request {method} {endpoint} returned a non-JSON response",
                status_code=response.status_code,
                payload=response.text
            ) from e

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a GET request, retrying transient failures.

        Args:
            endpoint (str): The API endpoint, e.g. ``lists/members``
            params (Optional[Dict[str, Any]]): Query parameters

        Returns:
            Any: The parsed JSON response

        Raises:
            RemoteAPIError: If the request still fails after the last attempt
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, max=60),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        ):
            with attempt:
                return await self._request("GET", endpoint, params)

    async def post(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a POST request once, with parameters in the query string.

        Args:
            endpoint (str): The API endpoint, e.g. ``lists/members/create_all``
            params (Optional[Dict[str, Any]]): Query parameters

        Returns:
            Any: The parsed JSON response

        Raises:
            RemoteAPIError: If the request fails
        """
        return await self._request("POST", endpoint, params)
