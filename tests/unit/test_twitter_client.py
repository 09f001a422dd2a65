"""
Unit tests for the Twitter v1.1 API client
"""

import httpx
import pytest

from twitter_client import RateLimitError, RemoteAPIError, TwitterApiClient, is_transient

pytestmark = [pytest.mark.unit]


class RecordingTransport:
    """Replays canned responses and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(handler, max_attempts=3):
    return TwitterApiClient(
        consumer_key="test_consumer_key",
        consumer_secret="test_consumer_secret",
        access_token="test-access-token",
        access_token_secret="test-access-secret",
        base_url="https://api.twitter.test/1.1",
        max_attempts=max_attempts,
        retry_backoff=0,
        transport=httpx.MockTransport(handler)
    )


class TestRequests:
    """Test request construction and response handling"""

    @pytest.mark.asyncio
    async def test_get_url_and_params(self):
        """Test that endpoints are normalised to .json URLs with query params"""
        transport = RecordingTransport(httpx.Response(200, json={"users": []}))

        async with make_client(transport) as client:
            result = await client.get("lists/members", {"slug": "news", "cursor": -1})

        assert result == {"users": []}
        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/1.1/lists/members.json"
        assert request.url.params["slug"] == "news"
        assert request.url.params["cursor"] == "-1"

    @pytest.mark.asyncio
    async def test_requests_are_signed(self):
        """Test that every request carries an OAuth 1.0a Authorization header"""
        transport = RecordingTransport(httpx.Response(200, json={}))

        async with make_client(transport) as client:
            await client.get("/account/verify_credentials.json")

        authorization = transport.requests[0].headers["Authorization"]
        assert authorization.startswith("OAuth ")
        assert 'oauth_consumer_key="test_consumer_key"' in authorization
        assert 'oauth_token="test-access-token"' in authorization
        assert "oauth_signature=" in authorization
        assert transport.requests[0].url.path == "/1.1/account/verify_credentials.json"

    @pytest.mark.asyncio
    async def test_post_uses_query_string(self):
        """Test that POST parameters travel in the query string"""
        transport = RecordingTransport(httpx.Response(200, json={"id_str": "1"}))

        async with make_client(transport) as client:
            result = await client.post(
                "lists/members/create_all",
                params={"slug": "news", "screen_name": "alice,bob"}
            )

        assert result == {"id_str": "1"}
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.params["screen_name"] == "alice,bob"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_error_status(self):
        """Test that error statuses raise RemoteAPIError with the payload"""
        payload = {"errors": [{"code": 34, "message": "Sorry, that page does not exist."}]}
        transport = RecordingTransport(httpx.Response(404, json=payload))

        async with make_client(transport) as client:
            with pytest.raises(RemoteAPIError) as exc_info:
                await client.get("lists/members")

        assert exc_info.value.status_code == 404
        assert exc_info.value.payload == payload
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        """Test that a non-JSON body raises RemoteAPIError"""
        transport = RecordingTransport(httpx.Response(200, text="<html>oops</html>"))

        async with make_client(transport) as client:
            with pytest.raises(RemoteAPIError) as exc_info:
                await client.post("statuses/update", params={"status": "hi"})

        assert exc_info.value.payload == "<html>oops</html>"


class TestRetries:
    """Test retry behaviour"""

    @pytest.mark.asyncio
    async def test_get_retries_server_errors(self):
        """Test that a GET succeeds after transient 5xx responses"""
        transport = RecordingTransport(
            httpx.Response(503, json={}),
            httpx.Response(500, json={}),
            httpx.Response(200, json={"users": []}),
        )

        async with make_client(transport) as client:
            assert await client.get("friends/list") == {"users": []}

        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_get_gives_up_after_max_attempts(self):
        """Test that the last failure is raised once attempts run out"""
        transport = RecordingTransport(
            httpx.Response(429, json={}, headers={"x-rate-limit-reset": "1700000000"}),
            httpx.Response(429, json={}, headers={"x-rate-limit-reset": "1700000000"}),
        )

        async with make_client(transport, max_attempts=2) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.get("friends/list")

        assert exc_info.value.status_code == 429
        assert exc_info.value.reset_at == 1700000000
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_get_retries_transport_errors(self):
        """Test that connection failures are retried"""
        transport = RecordingTransport(
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json={}),
        )

        async with make_client(transport) as client:
            assert await client.get("friends/list") == {}

        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_get_does_not_retry_client_errors(self):
        """Test that 4xx responses other than 429 fail immediately"""
        transport = RecordingTransport(httpx.Response(401, json={}), httpx.Response(200, json={}))

        async with make_client(transport) as client:
            with pytest.raises(RemoteAPIError):
                await client.get("friends/list")

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_post_is_never_retried(self):
        """Test that a failed POST is attempted only once"""
        transport = RecordingTransport(httpx.Response(503, json={}), httpx.Response(200, json={}))

        async with make_client(transport) as client:
            with pytest.raises(RemoteAPIError) as exc_info:
                await client.post("lists/members/create_all", params={"screen_name": "alice"})

        assert exc_info.value.status_code == 503
        assert len(transport.requests) == 1


class TestIsTransient:
    """Test classification of retryable failures"""

    def test_status_codes(self):
        """Test which statuses are transient"""
        assert is_transient(RemoteAPIError("x", status_code=500))
        assert is_transient(RemoteAPIError("x", status_code=503))
        assert is_transient(RateLimitError("x"))
        assert not is_transient(RemoteAPIError("x", status_code=400))
        assert not is_transient(RemoteAPIError("x", status_code=404))

    def test_other_exceptions(self):
        """Test that unrelated exceptions are not retried"""
        assert not is_transient(ValueError("x"))
        assert not is_transient(RemoteAPIError("x"))
