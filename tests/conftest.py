"""
Shared pytest fixtures and configuration
"""

import os
import sys
import zlib
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["TWITTER_CONSUMER_KEY"] = "test_consumer_key"
os.environ["TWITTER_CONSUMER_SECRET"] = "test_consumer_secret"
os.environ["TWITTER_OAUTH_CALLBACK_URL"] = "http://testserver/auth/callback"
os.environ["TWITTER_API_RETRY_BACKOFF_SECONDS"] = "0"

from twitter_client import RemoteAPIError


def twitter_user(screen_name: str, user_id: Optional[int] = None, name: Optional[str] = None) -> Dict[str, Any]:
    """A raw v1.1 user object as Twitter returns it."""
    user_id = user_id if user_id is not None else zlib.crc32(screen_name.encode())
    return {
        "id": user_id,
        "id_str": str(user_id),
        "screen_name": screen_name,
        "name": name or screen_name.title(),
    }


class FakeTwitterClient:
    """
    In-memory stand-in for TwitterApiClient.

    ``pages`` maps an endpoint to its pages; page i links to page i+1 through
    ``next_cursor == 100 * (i + 1)`` and the last page returns cursor 0.
    Every call is recorded in ``calls`` as ``(method, endpoint, params)``.
    """

    def __init__(self, pages: Optional[Dict[str, List[Dict[str, Any]]]] = None, fail_post_at: Optional[int] = None):
        self.pages = pages or {}
        self.fail_post_at = fail_post_at
        self.calls = []
        self.closed = False

    async def get(self, endpoint, params=None):
        params = dict(params or {})
        self.calls.append(("GET", endpoint, params))

        pages = self.pages.get(endpoint, [{}])
        cursor = int(params.get("cursor", -1))
        index = 0 if cursor == -1 else cursor // 100
        page = dict(pages[index])
        page["next_cursor"] = 100 * (index + 1) if index + 1 < len(pages) else 0
        return page

    async def post(self, endpoint, params=None):
        post_count = len(self.posts)
        self.calls.append(("POST", endpoint, dict(params or {})))
        if self.fail_post_at is not None and post_count == self.fail_post_at:
            raise RemoteAPIError(f"{endpoint} failed", status_code=500)
        return {"id_str": "1"}

    async def aclose(self):
        self.closed = True

    @property
    def posts(self):
        return [call for call in self.calls if call[0] == "POST"]


@pytest.fixture
def make_twitter_client():
    """
    Factory fixture building FakeTwitterClient instances.
    """
    return FakeTwitterClient


@pytest.fixture
def make_user():
    """
    Factory fixture building raw Twitter user objects.
    """
    return twitter_user


@pytest.fixture(scope="function")
def app() -> FastAPI:
    """
    Provide the FastAPI app, dropping dependency overrides afterwards.
    """
    from main import app as main_app

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """
    Create a test client for the FastAPI app.
    """
    return TestClient(app)


@pytest.fixture(scope="function")
def mock_twitter_oauth(monkeypatch):
    """
    Replace the tweepy-backed OAuth helpers with canned responses.
    """
    import twitter_oauth

    request_token = {
        "oauth_token": "test-request-token",
        "oauth_token_secret": "test-request-secret",
        "oauth_callback_confirmed": "true"
    }

    def get_authorization_url(callback_url=None):
        return (
            "https://api.twitter.com/oauth/authenticate?oauth_token=test-request-token",
            request_token
        )

    def get_access_token(token, oauth_verifier):
        if token != request_token:
            raise ValueError("Failed to get access token: unknown request token")
        return "test-access-token", "test-access-secret"

    def get_twitter_user_info(access_token, access_token_secret):
        return {"id": "12345", "screen_name": "john_doe", "name": "John Doe"}

    monkeypatch.setattr(twitter_oauth, "get_authorization_url", get_authorization_url)
    monkeypatch.setattr(twitter_oauth, "get_access_token", get_access_token)
    monkeypatch.setattr(twitter_oauth, "get_twitter_user_info", get_twitter_user_info)

    return request_token


@pytest.fixture(scope="function")
def signed_in_client(client, mock_twitter_oauth) -> TestClient:
    """
    A test client that went through the OAuth login flow as @john_doe.
    """
    response = client.get("/auth/login", follow_redirects=False)
    assert response.status_code == 307

    response = client.get(
        "/auth/callback",
        params={"oauth_token": "test-request-token", "oauth_verifier": "test-verifier"},
        follow_redirects=False
    )
    assert response.status_code == 303

    return client
