"""
Authentication Middleware
========================

This module provides middleware for handling session-based authentication
throughout the application. After the Twitter OAuth callback, the user's
access token and identity are stored in the signed session cookie under
``twitter_auth``; the middleware exposes them to route handlers through
``request.state`` and rejects anonymous requests to protected paths.

It also provides the FastAPI dependencies routes use to reach the current
user and a Twitter user service acting on their behalf.
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from config import get_settings
from twitter_client import TwitterApiClient
from user_groups import TwitterUserService

# Set up logger
logger = logging.getLogger(__name__)

SESSION_AUTH_KEY = "twitter_auth"

class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware for handling session authentication.

    This middleware reads the Twitter user auth from the session, attaches it
    to the request state for use by route handlers, and turns away anonymous
    requests to protected paths. It must run inside SessionMiddleware.
    """

    def __init__(
        self,
        app: ASGIApp,
        public_paths: Optional[List[str]] = None,
        protected_paths: Optional[List[str]] = None
    ):
        """
        Initialize the authentication middleware.

        Args:
            app: The ASGI application
            public_paths: List of paths that require no authentication (supports wildcards)
            protected_paths: List of paths that specifically require authentication (supports wildcards)
        """
        super().__init__(app)
        self.public_paths = public_paths or [
            "/",
            "/auth/*",
            "/docs",
            "/redoc",
            "/openapi.json"
        ]
        self.protected_paths = protected_paths or [
            "/api/*"
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """
        Process the request through the middleware.

        This method:
        1. Reads the Twitter user auth from the session
        2. Attaches it to the request state
        3. Rejects anonymous requests to protected paths

        Args:
            request: The incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            The HTTP response
        """
        path = request.url.path

        twitter_auth = request.session.get(SESSION_AUTH_KEY)
        request.state.twitter_auth = twitter_auth
        request.state.is_authenticated = bool(twitter_auth)

        if self._is_public_path(path):
            return await call_next(request)

        if self._requires_auth(path) and not request.state.is_authenticated:
            logger.debug(f"Rejected anonymous request to {path}")
            if path.startswith("/api/"):
                return JSONResponse(
                    status_code=401,
                    content={"detail": "Authentication required"}
                )
            else:
                return RedirectResponse(url="/auth/login")

        return await call_next(request)

    def _is_public_path(self, path: str) -> bool:
        """
        Check if a path is public (requires no authentication).

        Args:
            path: Request path

        Returns:
            True if path is public, False otherwise
        """
        return _matches_any(path, self.public_paths)

    def _requires_auth(self, path: str) -> bool:
        """
        Check if a path requires authentication.

        Args:
            path: Request path

        Returns:
            True if authentication is required, False otherwise
        """
        return _matches_any(path, self.protected_paths)

def _matches_any(path: str, patterns: List[str]) -> bool:
    # Exact matches, then trailing-* wildcards
    if path in patterns:
        return True
    return any(
        pattern.endswith("*") and path.startswith(pattern[:-1])
        for pattern in patterns
    )

# Dependency for getting the current user
async def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency for getting the current authenticated Twitter user.

    Args:
        request: The request object

    Returns:
        The user auth stored in the session

    Raises:
        HTTPException: If user is not authenticated
    """
    twitter_auth = getattr(request.state, "twitter_auth", None) or request.session.get(SESSION_AUTH_KEY)
    if not twitter_auth:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated"
        )
    return twitter_auth

async def get_user_service(
    twitter_auth: Dict[str, Any] = Depends(get_current_user)
) -> AsyncIterator[TwitterUserService]:
    """
    FastAPI dependency yielding a TwitterUserService for the current user.

    The underlying Twitter API client is closed once the request is done.
    """
    client = TwitterApiClient.from_user_auth(twitter_auth, get_settings())
    try:
        yield TwitterUserService(client, twitter_auth["screen_name"])
    finally:
        await client.aclose()
