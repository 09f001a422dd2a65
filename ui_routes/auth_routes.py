"""
Authentication Routes
=====================

Sign-in with Twitter (OAuth 1.0a) and sign-out.

Flow:
1. ``GET /auth/login`` obtains a request token, keeps it in the session and
   redirects the browser to Twitter
2. Twitter redirects back to ``GET /auth/callback`` with the verifier
3. The request token is exchanged for an access token, the user's identity is
   looked up, and both are stored in the session under ``twitter_auth``

The tweepy calls block, so these handlers are plain functions and run in
FastAPI's threadpool.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

import twitter_oauth
from auth.middleware import SESSION_AUTH_KEY

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# The default page for signed-in users
HOME_PATH = "/"

REQUEST_TOKEN_KEY = "twitter_request_token"

@router.get("/login")
def twitter_login(request: Request):
    """Initiate Twitter OAuth login."""
    if request.session.get(SESSION_AUTH_KEY):
        return RedirectResponse(HOME_PATH, status_code=303)

    try:
        redirect_url, request_token = twitter_oauth.get_authorization_url()
    except Exception as e:
        logger.error(f"Error initiating Twitter login: {str(e)}")
        raise HTTPException(status_code=500, detail="Error initiating Twitter login")

    # Store request token in session
    request.session[REQUEST_TOKEN_KEY] = request_token
    return RedirectResponse(redirect_url)

@router.get("/callback")
def twitter_callback(
    request: Request,
    oauth_token: str = Query(None),
    oauth_verifier: str = Query(None)
):
    """Handle Twitter OAuth callback."""
    if not oauth_token or not oauth_verifier:
        raise HTTPException(status_code=400, detail="Missing OAuth parameters")

    # Get request token from session; it is single-use
    request_token = request.session.pop(REQUEST_TOKEN_KEY, None)
    if not request_token or request_token.get("oauth_token") != oauth_token:
        raise HTTPException(status_code=400, detail="Invalid session state")

    # Get access token
    try:
        access_token, access_token_secret = twitter_oauth.get_access_token(request_token, oauth_verifier)
    except ValueError as e:
        logger.error(f"Error getting access token: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    # Get Twitter user info
    try:
        twitter_user = twitter_oauth.get_twitter_user_info(access_token, access_token_secret)
    except Exception as e:
        logger.error(f"Error getting Twitter user info: {str(e)}")
        raise HTTPException(status_code=400, detail="Failed to get Twitter user info")

    request.session[SESSION_AUTH_KEY] = {
        "oauth_token": access_token,
        "oauth_token_secret": access_token_secret,
        "user_id": twitter_user["id"],
        "screen_name": twitter_user["screen_name"],
        "name": twitter_user.get("name", "")
    }
    logger.info(f"Signed in @{twitter_user['screen_name']}")

    return RedirectResponse(HOME_PATH, status_code=303)

@router.post("/logout")
def logout(request: Request):
    """Sign out by discarding the session."""
    request.session.clear()
    return {}
