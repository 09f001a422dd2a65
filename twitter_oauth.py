from typing import Any, Dict, Optional, Tuple

import tweepy
from tweepy import OAuth1UserHandler

from config import get_settings

def get_oauth_handler(callback_url: Optional[str] = None) -> OAuth1UserHandler:
    """Get a Twitter OAuth handler instance."""
    settings = get_settings()
    return OAuth1UserHandler(
        settings.TWITTER_CONSUMER_KEY,
        settings.TWITTER_CONSUMER_SECRET,
        callback=callback_url or settings.TWITTER_OAUTH_CALLBACK_URL
    )

def get_authorization_url(callback_url: Optional[str] = None) -> Tuple[str, Dict[str, str]]:
    """Generate a Twitter authorization URL."""
    auth = get_oauth_handler(callback_url)
    try:
        redirect_url = auth.get_authorization_url(signin_with_twitter=True)
    except tweepy.TweepyException as e:
        raise ValueError(f"Failed to get request token: {str(e)}")

    # Return both for storage/validation
    return redirect_url, auth.request_token

def get_access_token(request_token: Dict[str, str], oauth_verifier: str) -> Tuple[str, str]:
    """Exchange request token for access token."""
    auth = get_oauth_handler()
    auth.request_token = request_token

    try:
        access_token, access_token_secret = auth.get_access_token(oauth_verifier)
        return access_token, access_token_secret
    except tweepy.TweepyException as e:
        raise ValueError(f"Failed to get access token: {str(e)}")

def get_twitter_user_info(access_token: str, access_token_secret: str) -> Dict[str, Any]:
    """Get Twitter user info using the provided tokens."""
    auth = get_oauth_handler()
    auth.set_access_token(access_token, access_token_secret)

    api = tweepy.API(auth)
    try:
        user = api.verify_credentials()
    except tweepy.TweepyException as e:
        raise ValueError(f"Failed to get Twitter user info: {str(e)}")

    return {
        "id": user.id_str,
        "screen_name": user.screen_name,
        "name": user.name
    }
