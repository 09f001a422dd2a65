"""
Tweet Routes
============

Posting tweets as the signed-in user.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from auth.middleware import get_user_service
from twitter_client import RemoteAPIError
from user_groups import TwitterUserService, UserGroupError

from .errors import http_error_for

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tweet"])

class TweetRequest(BaseModel):
    """Model for tweet requests."""
    status: str

@router.post("/statuses/update")
async def post_tweet(
    tweet_request: TweetRequest,
    service: TwitterUserService = Depends(get_user_service)
):
    """Post a tweet."""
    try:
        await service.post_tweet(tweet_request.status)
    except (UserGroupError, RemoteAPIError) as e:
        raise http_error_for(e, "post tweet")
    except Exception as e:
        logger.error(f"Error posting tweet: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {}
