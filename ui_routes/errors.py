"""
Translation of engine and Twitter failures into HTTP errors.

Details are logged here; clients only see a short, generic message.
"""

import logging

from fastapi import HTTPException

from twitter_client import RateLimitError, RemoteAPIError
from user_groups import (
    InvalidArgumentError,
    InvalidPathError,
    InvalidSnapshotError,
    UnsupportedOperationError
)

logger = logging.getLogger(__name__)

def http_error_for(error: Exception, action: str) -> HTTPException:
    """
    Map an exception raised while performing ``action`` to an HTTPException.

    Args:
        error: The exception raised by the service
        action: Short description of the failed operation, for logs and messages

    Returns:
        HTTPException: The error to raise from the route handler
    """
    if isinstance(error, (InvalidPathError, InvalidSnapshotError, InvalidArgumentError)):
        logger.info(f"Rejected {action}: {error}")
        return HTTPException(status_code=400, detail=str(error))

    if isinstance(error, UnsupportedOperationError):
        logger.info(f"Rejected {action}: {error}")
        return HTTPException(status_code=400, detail="Cannot import into friends/followers")

    if isinstance(error, RateLimitError):
        logger.error(f"Twitter rate limit hit during {action}: {error} (resets at {error.reset_at})")
        return HTTPException(status_code=429, detail="Twitter rate limit exceeded, try again later")

    if isinstance(error, RemoteAPIError):
        logger.error(f"Twitter API error during {action}: {error} {error.payload}")
        return HTTPException(status_code=502, detail=f"Failed to {action}")

    logger.error(f"Error during {action}: {error}", exc_info=error)
    return HTTPException(status_code=500, detail="Internal server error")
