"""
Authentication module for Solotter.

This module provides session authentication services including:
- Authentication middleware
- Current user and Twitter user service dependencies
"""

from .middleware import (
    SESSION_AUTH_KEY,
    AuthMiddleware,
    get_current_user,
    get_user_service
)

__all__ = [
    "SESSION_AUTH_KEY",
    "AuthMiddleware",
    "get_current_user",
    "get_user_service"
]
