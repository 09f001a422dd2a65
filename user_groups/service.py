"""
Twitter User Service
====================

Per-request facade for one signed-in user. Routes build one of these from
the session (see ``auth.middleware.get_user_service``) and call it instead of
touching groups or the API client directly.

Besides the user-group operations (listing, export, import) the facade also
posts tweets as the user (``post_tweet``).
"""

import logging
from typing import Any, Dict, List

from .errors import InvalidArgumentError
from .groups import Group, all_groups, fetch_owned_list_slugs, from_path
from .models import MembershipDiff
from .reconcile import export_group, import_group

logger = logging.getLogger(__name__)


class TwitterUserService:
    """
    Operations performed on behalf of an authenticated Twitter user.

    Attributes:
        client: Twitter API client signed with the user's access token
        screen_name (str): The user's handle, the default owner of group paths
    """

    def __init__(self, client, screen_name: str):
        self.client = client
        self.screen_name = screen_name

    async def post_tweet(self, status: str) -> Dict[str, Any]:
        """
        Post a tweet as the user.

        Raises:
            InvalidArgumentError: If the status is blank
        """
        if not status or not status.strip():
            raise InvalidArgumentError("Tweet text must not be empty")

        result = await self.client.post(
            "statuses/update",
            params={"status": status, "trim_user": True}
        )
        logger.info(f"Posted tweet {result.get('id_str')} for @{self.screen_name}")
        return result

    async def all_user_groups(self) -> List[Group]:
        list_slugs = await fetch_owned_list_slugs(self.screen_name, self.client)
        return all_groups(self.screen_name, list_slugs, self.client)

    async def export_user_group(self, path: str) -> str:
        group = from_path(path, self.screen_name, self.client)
        return await export_group(group)

    async def import_user_group(self, path: str, source: str) -> MembershipDiff:
        group = from_path(path, self.screen_name, self.client)
        return await import_group(group, source)
