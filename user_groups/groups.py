"""
User Groups
===========

The three group variants and the factory functions that build them.

A group is a stateless accessor: it holds a GroupKey and the Twitter API
client of the current request, and every call goes straight to Twitter.

Variants:
---------
- FriendsGroup: accounts the owner follows (read-only)
- FollowersGroup: accounts following the owner (read-only)
- ListGroup: members of a list owned by the owner (read-write)

The set of variants is closed; ``from_key`` dispatches through
``GROUP_CLASSES``.
"""

import logging
from typing import Any, Dict, List, Sequence

from .errors import InvalidGroupTypeError, UnsupportedOperationError
from .models import FOLLOWERS_SLUG, FRIENDS_SLUG, GroupKey, GroupType, Member, MembershipDiff
from .pagination import fetch_all
from .path_format import parse, unparse
from .reconcile import DEFAULT_CHUNK_LIMIT, apply_chunked

logger = logging.getLogger(__name__)

# Largest page the member/friend/follower endpoints serve.
MEMBERS_PAGE_SIZE = 5000
OWNERSHIPS_PAGE_SIZE = 1000


class Group:
    """
    Base class of the group variants.

    Class Attributes:
        group_type (GroupType): The type tag the variant accepts
        endpoint (str): The cursored endpoint listing the members
    """

    group_type: GroupType
    endpoint: str

    def __init__(self, group_key: GroupKey, client):
        if group_key.type != self.group_type:
            raise InvalidGroupTypeError(group_key.type)
        self.group_key = group_key
        self.client = client

    @property
    def path(self) -> str:
        return unparse(self.group_key)

    def members_request(self) -> Dict[str, Any]:
        """Request parameters for the first page of members, minus the cursor."""
        return {
            "screen_name": self.group_key.owner_handle,
            "count": MEMBERS_PAGE_SIZE,
            "skip_status": True,
            "include_user_entities": False,
        }

    async def fetch_members(self) -> List[Member]:
        """
        Fetch every member of the group.

        Returns:
            List[Member]: Members in the order Twitter returned them
        """
        pages = await fetch_all(
            self.members_request(),
            lambda request: self.client.get(self.endpoint, request)
        )
        members = [
            Member.from_twitter_user(user)
            for page in pages
            for user in page.get("users", [])
        ]
        logger.debug(f"Fetched {len(members)} members of {self.path} in {len(pages)} page(s)")
        return members

    async def patch(self, diff: MembershipDiff) -> None:
        raise UnsupportedOperationError(
            f"Group {self.path} ({self.group_type.value}) doesn't support patching"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class FriendsGroup(Group):
    """Accounts the owner follows."""
    group_type = GroupType.FRIENDS
    endpoint = "friends/list"


class FollowersGroup(Group):
    """Accounts following the owner."""
    group_type = GroupType.FOLLOWERS
    endpoint = "followers/list"


class ListGroup(Group):
    """
    Members of a list owned by the owner.

    This is the only variant whose membership can be patched.
    """
    group_type = GroupType.LIST
    endpoint = "lists/members"

    def members_request(self) -> Dict[str, Any]:
        return {
            "owner_screen_name": self.group_key.owner_handle,
            "slug": self.group_key.slug,
            "count": MEMBERS_PAGE_SIZE,
            "skip_status": True,
            "include_user_entities": False,
        }

    def _membership_params(self, members: Sequence[Member]) -> Dict[str, Any]:
        # Passed as query string; Twitter ignores form bodies on these endpoints.
        return {
            "owner_screen_name": self.group_key.owner_handle,
            "slug": self.group_key.slug,
            "screen_name": ",".join(member.handle for member in members),
        }

    async def add_members(self, members: Sequence[Member], limit: int = DEFAULT_CHUNK_LIMIT) -> None:
        async def add_chunk(chunk: List[Member]):
            await self.client.post("lists/members/create_all", params=self._membership_params(chunk))

        await apply_chunked(members, add_chunk, limit)

    async def remove_members(self, members: Sequence[Member], limit: int = DEFAULT_CHUNK_LIMIT) -> None:
        async def remove_chunk(chunk: List[Member]):
            await self.client.post("lists/members/destroy_all", params=self._membership_params(chunk))

        await apply_chunked(members, remove_chunk, limit)

    async def patch(self, diff: MembershipDiff) -> None:
        """
        Apply a diff to the list, removals first.

        Removing before adding keeps the list free of transient duplicates
        when an added member shares its identity key with a removed one.
        """
        await self.remove_members(diff.removed)
        await self.add_members(diff.added)
        logger.info(f"Patched {self.path}: -{len(diff.removed)} +{len(diff.added)}")


GROUP_CLASSES = {
    GroupType.FRIENDS: FriendsGroup,
    GroupType.FOLLOWERS: FollowersGroup,
    GroupType.LIST: ListGroup,
}


def from_key(group_key: GroupKey, client) -> Group:
    """
    Build the group variant a key addresses.

    Raises:
        InvalidGroupTypeError: If no variant handles ``group_key.type``
    """
    group_class = GROUP_CLASSES.get(group_key.type)
    if group_class is None:
        raise InvalidGroupTypeError(group_key.type)
    return group_class(group_key, client)


def from_path(path: str, default_handle: str, client) -> Group:
    """Parse ``path`` and build the group it addresses."""
    return from_key(parse(path, default_handle), client)


def all_groups(handle: str, list_slugs: Sequence[str], client) -> List[Group]:
    """
    Every group owned by ``handle``: friends, followers, then each list.

    Args:
        handle (str): Owner screen name
        list_slugs (Sequence[str]): Slugs of the owner's lists, in display order
        client: Twitter API client

    Returns:
        List[Group]: The groups in the order described above
    """
    keys = [
        GroupKey(type=GroupType.FRIENDS, owner_handle=handle, slug=FRIENDS_SLUG),
        GroupKey(type=GroupType.FOLLOWERS, owner_handle=handle, slug=FOLLOWERS_SLUG),
    ]
    keys.extend(
        GroupKey(type=GroupType.LIST, owner_handle=handle, slug=slug)
        for slug in list_slugs
    )
    return [from_key(key, client) for key in keys]


async def fetch_owned_list_slugs(handle: str, client) -> List[str]:
    """Slugs of every list owned by ``handle``, in the order Twitter returns them."""
    pages = await fetch_all(
        {"screen_name": handle, "count": OWNERSHIPS_PAGE_SIZE},
        lambda request: client.get("lists/ownerships", request)
    )
    return [twitter_list["slug"] for page in pages for twitter_list in page.get("lists", [])]
