"""
Group Path Format
=================

Parses and formats group paths, the compact strings users type to address a
collection of accounts:

- ``@john/_friends``: accounts @john follows
- ``@john/_followers``: accounts following @john
- ``@john/some-list``: members of @john's list ``some-list``
- ``_friends`` / ``some-list``: same, owned by the signed-in user
"""

import re

from .errors import InvalidPathError
from .models import FOLLOWERS_SLUG, FRIENDS_SLUG, GroupKey, GroupType

PATH_PATTERN = r"^(?:@([A-Za-z0-9_-]+)/)?([A-Za-z0-9_-]+)$"

_PATH_RE = re.compile(PATH_PATTERN)

_RESERVED_SLUGS = {
    FRIENDS_SLUG: GroupType.FRIENDS,
    FOLLOWERS_SLUG: GroupType.FOLLOWERS,
}


def parse(path: str, default_handle: str) -> GroupKey:
    """
    Parse a group path into a GroupKey.

    Args:
        path (str): Group path, ``(@HANDLE/)?SLUG``
        default_handle (str): Owner used when the path has no ``@HANDLE/`` prefix

    Returns:
        GroupKey: The key the path identifies

    Raises:
        InvalidPathError: If the path does not match the grammar
    """
    if not isinstance(path, str):
        raise InvalidPathError(path)

    match = _PATH_RE.match(path.strip())
    if match is None:
        raise InvalidPathError(path)

    handle, slug = match.groups()
    group_type = _RESERVED_SLUGS.get(slug, GroupType.LIST)
    return GroupKey(type=group_type, owner_handle=handle or default_handle, slug=slug)


def unparse(key: GroupKey) -> str:
    """Format a GroupKey as an explicit ``@handle/slug`` path."""
    return f"@{key.owner_handle}/{key.slug}"
