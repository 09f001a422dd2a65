"""
User Group Reconciliation Engine
================================

This package lets a signed-in user export the membership of a Twitter user
group as an editable JSON snapshot and import an edited snapshot back,
converging the group on it.

A user group is addressed by a path (see ``path_format``):

- ``@john/_friends`` / ``_friends``: accounts the owner follows
- ``@john/_followers`` / ``_followers``: accounts following the owner
- ``@john/some-list`` / ``some-list``: members of one of the owner's lists

Only lists can be patched; friends and followers are read-only.

Modules:
--------
- path_format: group path parsing and formatting
- groups: group variants and the factory functions building them
- pagination: cursor-following page fetcher
- reconcile: diffing, chunked application, export and import
- service: per-user facade used by the web layer; it also posts tweets
"""

from .errors import (
    UserGroupError,
    InvalidPathError,
    InvalidGroupTypeError,
    UnsupportedOperationError,
    InvalidArgumentError,
    InvalidSnapshotError
)
from .models import GroupType, GroupKey, Member, MembershipDiff
from .path_format import PATH_PATTERN, parse, unparse
from .pagination import fetch_all
from .groups import (
    Group,
    FriendsGroup,
    FollowersGroup,
    ListGroup,
    from_key,
    from_path,
    all_groups,
    fetch_owned_list_slugs
)
from .reconcile import (
    diff_members,
    apply_chunked,
    export_group,
    import_group,
    handle_key,
    id_key
)
from .service import TwitterUserService

__all__ = [
    # Errors
    "UserGroupError",
    "InvalidPathError",
    "InvalidGroupTypeError",
    "UnsupportedOperationError",
    "InvalidArgumentError",
    "InvalidSnapshotError",

    # Models
    "GroupType",
    "GroupKey",
    "Member",
    "MembershipDiff",

    # Paths
    "PATH_PATTERN",
    "parse",
    "unparse",

    # Groups
    "Group",
    "FriendsGroup",
    "FollowersGroup",
    "ListGroup",
    "from_key",
    "from_path",
    "all_groups",
    "fetch_owned_list_slugs",

    # Reconciliation
    "fetch_all",
    "diff_members",
    "apply_chunked",
    "export_group",
    "import_group",
    "handle_key",
    "id_key",

    "TwitterUserService"
]
