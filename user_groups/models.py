"""
User Group Models
=================

Value types shared by the user-group reconciliation engine.

- GroupType: closed set of group variants (friends, followers, list)
- GroupKey: structured identifier of exactly one group
- Member: one Twitter account as it appears in a membership snapshot
- MembershipDiff: result of comparing two membership snapshots

Members use ``userId`` / ``screenName`` / ``name`` as their external field
names so exported snapshots stay compatible with hand-edited files.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GroupType(str, Enum):
    """The kinds of user group a path can address."""
    FRIENDS = "friends"
    FOLLOWERS = "followers"
    LIST = "list"


FRIENDS_SLUG = "_friends"
FOLLOWERS_SLUG = "_followers"


class GroupKey(BaseModel):
    """
    Identifies one user group.

    Attributes:
        type (GroupType): Which variant the key addresses
        owner_handle (str): Screen name of the owning account
        slug (str): ``_friends``, ``_followers`` or a list slug
    """
    model_config = ConfigDict(frozen=True)

    type: GroupType
    owner_handle: str
    slug: str


class Member(BaseModel):
    """
    A Twitter account belonging to a group.

    Attributes:
        id (str): Stable account id (``userId`` in snapshots), may be empty in
            hand-written snapshot entries
        handle (str): Screen name (``screenName`` in snapshots)
        display_name (str): Profile name (``name`` in snapshots)
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", alias="userId")
    handle: str = Field(..., alias="screenName", min_length=1)
    display_name: str = Field("", alias="name")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Twitter and older snapshots carry numeric ids.
        if value is None:
            return ""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("handle", mode="before")
    @classmethod
    def _strip_handle(cls, value):
        # Hand-edited snapshots pick up stray whitespace.
        if isinstance(value, str):
            return value.strip()
        return value

    @classmethod
    def from_twitter_user(cls, user: dict) -> "Member":
        """Project a raw v1.1 user object onto a Member."""
        return cls(
            id=user.get("id_str") or str(user.get("id", "")),
            handle=user["screen_name"],
            display_name=user.get("name") or "",
        )

    def to_snapshot_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class MembershipDiff(BaseModel):
    """Members to add to and remove from a group."""
    added: List[Member] = Field(default_factory=list)
    removed: List[Member] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed
