"""
User Group Errors
=================

Exceptions raised by the user-group reconciliation engine.

Failures coming from Twitter itself are not defined here; they are raised by
``twitter_client`` as ``RemoteAPIError`` and propagate through the engine
untouched.
"""


class UserGroupError(Exception):
    """Base class for all user-group errors."""


class InvalidPathError(UserGroupError, ValueError):
    """A group path does not match ``(@HANDLE/)?SLUG``."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Invalid group path: {path!r}")


class InvalidGroupTypeError(UserGroupError):
    """A group key carries a type tag no group variant handles."""

    def __init__(self, group_type):
        self.group_type = group_type
        super().__init__(f"Invalid group type: {group_type!r}")


class UnsupportedOperationError(UserGroupError):
    """The group variant does not support the requested operation."""


class InvalidArgumentError(UserGroupError, ValueError):
    """An argument violates the calling contract of an engine operation."""


class InvalidSnapshotError(UserGroupError, ValueError):
    """A membership snapshot could not be parsed."""
