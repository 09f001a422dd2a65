"""
Membership Reconciliation
=========================

Diffing of membership snapshots and batched application of the result.

The export/import round trip ties the engine together:

1. ``export_group`` serializes a group's current members as pretty-printed JSON
2. the user edits that snapshot (adds or removes entries)
3. ``import_group`` diffs the group's current members against the edited
   snapshot and patches the group so it converges on the snapshot

Batches are applied sequentially and fail fast. When chunk k of n fails,
chunks 1..k-1 stay applied on Twitter and chunks k+1..n are never attempted;
nothing is rolled back.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Hashable, Iterator, List, Sequence

from pydantic import TypeAdapter, ValidationError

from .errors import InvalidArgumentError, InvalidSnapshotError
from .models import Member, MembershipDiff

logger = logging.getLogger(__name__)

# Per-call ceiling of lists/members/create_all and destroy_all.
DEFAULT_CHUNK_LIMIT = 100

MemberKey = Callable[[Member], Hashable]
ChunkAction = Callable[[List[Member]], Awaitable[Any]]

_member_list_adapter = TypeAdapter(List[Member])


def handle_key(member: Member) -> Hashable:
    """Identity by screen name; Twitter treats screen names case-insensitively."""
    return member.handle.casefold()


def id_key(member: Member) -> Hashable:
    """Identity by account id."""
    return member.id


def diff_members(
    old: Sequence[Member],
    new: Sequence[Member],
    key: MemberKey = handle_key
) -> MembershipDiff:
    """
    Compute which members were removed from and added to a group.

    Members present on both sides are left alone. ``removed`` keeps the
    order of ``old`` and ``added`` keeps the order of ``new``; a key repeated
    on one side appears once, at its first occurrence.

    Args:
        old (Sequence[Member]): Membership before
        new (Sequence[Member]): Membership after
        key (MemberKey): Identity key used for comparison

    Returns:
        MembershipDiff: Members to add and to remove
    """
    old_keys = {key(member) for member in old}
    new_keys = {key(member) for member in new}

    removed = _unique([member for member in old if key(member) not in new_keys], key)
    added = _unique([member for member in new if key(member) not in old_keys], key)
    return MembershipDiff(added=added, removed=removed)


def _unique(members: Sequence[Member], key: MemberKey) -> List[Member]:
    seen = set()
    result = []
    for member in members:
        member_key = key(member)
        if member_key not in seen:
            seen.add(member_key)
            result.append(member)
    return result


def chunked(members: Sequence[Member], limit: int) -> Iterator[List[Member]]:
    """Yield consecutive slices of at most ``limit`` members."""
    if limit < 1:
        raise InvalidArgumentError(f"Chunk limit must be positive, got {limit}")

    for start in range(0, len(members), limit):
        yield list(members[start:start + limit])


async def apply_chunked(
    members: Sequence[Member],
    action: ChunkAction,
    limit: int = DEFAULT_CHUNK_LIMIT
) -> None:
    """
    Await ``action`` once per chunk of ``members``, in order.

    No call is made for an empty sequence. The first failing chunk
    propagates its exception; later chunks are skipped and earlier ones are
    not undone.

    Args:
        members (Sequence[Member]): Members to apply
        action (ChunkAction): Coroutine function applying one chunk
        limit (int): Maximum members per call

    Raises:
        InvalidArgumentError: If ``limit`` is not positive
    """
    chunks = list(chunked(members, limit))
    for index, chunk in enumerate(chunks):
        logger.debug(f"Applying chunk {index + 1}/{len(chunks)} ({len(chunk)} members)")
        try:
            await action(chunk)
        except Exception:
            logger.error(
                f"Chunk {index + 1}/{len(chunks)} failed; "
                f"{index} chunk(s) already applied, {len(chunks) - index - 1} skipped"
            )
            raise


def serialize_members(members: Sequence[Member]) -> str:
    """Serialize members as a 2-space indented JSON snapshot."""
    return json.dumps(
        [member.to_snapshot_dict() for member in members],
        indent=2,
        ensure_ascii=False
    )


def parse_snapshot(source: str) -> List[Member]:
    """
    Parse a JSON snapshot produced by ``serialize_members`` (possibly edited).

    Raises:
        InvalidSnapshotError: If the source is not a JSON array of members
    """
    try:
        return _member_list_adapter.validate_json(source)
    except ValidationError as e:
        raise InvalidSnapshotError(f"Invalid membership snapshot: {e}") from e


async def export_group(group) -> str:
    """Fetch a group's members and serialize them as a snapshot."""
    members = await group.fetch_members()
    logger.info(f"Exported {len(members)} members of {group.path}")
    return serialize_members(members)


async def import_group(group, snapshot: str, key: MemberKey = handle_key) -> MembershipDiff:
    """
    Converge a group on the membership described by ``snapshot``.

    The snapshot is parsed before any remote call, so a malformed snapshot
    never touches Twitter.

    Args:
        group: The group to patch
        snapshot (str): JSON snapshot of the desired membership
        key (MemberKey): Identity key used for the diff

    Returns:
        MembershipDiff: The diff that was applied
    """
    desired = parse_snapshot(snapshot)
    current = await group.fetch_members()

    diff = diff_members(current, desired, key=key)
    logger.info(
        f"Importing into {group.path}: "
        f"{len(diff.added)} to add, {len(diff.removed)} to remove"
    )
    await group.patch(diff)
    return diff
