"""
Cursor Pagination
=================

Twitter's v1.1 collection endpoints (``friends/list``, ``followers/list``,
``lists/members``, ``lists/ownerships``) return bounded pages plus an opaque
``next_cursor``. A cursor of ``-1`` requests the first page and a returned
cursor of ``0`` means there are no further pages.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

START_CURSOR = -1
END_CURSOR = 0

Page = Dict[str, Any]
FetchPage = Callable[[Dict[str, Any]], Awaitable[Page]]


async def fetch_all(initial_request: Mapping[str, Any], fetch_page: FetchPage) -> List[Page]:
    """
    Fetch every page of a cursored collection.

    The request is copied, its ``cursor`` set to the start sentinel, and
    ``fetch_page`` is awaited repeatedly with the cursor each page hands back
    until the end sentinel is returned. A page without ``next_cursor`` is the
    last page.

    Args:
        initial_request (Mapping[str, Any]): Request parameters without a cursor
        fetch_page (FetchPage): Coroutine function fetching one page

    Returns:
        List[Page]: All pages in fetch order

    Raises:
        InvalidArgumentError: If ``initial_request`` already contains a cursor
    """
    if "cursor" in initial_request:
        raise InvalidArgumentError("Don't specify cursor; fetch_all manages it")

    request = dict(initial_request)
    request["cursor"] = START_CURSOR

    pages: List[Page] = []
    while True:
        page = await fetch_page(dict(request))
        pages.append(page)

        next_cursor = page.get("next_cursor", END_CURSOR)
        if next_cursor is None or int(next_cursor) == END_CURSOR:
            break

        logger.debug(f"Following cursor {next_cursor} after page {len(pages)}")
        request["cursor"] = next_cursor

    return pages
