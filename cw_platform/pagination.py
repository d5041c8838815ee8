"""
Cursor pagination over CosmWasm listing queries.

Listing queries take `start_after` and `limit` and return at most `limit`
items. There is no explicit end marker, so a page as long as the limit is
taken to mean more data exists. A listing whose last page is exactly full
costs one extra (empty) request.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .errors import PageFetchFailure

logger = logging.getLogger(__name__)

MAX_LIMIT = 100
ITER_LIMIT = 50


@dataclass
class PageResult:
    items: list = field(default_factory=list)
    failures: list = field(default_factory=list)
    iterations: int = 0
    # a page shorter than the limit was received
    exhausted: bool = False

    @property
    def complete(self) -> bool:
        return self.exhausted and not self.failures


def paginate(
    fetch_page: Callable[[Optional[str], int], list],
    cursor_of: Callable[[object], str],
    limit: int = MAX_LIMIT,
    iter_limit: int = ITER_LIMIT,
) -> PageResult:
    """Walk a listing from the start until a short page or iter_limit requests.

    fetch_page(start_after, limit) returns one page; cursor_of(item) gives the
    key to continue after. A page that fails to load or to yield a cursor is
    dropped, logged and recorded in PageResult.failures; the next request
    retries from the last good cursor.
    """
    result = PageResult()
    cursor = None
    has_more = True

    while has_more and result.iterations < iter_limit:
        result.iterations += 1

        try:
            page = list(fetch_page(cursor, limit))
            next_cursor = cursor_of(page[-1]) if page else cursor
        except Exception as error:
            failure = PageFetchFailure(result.iterations, cursor, error)
            logger.warning("%s", failure)
            result.failures.append(failure)
            continue

        result.items.extend(page)
        has_more = len(page) == limit
        cursor = next_cursor

    result.exhausted = not has_more
    if has_more:
        logger.warning(
            "Pagination stopped at %d iterations with %d items",
            result.iterations,
            len(result.items),
        )

    return result
