"""
Cursor-driven paging over a statements query.

    FETCHING --(more != "")--> FETCHING
    FETCHING --(more == "")--> DONE

Pages are produced lazily, strictly in cursor order: the URL of page N+1 is
only known once page N has been decoded.
"""

from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple

from .logger import StructuredLogger, get_logger
from .schema import PageEnvelope, decode_page

HTTP_OK = 200

Fetch = Callable[[str, Dict[str, str]], Tuple[int, bytes]]


class PagerState(Enum):
    FETCHING = "fetching"
    DONE = "done"


def fetch_page(
    fetch: Fetch,
    url: str,
    headers: Dict[str, str],
    logger: Optional[StructuredLogger] = None,
) -> PageEnvelope:
    """Fetch and decode a single page.

    A non-OK status yields an empty page with no cursor.

    Raises:
        TransportError: propagated from `fetch`
        DecodeError: OK response whose body is not a statements page
    """
    logger = logger or get_logger()
    status, body = fetch(url, headers)
    if status != HTTP_OK:
        logger.record_page(0, ok=False)
        return PageEnvelope()

    page = decode_page(body)
    logger.record_page(len(page.statements))
    logger.debug("Fetched statements page", url=url, statements=len(page.statements), more=page.more)
    return page


def iter_pages(
    fetch: Fetch,
    start_url: str,
    headers: Dict[str, str],
    cursor_url: Callable[[str], str],
    logger: Optional[StructuredLogger] = None,
) -> Iterator[PageEnvelope]:
    """Yield every page of a query, following `more` until it is empty.

    Args:
        fetch: Transport callable returning (status, body)
        start_url: URL of the first page
        headers: Request headers sent with every page
        cursor_url: Turns a relative `more` cursor into the next URL
        logger: Logger for metrics (default: global logger)
    """
    state = PagerState.FETCHING
    url = start_url
    while state is PagerState.FETCHING:
        page = fetch_page(fetch, url, headers, logger)
        yield page
        if page.more:
            url = cursor_url(page.more)
        else:
            state = PagerState.DONE
