# agescan/pagination.py
"""
Paginator and DetailFetcher contracts plus the page walk shared by every scan.

A Paginator hands back Page objects. A truthy next_token means more pages
exist; it is passed back verbatim together with the scope it came from,
since providers scope continuation tokens to their collection.
"""

import logging
from typing import Any, Iterator, Optional, Protocol

from models import DetailRecord, ItemRef, Page

logger = logging.getLogger(__name__)


class Paginator(Protocol):
    def fetch_first(self, scope: Any) -> Page:
        ...

    def fetch_next(self, scope: Any, token: Any) -> Page:
        ...


class DetailFetcher(Protocol):
    def fetch(self, ref: ItemRef) -> DetailRecord:
        ...


def iter_items(paginator: Paginator, scope: Any, label: str = "item") -> Iterator[Any]:
    """
    Yield every item of a collection, one page at a time.

    The next page is only requested once the caller has consumed the current
    one, so exactly one remote call is outstanding at any moment.
    """
    page = paginator.fetch_first(scope)
    logger.info("Retrieved first %s page. Count:%d", label, len(page.items))
    yield from page.items

    token: Optional[Any] = page.next_token
    while token:
        page = paginator.fetch_next(scope, token)
        logger.info("Retrieved next %s page. Count:%d", label, len(page.items))
        yield from page.items
        token = page.next_token
