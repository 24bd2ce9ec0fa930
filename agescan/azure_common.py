# agescan/azure_common.py
"""Continuation-token paging over azure-core ItemPaged results."""

from typing import Any, Callable, Optional

from azure.core.exceptions import AzureError

from agescan.errors import RemoteError
from models import Page


def read_page(list_call: Callable[[], Any], token: Optional[str],
              to_ref: Callable[[Any], Any], what: str, resource: Optional[str] = None) -> Page:
    """
    Fetch exactly one page starting at token (None for the first page).

    list_call returns an ItemPaged; the page iterator's continuation_token is
    read after the page is pulled so it points at the following page.
    """
    try:
        pages = list_call().by_page(continuation_token=token)
        page = next(pages, None)
        if page is None:
            return Page()
        items = [to_ref(item) for item in page]
        return Page(items=items, next_token=pages.continuation_token)
    except AzureError as e:
        raise RemoteError(f"{what} failed: {e}", resource=resource) from e
