# agescan/azure_blob.py
"""
Blob Storage adapters for the nested blob age scan.

- BlobContainerPaginator pages through list_containers.
- BlobPaginator pages through list_blobs of a single container; the
  container ItemRef is the scope its tokens belong to.
- BlobFetcher reads creation_time from get_blob_properties.
"""

import logging
from typing import Any, Optional

from azure.core.exceptions import AzureError

from agescan.azure_common import read_page
from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, TimestampKind

logger = logging.getLogger(__name__)


class BlobContainerPaginator:
    def __init__(self, service_client, page_size: Optional[int] = None):
        self.service_client = service_client
        self.page_size = page_size

    def _list(self):
        if self.page_size:
            return self.service_client.list_containers(results_per_page=self.page_size)
        return self.service_client.list_containers()

    def _page(self, token: Optional[str]) -> Page:
        return read_page(
            self._list, token,
            lambda c: ItemRef(identifier=c.name, name=c.name),
            "list_containers",
        )

    def fetch_first(self, scope: Any) -> Page:
        return self._page(None)

    def fetch_next(self, scope: Any, token: str) -> Page:
        return self._page(token)


class BlobPaginator:
    def __init__(self, service_client, page_size: Optional[int] = None):
        self.service_client = service_client
        self.page_size = page_size

    def _page(self, container: ItemRef, token: Optional[str]) -> Page:
        container_client = self.service_client.get_container_client(container.name)

        def list_blobs():
            if self.page_size:
                return container_client.list_blobs(results_per_page=self.page_size)
            return container_client.list_blobs()

        def to_ref(blob) -> ItemRef:
            uri = container_client.get_blob_client(blob.name).url
            return ItemRef(identifier=uri, name=blob.name, container=container.name)

        return read_page(list_blobs, token, to_ref, f"list_blobs in {container.name}",
                         resource=container.identifier)

    def fetch_first(self, scope: ItemRef) -> Page:
        return self._page(scope, None)

    def fetch_next(self, scope: ItemRef, token: str) -> Page:
        return self._page(scope, token)


class BlobFetcher:
    def __init__(self, service_client):
        self.service_client = service_client

    def fetch(self, ref: ItemRef) -> DetailRecord:
        logger.info("Retrieving blob and attributes for %s", ref.identifier)
        try:
            blob_client = self.service_client.get_blob_client(container=ref.container, blob=ref.name)
            props = blob_client.get_blob_properties()
        except AzureError as e:
            raise RemoteError(f"get_blob_properties failed: {e}", resource=ref.identifier) from e
        return DetailRecord(ref=ref, kind=TimestampKind.CREATED, timestamp=getattr(props, "creation_time", None))
