# agescan/aws_s3.py
"""
S3 adapters for the nested blob age scan.

- S3BucketPaginator pages through list_buckets (ContinuationToken).
- S3ObjectPaginator pages through list_objects_v2 for one bucket; its
  continuation tokens are only ever replayed against that same bucket.
- S3ObjectFetcher calls head_object per key. S3 objects are immutable, so
  LastModified is the creation instant of the current object.
"""

import logging
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, TimestampKind

logger = logging.getLogger(__name__)


class S3BucketPaginator:
    def __init__(self, client, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size

    def _list(self, **kwargs) -> Page:
        if self.page_size:
            kwargs["MaxBuckets"] = self.page_size
        try:
            resp = self.client.list_buckets(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"list_buckets failed: {e}") from e
        items = [ItemRef(identifier=f"s3://{b['Name']}", name=b["Name"]) for b in resp.get("Buckets", [])]
        return Page(items=items, next_token=resp.get("ContinuationToken"))

    def fetch_first(self, scope: Any) -> Page:
        return self._list()

    def fetch_next(self, scope: Any, token: str) -> Page:
        return self._list(ContinuationToken=token)


class S3ObjectPaginator:
    def __init__(self, client, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size

    def _list(self, bucket: ItemRef, **kwargs) -> Page:
        if self.page_size:
            kwargs["MaxKeys"] = self.page_size
        try:
            resp = self.client.list_objects_v2(Bucket=bucket.name, **kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"list_objects_v2 failed for {bucket.name}: {e}", resource=bucket.identifier) from e
        items = [
            ItemRef(identifier=f"s3://{bucket.name}/{obj['Key']}", name=obj["Key"], container=bucket.name)
            for obj in resp.get("Contents", []) or []
        ]
        token = resp.get("NextContinuationToken") if resp.get("IsTruncated") else None
        return Page(items=items, next_token=token)

    def fetch_first(self, scope: ItemRef) -> Page:
        return self._list(scope)

    def fetch_next(self, scope: ItemRef, token: str) -> Page:
        return self._list(scope, ContinuationToken=token)


class S3ObjectFetcher:
    def __init__(self, client):
        self.client = client

    def fetch(self, ref: ItemRef) -> DetailRecord:
        logger.info("Retrieving object and attributes for %s", ref.identifier)
        try:
            resp = self.client.head_object(Bucket=ref.container, Key=ref.name)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"head_object failed: {e}", resource=ref.identifier) from e
        return DetailRecord(ref=ref, kind=TimestampKind.CREATED, timestamp=resp.get("LastModified"))
