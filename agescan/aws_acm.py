# agescan/aws_acm.py
"""
ACM certificate adapters.

- AcmCertificatePaginator pages through list_certificates using NextToken.
- AcmCertificateFetcher calls describe_certificate per certificate and
  exposes NotAfter as the expiry timestamp.
- botocore errors are re-raised as RemoteError; the scan never continues
  past a failed call.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, TimestampKind

# list_certificates only returns RSA_2048 certificates unless asked for more
ALL_KEY_TYPES = [
    "RSA_1024", "RSA_2048", "RSA_3072", "RSA_4096",
    "EC_prime256v1", "EC_secp384r1", "EC_secp521r1",
]


class AcmCertificatePaginator:
    def __init__(self, client, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size

    def _list(self, **kwargs) -> Page:
        kwargs["Includes"] = {"keyTypes": ALL_KEY_TYPES}
        if self.page_size:
            kwargs["MaxItems"] = self.page_size
        try:
            resp = self.client.list_certificates(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"list_certificates failed: {e}") from e
        items = [
            ItemRef(identifier=c["CertificateArn"], name=c["CertificateArn"])
            for c in resp.get("CertificateSummaryList", [])
        ]
        return Page(items=items, next_token=resp.get("NextToken"))

    def fetch_first(self, scope: Any) -> Page:
        return self._list()

    def fetch_next(self, scope: Any, token: str) -> Page:
        return self._list(NextToken=token)


class AcmCertificateFetcher:
    def __init__(self, client):
        self.client = client

    def fetch(self, ref: ItemRef) -> DetailRecord:
        try:
            resp: Dict[str, Any] = self.client.describe_certificate(CertificateArn=ref.name)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"describe_certificate failed: {e}", resource=ref.identifier) from e
        # NotAfter is absent until a requested certificate has been issued
        not_after = resp.get("Certificate", {}).get("NotAfter")
        return DetailRecord(ref=ref, kind=TimestampKind.EXPIRY, timestamp=not_after)
