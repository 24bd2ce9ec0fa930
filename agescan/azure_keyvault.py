# agescan/azure_keyvault.py
"""
Key Vault certificate adapters.

- KeyVaultCertificatePaginator pages through list_properties_of_certificates.
- KeyVaultCertificateFetcher calls get_certificate per name and reads NotAfter
  from the DER-encoded certificate, falling back to properties.expires_on.
"""

from datetime import datetime
from typing import Any, Optional

from azure.core.exceptions import AzureError
from cryptography import x509

from agescan.azure_common import read_page
from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, TimestampKind


def certificate_not_after(cer: Optional[bytes]) -> Optional[datetime]:
    if not cer:
        return None
    return x509.load_der_x509_certificate(bytes(cer)).not_valid_after_utc


class KeyVaultCertificatePaginator:
    def __init__(self, client, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size

    def _list(self):
        if self.page_size:
            return self.client.list_properties_of_certificates(max_page_size=self.page_size)
        return self.client.list_properties_of_certificates()

    def _page(self, token: Optional[str]) -> Page:
        return read_page(
            self._list, token,
            lambda props: ItemRef(identifier=props.name, name=props.name),
            "list_properties_of_certificates",
        )

    def fetch_first(self, scope: Any) -> Page:
        return self._page(None)

    def fetch_next(self, scope: Any, token: str) -> Page:
        return self._page(token)


class KeyVaultCertificateFetcher:
    def __init__(self, client):
        self.client = client

    def fetch(self, ref: ItemRef) -> DetailRecord:
        try:
            certificate = self.client.get_certificate(ref.name)
        except AzureError as e:
            raise RemoteError(f"get_certificate failed: {e}", resource=ref.identifier) from e

        try:
            not_after = certificate_not_after(certificate.cer)
        except ValueError as e:
            raise RemoteError(f"certificate {ref.name} could not be parsed: {e}", resource=ref.identifier) from e
        if not_after is None and certificate.properties is not None:
            not_after = certificate.properties.expires_on
        return DetailRecord(ref=ref, kind=TimestampKind.EXPIRY, timestamp=not_after)
