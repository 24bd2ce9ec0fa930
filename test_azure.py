# test_azure.py
"""
Key Vault and Blob Storage adapters against fake SDK clients.

- Paging goes through azure-core's real ItemPaged so continuation tokens are
  handled exactly as the SDK does.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError
from azure.core.paging import ItemPaged
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from agescan.azure_blob import BlobContainerPaginator, BlobFetcher, BlobPaginator
from agescan.azure_keyvault import KeyVaultCertificateFetcher, KeyVaultCertificatePaginator
from agescan.engine import scan_flat, scan_nested
from agescan.errors import RemoteError
from agescan.predicates import ComplianceRule
from conftest import NOW, days_from_now
from models import ItemRef, Scope, TimestampKind

VAULT = Scope(base_url="https://myvault.vault.azure.net")
ACCOUNT = "https://acct.blob.core.windows.net"


def item_paged(pages):
    """pages maps a continuation token (None first) to (items, next_token)."""
    def get_next(token):
        return pages[token]

    def extract_data(response):
        items, next_token = response
        return next_token, iter(items)

    return ItemPaged(get_next, extract_data)


def der_certificate(not_after: datetime) -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "test")])
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=365))
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.DER)


def props(name):
    return SimpleNamespace(name=name)


def test_keyvault_pages_and_expiry():
    client = MagicMock()
    client.list_properties_of_certificates.side_effect = lambda **kw: item_paged({
        None: ([props("one"), props("two")], "page-2"),
        "page-2": ([props("three")], None),
    })
    expiries = {"one": days_from_now(10), "two": days_from_now(100), "three": days_from_now(-1)}
    client.get_certificate.side_effect = lambda name: SimpleNamespace(
        cer=der_certificate(expiries[name].replace(microsecond=0)),
        properties=SimpleNamespace(expires_on=None),
    )

    result = scan_flat(KeyVaultCertificatePaginator(client), VAULT, KeyVaultCertificateFetcher(client),
                       ComplianceRule(TimestampKind.EXPIRY, 15), now=NOW)

    assert [v.resource_id for v in result] == ["one", "three"]
    assert result[0].timestamp == expiries["one"]
    assert [c.args[0] for c in client.get_certificate.call_args_list] == ["one", "two", "three"]


def test_keyvault_page_size_is_forwarded():
    client = MagicMock()
    client.list_properties_of_certificates.side_effect = lambda **kw: item_paged({None: ([], None)})
    page = KeyVaultCertificatePaginator(client, page_size=25).fetch_first(VAULT)
    assert page.items == [] and page.next_token is None
    client.list_properties_of_certificates.assert_called_once_with(max_page_size=25)


def test_keyvault_falls_back_to_properties_then_skips():
    client = MagicMock()
    client.get_certificate.side_effect = lambda name: {
        "props-only": SimpleNamespace(cer=None, properties=SimpleNamespace(expires_on=days_from_now(3))),
        "nothing": SimpleNamespace(cer=None, properties=SimpleNamespace(expires_on=None)),
    }[name]
    fetcher = KeyVaultCertificateFetcher(client)

    assert fetcher.fetch(ItemRef("props-only", "props-only")).timestamp == days_from_now(3)
    assert fetcher.fetch(ItemRef("nothing", "nothing")).timestamp is None


def test_keyvault_errors_become_remote_errors():
    client = MagicMock()
    client.get_certificate.side_effect = HttpResponseError(message="Forbidden")
    with pytest.raises(RemoteError) as exc:
        KeyVaultCertificateFetcher(client).fetch(ItemRef("web", "web"))
    assert exc.value.resource == "web"

    client.list_properties_of_certificates.side_effect = HttpResponseError(message="Unauthorized")
    with pytest.raises(RemoteError):
        KeyVaultCertificatePaginator(client).fetch_first(VAULT)


def blob_service(containers, created):
    """
    containers: {name: {token: ([blob names], next_token)}}
    created: {(container, blob): datetime or None}
    """
    service = MagicMock()
    service.list_containers.side_effect = lambda **kw: item_paged({
        None: ([SimpleNamespace(name=n) for n in containers], None),
    })

    def container_client(name):
        cc = MagicMock()
        cc.list_blobs.side_effect = lambda **kw: item_paged({
            token: ([SimpleNamespace(name=b) for b in names], nxt)
            for token, (names, nxt) in containers[name].items()
        })
        cc.get_blob_client.side_effect = lambda blob: SimpleNamespace(url=f"{ACCOUNT}/{name}/{blob}")
        return cc

    service.get_container_client.side_effect = container_client
    service.get_blob_client.side_effect = lambda container, blob: SimpleNamespace(
        get_blob_properties=lambda: SimpleNamespace(creation_time=created[(container, blob)]),
    )
    return service


def test_blob_scan_across_containers_with_shared_token_strings():
    service = blob_service(
        {
            "c1": {None: (["a", "b"], "next"), "next": (["c"], None)},
            "c2": {None: (["a"], "next"), "next": (["b"], None)},
        },
        {
            ("c1", "a"): days_from_now(-40), ("c1", "b"): days_from_now(-5), ("c1", "c"): None,
            ("c2", "a"): days_from_now(-31), ("c2", "b"): days_from_now(-29),
        },
    )

    result = scan_nested(BlobContainerPaginator(service), Scope(base_url=ACCOUNT), BlobPaginator(service),
                         BlobFetcher(service), ComplianceRule(TimestampKind.CREATED, 30), now=NOW)

    assert [v.to_record()["blobUri"] for v in result] == [f"{ACCOUNT}/c1/a", f"{ACCOUNT}/c2/a"]


def test_blob_page_size_is_forwarded():
    service = blob_service({"c1": {None: ([], None)}}, {})
    BlobContainerPaginator(service, page_size=10).fetch_first(Scope(base_url=ACCOUNT))
    service.list_containers.assert_called_once_with(results_per_page=10)


def test_blob_listing_failure_is_remote_error():
    service = MagicMock()
    cc = MagicMock()
    cc.list_blobs.side_effect = HttpResponseError(message="boom")
    service.get_container_client.return_value = cc
    with pytest.raises(RemoteError) as exc:
        BlobPaginator(service).fetch_first(ItemRef(identifier="c1", name="c1"))
    assert exc.value.resource == "c1"
