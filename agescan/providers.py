# agescan/providers.py
"""
Wiring from a scan Scope to concrete adapters for each run mode.

Each *_sources function returns a builder: Scope -> CertificateSources or
BlobSources. Builders create clients but make no remote calls.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from azure.identity import DefaultAzureCredential
from azure.keyvault.certificates import CertificateClient
from azure.storage.blob import BlobServiceClient

from agescan.aws_acm import AcmCertificateFetcher, AcmCertificatePaginator
from agescan.aws_s3 import S3BucketPaginator, S3ObjectFetcher, S3ObjectPaginator
from agescan.azure_blob import BlobContainerPaginator, BlobFetcher, BlobPaginator
from agescan.azure_keyvault import KeyVaultCertificateFetcher, KeyVaultCertificatePaginator
from agescan.dummy import DummyBlobPaginator, DummyCertificatePaginator, DummyContainerPaginator, DummyFetcher
from agescan.errors import ValidationError
from agescan.pagination import DetailFetcher, Paginator
from models import Scope


@dataclass
class CertificateSources:
    paginator: Paginator
    fetcher: DetailFetcher


@dataclass
class BlobSources:
    container_paginator: Paginator
    blob_paginator: Paginator
    fetcher: DetailFetcher


CertificateBuilder = Callable[[Scope], CertificateSources]
BlobBuilder = Callable[[Scope], BlobSources]


def _aws_client(session, service: str, scope: Scope):
    try:
        return session.client(service, endpoint_url=scope.base_url)
    except ValueError as e:
        raise ValidationError(f"Invalid endpoint URL {scope.base_url!r}: {e}") from e


def aws_certificate_sources(session, page_size: Optional[int] = None) -> CertificateBuilder:
    def build(scope: Scope) -> CertificateSources:
        client = _aws_client(session, "acm", scope)
        return CertificateSources(AcmCertificatePaginator(client, page_size), AcmCertificateFetcher(client))
    return build


def aws_blob_sources(session, page_size: Optional[int] = None) -> BlobBuilder:
    def build(scope: Scope) -> BlobSources:
        client = _aws_client(session, "s3", scope)
        return BlobSources(
            S3BucketPaginator(client, page_size),
            S3ObjectPaginator(client, page_size),
            S3ObjectFetcher(client),
        )
    return build


def _azure_client(client_class, scope: Scope, credential: Any):
    try:
        return client_class(scope.base_url, credential=credential or DefaultAzureCredential())
    except ValueError as e:
        raise ValidationError(f"Invalid account or vault URL {scope.base_url!r}: {e}") from e


def azure_certificate_sources(credential: Any = None, page_size: Optional[int] = None) -> CertificateBuilder:
    def build(scope: Scope) -> CertificateSources:
        client = _azure_client(CertificateClient, scope, credential)
        return CertificateSources(KeyVaultCertificatePaginator(client, page_size), KeyVaultCertificateFetcher(client))
    return build


def azure_blob_sources(credential: Any = None, page_size: Optional[int] = None) -> BlobBuilder:
    def build(scope: Scope) -> BlobSources:
        service = _azure_client(BlobServiceClient, scope, credential)
        return BlobSources(
            BlobContainerPaginator(service, page_size),
            BlobPaginator(service, page_size),
            BlobFetcher(service),
        )
    return build


def dummy_certificate_sources(data: Dict[str, Any], page_size: Optional[int] = None) -> CertificateBuilder:
    def build(scope: Scope) -> CertificateSources:
        return CertificateSources(DummyCertificatePaginator(data, page_size), DummyFetcher(data))
    return build


def dummy_blob_sources(data: Dict[str, Any], page_size: Optional[int] = None) -> BlobBuilder:
    def build(scope: Scope) -> BlobSources:
        return BlobSources(
            DummyContainerPaginator(data, page_size),
            DummyBlobPaginator(data, page_size, base_url=scope.base_url),
            DummyFetcher(data),
        )
    return build
