# conftest.py
"""
Shared fakes and fixtures.

- FakePaginator replays explicit token chains per scope and records every call.
- FakeFetcher returns fixed timestamps and can be told to fail for one item.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, Scope, TimestampKind

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def days_from_now(days: float) -> datetime:
    return NOW + timedelta(days=days)


def scope_key(scope: Any) -> str:
    return scope.name if isinstance(scope, ItemRef) else scope.base_url


class FakePaginator:
    """
    chains maps a scope key to a list of (items, next_token) pages.
    fetch_next only accepts the token that the previous page of the same
    scope handed out.
    """

    def __init__(self, chains: Dict[str, Sequence[Tuple[List[ItemRef], Optional[str]]]],
                 fail_on: Optional[Tuple[str, str]] = None):
        self.chains = chains
        self.fail_on = fail_on
        self.calls: List[Tuple] = []

    def fetch_first(self, scope: Any) -> Page:
        key = scope_key(scope)
        self.calls.append(("first", key))
        items, token = self.chains[key][0]
        return Page(items=list(items), next_token=token)

    def fetch_next(self, scope: Any, token: str) -> Page:
        key = scope_key(scope)
        self.calls.append(("next", key, token))
        if self.fail_on == (key, token):
            raise RemoteError(f"page fetch failed for {key}")
        pages = self.chains[key]
        for (_, issued), (items, next_token) in zip(pages, pages[1:]):
            if issued == token:
                return Page(items=list(items), next_token=next_token)
        raise AssertionError(f"token {token!r} was never issued for {key}")


class FakeFetcher:
    def __init__(self, timestamps: Dict[str, Optional[datetime]], kind: TimestampKind,
                 fail_on: Optional[str] = None):
        self.timestamps = timestamps
        self.kind = kind
        self.fail_on = fail_on
        self.calls: List[str] = []

    def fetch(self, ref: ItemRef) -> DetailRecord:
        self.calls.append(ref.identifier)
        if ref.identifier == self.fail_on:
            raise RemoteError("detail fetch failed", resource=ref.identifier)
        return DetailRecord(ref=ref, kind=self.kind, timestamp=self.timestamps[ref.identifier])


def cert(name: str) -> ItemRef:
    return ItemRef(identifier=name, name=name)


def blob(container: str, name: str) -> ItemRef:
    return ItemRef(identifier=f"https://acct/{container}/{name}", name=name, container=container)


@pytest.fixture
def scope():
    return Scope(base_url="https://vault.example")


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
