# agescan/dummy.py
"""
Offline adapters backed by a JSON document (dummy mode).

Expected shape:
{
  "certificates": [ { "name": "web", "expires": "2026-11-01T00:00:00Z" }, ... ],
  "containers": [
    { "name": "logs", "blobs": [ { "name": "a.txt", "created": "2026-09-01T00:00:00Z" }, ... ] },
    ...
  ]
}

Records without "expires"/"created" produce detail records with no
timestamp. Continuation tokens carry the scope they were issued for and are
rejected if replayed against another scope.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from agescan.errors import RemoteError
from models import DetailRecord, ItemRef, Page, TimestampKind


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _slice(records: List[Dict[str, Any]], offset: int, page_size: Optional[int],
           scope_name: str, to_ref: Callable[[Dict[str, Any]], ItemRef]) -> Page:
    end = len(records) if not page_size else offset + page_size
    items = [to_ref(r) for r in records[offset:end]]
    next_token = f"{scope_name}:{end}" if end < len(records) else None
    return Page(items=items, next_token=next_token)


def _offset(token: str, scope_name: str) -> int:
    prefix, _, offset = token.rpartition(":")
    if prefix != scope_name or not offset.isdigit():
        raise RemoteError(f"Continuation token {token!r} does not belong to {scope_name}")
    return int(offset)


class DummyCertificatePaginator:
    def __init__(self, data: Dict[str, Any], page_size: Optional[int] = None):
        self.records = data.get("certificates", []) or []
        self.page_size = page_size

    @staticmethod
    def _ref(record: Dict[str, Any]) -> ItemRef:
        return ItemRef(identifier=record["name"], name=record["name"])

    def fetch_first(self, scope: Any) -> Page:
        return _slice(self.records, 0, self.page_size, "certificates", self._ref)

    def fetch_next(self, scope: Any, token: str) -> Page:
        return _slice(self.records, _offset(token, "certificates"), self.page_size, "certificates", self._ref)


class DummyContainerPaginator:
    def __init__(self, data: Dict[str, Any], page_size: Optional[int] = None):
        self.records = data.get("containers", []) or []
        self.page_size = page_size

    @staticmethod
    def _ref(record: Dict[str, Any]) -> ItemRef:
        return ItemRef(identifier=record["name"], name=record["name"])

    def fetch_first(self, scope: Any) -> Page:
        return _slice(self.records, 0, self.page_size, "containers", self._ref)

    def fetch_next(self, scope: Any, token: str) -> Page:
        return _slice(self.records, _offset(token, "containers"), self.page_size, "containers", self._ref)


class DummyBlobPaginator:
    def __init__(self, data: Dict[str, Any], page_size: Optional[int] = None, base_url: str = "dummy://"):
        self.blobs = {c["name"]: c.get("blobs", []) or [] for c in data.get("containers", []) or []}
        self.page_size = page_size
        self.base_url = base_url.rstrip("/")

    def _page(self, container: ItemRef, offset: int) -> Page:
        def to_ref(record: Dict[str, Any]) -> ItemRef:
            uri = f"{self.base_url}/{container.name}/{record['name']}"
            return ItemRef(identifier=uri, name=record["name"], container=container.name)
        return _slice(self.blobs.get(container.name, []), offset, self.page_size, container.name, to_ref)

    def fetch_first(self, scope: ItemRef) -> Page:
        return self._page(scope, 0)

    def fetch_next(self, scope: ItemRef, token: str) -> Page:
        return self._page(scope, _offset(token, scope.name))


class DummyFetcher:
    """Looks up certificates by name and blobs by (container, name)."""

    def __init__(self, data: Dict[str, Any]):
        self.certificates = {c["name"]: c for c in data.get("certificates", []) or []}
        self.blobs = {
            (c["name"], b["name"]): b
            for c in data.get("containers", []) or []
            for b in c.get("blobs", []) or []
        }

    def fetch(self, ref: ItemRef) -> DetailRecord:
        if ref.container is None:
            record = self.certificates.get(ref.name)
            kind, key = TimestampKind.EXPIRY, "expires"
        else:
            record = self.blobs.get((ref.container, ref.name))
            kind, key = TimestampKind.CREATED, "created"
        if record is None:
            raise RemoteError(f"{ref.identifier} not found", resource=ref.identifier)
        try:
            timestamp = parse_timestamp(record.get(key))
        except (AttributeError, TypeError, ValueError) as e:
            raise RemoteError(f"{ref.identifier} has an unreadable {key} value: {e}", resource=ref.identifier) from e
        return DetailRecord(ref=ref, kind=kind, timestamp=timestamp)
