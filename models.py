# models.py
"""
Data models used by the scanner.

- Keep simple, serializable dataclasses for pages, items and violations.
- Everything here is scan-scoped; nothing is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class TimestampKind(str, Enum):
    EXPIRY = "expiry"
    CREATED = "created"


def to_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_utc(value: datetime) -> str:
    return to_utc(value).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ItemRef:
    """
    A scannable resource as produced by a Paginator.

    Fields:
    - identifier: what goes into the report (certificate name, blob URI, ...)
    - name: the name the provider needs to fetch details
    - container: owning container/bucket, None for flat collections
    """
    identifier: str
    name: str
    container: Optional[str] = None


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    next_token: Optional[Any] = None


@dataclass
class DetailRecord:
    ref: ItemRef
    kind: TimestampKind
    timestamp: Optional[datetime] = None


@dataclass
class Violation:
    """
    A resource that breaches the threshold.

    Fields:
    - resource_id: identifier from the ItemRef
    - timestamp: expiry or creation instant (UTC)
    - kind: which timestamp was tested
    """
    resource_id: str
    timestamp: datetime
    kind: TimestampKind

    def to_record(self) -> Dict[str, str]:
        if self.kind is TimestampKind.EXPIRY:
            return {"certificateName": self.resource_id, "expiryTime": iso_utc(self.timestamp)}
        return {"blobUri": self.resource_id, "createdTime": iso_utc(self.timestamp)}


# Ordered, first discovered first listed; no de-duplication.
ScanResult = List[Violation]


@dataclass(frozen=True)
class Scope:
    """Root of a scan: vault URL, storage endpoint, or dummy file URL."""
    base_url: str
