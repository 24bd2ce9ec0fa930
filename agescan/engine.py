# agescan/engine.py
"""
Traversal engine.

- scan_flat walks one paginated collection (certificates).
- scan_nested walks containers and, for each container, its own paginated
  item collection (blobs).
- Every leaf item gets one detail fetch and one predicate evaluation.
- Calls are strictly sequential. There are no retries: any exception from
  a paginator or fetcher propagates and the accumulated list is dropped.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from agescan.pagination import DetailFetcher, Paginator, iter_items
from agescan.predicates import ComplianceRule
from models import ItemRef, ScanResult, Violation, to_utc

logger = logging.getLogger(__name__)


def _evaluate(ref: ItemRef, fetcher: DetailFetcher, rule: ComplianceRule,
              now: datetime, violations: List[Violation]) -> None:
    record = fetcher.fetch(ref)
    logger.info("Retrieved %s", ref.identifier)

    if record.timestamp is None:
        logger.info("No %s date for %s, skipping", record.kind.value, ref.identifier)
        return

    if rule.violates(record.timestamp, now):
        logger.info("Adding non-compliant resource to response %s", ref.identifier)
        violations.append(Violation(
            resource_id=ref.identifier,
            timestamp=to_utc(record.timestamp),
            kind=record.kind,
        ))


def scan_flat(paginator: Paginator, scope: Any, fetcher: DetailFetcher,
              rule: ComplianceRule, now: Optional[datetime] = None) -> ScanResult:
    now = now or datetime.now(timezone.utc)
    violations: List[Violation] = []
    for ref in iter_items(paginator, scope):
        _evaluate(ref, fetcher, rule, now, violations)
    return violations


def scan_nested(outer: Paginator, scope: Any, inner: Paginator, fetcher: DetailFetcher,
                rule: ComplianceRule, now: Optional[datetime] = None) -> ScanResult:
    """
    Walk outer containers; each container's items are paged to completion,
    with the container itself as the inner scope, before the next container
    is looked at.
    """
    now = now or datetime.now(timezone.utc)
    violations: List[Violation] = []
    for container in iter_items(outer, scope, label="container"):
        logger.info("Listing items in container %s", container.name)
        for ref in iter_items(inner, container):
            _evaluate(ref, fetcher, rule, now, violations)
    return violations
