# agescan/predicates.py
"""
Pure compliance predicates. Comparisons are strict: a timestamp exactly on
the boundary is not a violation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from models import TimestampKind, to_utc


def expiry_violates(not_after: datetime, threshold_days: int, now: datetime) -> bool:
    """True if the resource expires within threshold_days of now, or already has."""
    return to_utc(not_after) < to_utc(now) + timedelta(days=threshold_days)


def age_violates(created_at: datetime, max_age_days: int, now: datetime) -> bool:
    """True if the resource was created more than max_age_days before now."""
    return to_utc(created_at) < to_utc(now) - timedelta(days=max_age_days)


@dataclass(frozen=True)
class ComplianceRule:
    kind: TimestampKind
    threshold_days: int

    def violates(self, timestamp: datetime, now: datetime) -> bool:
        if self.kind is TimestampKind.EXPIRY:
            return expiry_violates(timestamp, self.threshold_days, now)
        return age_violates(timestamp, self.threshold_days, now)
