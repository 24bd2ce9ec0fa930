# agescan/handlers.py
"""
Invocation boundary for the two checks.

- Validates the request body and the threshold before any remote call.
- 200: list of violation records, possibly empty
- 400: human-readable reason string
- 500: error envelope; no partial results
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from agescan.engine import scan_flat, scan_nested
from agescan.errors import RemoteError, ValidationError, err
from agescan.predicates import ComplianceRule
from agescan.providers import BlobBuilder, CertificateBuilder
from config import (
    BLOB_MAX_AGE_DAYS_ENV,
    BLOB_SCOPE_KEY,
    CERT_DAYS_TO_EXPIRY_ENV,
    CERT_SCOPE_KEY,
    read_threshold,
)
from models import Scope, TimestampKind, Violation

logger = logging.getLogger(__name__)

RequestBody = Union[str, bytes, Dict[str, Any], None]


@dataclass
class Response:
    status: int
    body: Any
    violations: List[Violation] = field(default_factory=list)


def parse_request_body(body: RequestBody) -> Optional[Dict[str, Any]]:
    """Return the parsed JSON object, or None for a blank body."""
    if body is None or isinstance(body, dict):
        return body
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ValidationError(f"Request body is not valid UTF-8: {e.reason} at byte {e.start}") from e
    if not body.strip():
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Request body is not valid JSON: {e.msg} (line {e.lineno} column {e.colno})") from e
    return parsed if isinstance(parsed, dict) else None


def require_scope(body: RequestBody, key: str) -> Scope:
    request = parse_request_body(body)
    value = request.get(key) if request else None
    if value is None or not str(value).strip():
        raise ValidationError(f"Request body does not contain {key}")
    return Scope(base_url=str(value).strip())


def _ok(violations: List[Violation]) -> Response:
    return Response(status=200, body=[v.to_record() for v in violations], violations=violations)


def _failed(e: RemoteError) -> Response:
    logger.error("Scan aborted: %s", e)
    details = {"resource": e.resource} if e.resource else None
    return Response(status=500, body=err(e.code, str(e), details))


def handle_certificate_expiry(body: RequestBody, sources: CertificateBuilder,
                              environ: Optional[Mapping[str, str]] = None,
                              now: Optional[datetime] = None) -> Response:
    logger.info("Starting to process cert expiry check")
    try:
        scope = require_scope(body, CERT_SCOPE_KEY)
        logger.info("Parsed and validated request body")
        days_to_expiry = read_threshold(CERT_DAYS_TO_EXPIRY_ENV, environ)
        built = sources(scope)
    except ValidationError as e:
        return Response(status=400, body=str(e))

    rule = ComplianceRule(TimestampKind.EXPIRY, days_to_expiry)
    try:
        violations = scan_flat(built.paginator, scope, built.fetcher, rule, now=now)
    except RemoteError as e:
        return _failed(e)
    return _ok(violations)


def handle_blob_age(body: RequestBody, sources: BlobBuilder,
                    environ: Optional[Mapping[str, str]] = None,
                    now: Optional[datetime] = None) -> Response:
    logger.info("Starting to process blob age check")
    try:
        scope = require_scope(body, BLOB_SCOPE_KEY)
        logger.info("Parsed and validated request body")
        max_age_days = read_threshold(BLOB_MAX_AGE_DAYS_ENV, environ)
        built = sources(scope)
    except ValidationError as e:
        return Response(status=400, body=str(e))

    rule = ComplianceRule(TimestampKind.CREATED, max_age_days)
    try:
        violations = scan_nested(built.container_paginator, scope, built.blob_paginator,
                                 built.fetcher, rule, now=now)
    except RemoteError as e:
        return _failed(e)
    return _ok(violations)
