# agescan/errors.py
"""
Error taxonomy for a scan.

- ValidationError: bad request body, scope or configuration. Raised before
  any remote call is made.
- RemoteError: a page fetch, detail fetch or authentication failed. Fatal
  to the whole scan; no partial result is returned.
"""

from typing import Any, Dict, Optional


class ScanError(Exception):
    """Base class for scan failures."""

    code = "ScanError"


class ValidationError(ScanError):
    code = "ValidationError"


class RemoteError(ScanError):
    code = "RemoteError"

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


def err(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a structured failure envelope."""
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
    }
