"""
Central configuration and tunable constants.

- Thresholds come from environment variables and are parsed once per scan.
- Default AWS region and report directory can be overridden by CLI args or
  environment variables.
"""

import os
from typing import Mapping, Optional

from agescan.errors import ValidationError

# Environment variables holding the integer thresholds (days)
CERT_DAYS_TO_EXPIRY_ENV = "KEYVAULT_CERT_DAYSTOEXPIRY"
BLOB_MAX_AGE_DAYS_ENV = "STORAGE_BLOB_MAXAGEINDAYS"

# Request body keys naming the scan root
CERT_SCOPE_KEY = "vaultBaseUrl"
BLOB_SCOPE_KEY = "storageBlobBaseUrl"

# AWS Vault model:
# - We do NOT use a default profile (AWS Vault injects credentials)
# - We DO need a default region for boto3.Session(region_name=...)
DEFAULT_AWS_REGION = "eu-west-1"

DEFAULT_REPORT_DIR = "reports"

# None leaves page size to the provider
DEFAULT_PAGE_SIZE = None


def read_threshold(name: str, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Parse an integer threshold from the environment.
    Zero and negative values are accepted as-is.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(name)
    if raw is None or not str(raw).strip():
        raise ValidationError(f"Configuration value {name} is not set")
    try:
        return int(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"Configuration value {name} is not an integer: {raw!r}") from e
