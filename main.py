# main.py
"""
CLI entrypoint for the scanner.

- Two checks:
  * certs: certificates expiring within KEYVAULT_CERT_DAYSTOEXPIRY days
  * blobs: blobs older than STORAGE_BLOB_MAXAGEINDAYS days
- Three modes:
  * dummy: read resources from a JSON file (offline testing)
  * aws: ACM certificates / S3 objects via boto3.Session
  * azure: Key Vault certificates / Blob Storage via DefaultAzureCredential
- Produces JSON, CSV, and HTML reports and prints a colorful summary table.
"""

import argparse
import json
import logging
import os
from typing import Mapping, Optional

import boto3

from agescan import providers
from agescan.handlers import handle_blob_age, handle_certificate_expiry
from config import (
    BLOB_MAX_AGE_DAYS_ENV,
    BLOB_SCOPE_KEY,
    CERT_DAYS_TO_EXPIRY_ENV,
    CERT_SCOPE_KEY,
    DEFAULT_AWS_REGION,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REPORT_DIR,
)
from utils import load_json_file, save_report, print_summary_and_report_path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cloud_scanner")


def build_sources(check: str, mode: str, file_path: Optional[str] = None,
                  region: Optional[str] = None, page_size: Optional[int] = DEFAULT_PAGE_SIZE):
    """
    Return the Scope -> adapters builder for a check and mode.
    """
    if mode == "dummy":
        data = load_json_file(file_path)
        if check == "certs":
            return providers.dummy_certificate_sources(data, page_size)
        return providers.dummy_blob_sources(data, page_size)

    if mode == "aws":
        # Resolve region: CLI -> env -> config default
        region = region or os.environ.get("AWS_REGION") or DEFAULT_AWS_REGION
        logger.info("Using live AWS mode (region=%s)", region)
        # Credentials are expected to come from the environment
        # (e.g., via `aws-vault exec scanner-user -- python main.py ...`).
        session = boto3.Session(region_name=region)
        if check == "certs":
            return providers.aws_certificate_sources(session, page_size)
        return providers.aws_blob_sources(session, page_size)

    if check == "certs":
        return providers.azure_certificate_sources(page_size=page_size)
    return providers.azure_blob_sources(page_size=page_size)


def run(check: str, mode: str, base_url: Optional[str], file_path: Optional[str] = None,
        threshold: Optional[int] = None, region: Optional[str] = None,
        page_size: Optional[int] = DEFAULT_PAGE_SIZE, report_dir: str = DEFAULT_REPORT_DIR,
        print_table: bool = False, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run one check end to end and return a process exit code.
    """
    env = dict(os.environ if environ is None else environ)
    threshold_env = CERT_DAYS_TO_EXPIRY_ENV if check == "certs" else BLOB_MAX_AGE_DAYS_ENV
    if threshold is not None:
        env[threshold_env] = str(threshold)

    if mode == "dummy" and not base_url:
        base_url = f"dummy://{os.path.basename(file_path)}"
    scope_key = CERT_SCOPE_KEY if check == "certs" else BLOB_SCOPE_KEY
    body = {scope_key: base_url} if base_url else {}

    logger.info("Running %s check in %s mode", check, mode)
    sources = build_sources(check, mode, file_path=file_path, region=region, page_size=page_size)
    handler = handle_certificate_expiry if check == "certs" else handle_blob_age
    response = handler(body, sources, environ=env)

    if response.status != 200:
        logger.error("Check failed with status %d: %s", response.status, json.dumps(response.body))
        return 1 if response.status == 400 else 2

    report_paths = save_report(
        response.violations,
        check=check,
        mode=mode,
        extra={"scope": base_url, "threshold_days": env.get(threshold_env)},
        out_dir=report_dir,
    )
    print_summary_and_report_path(
        response.violations, report_paths, print_full_table=print_table
    )
    return 0


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"page size must be at least 1, got {number}")
    return number


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Certificate expiry and blob age scanner."
    )
    p.add_argument(
        "--check",
        choices=["certs", "blobs"],
        required=True,
        help="What to scan: certs (expiry) or blobs (age)",
    )
    p.add_argument(
        "--mode",
        choices=["dummy", "aws", "azure"],
        required=True,
        help="Run mode: dummy (JSON), aws (ACM/S3) or azure (Key Vault/Blob Storage)",
    )
    p.add_argument(
        "--base-url",
        help="Vault URL, storage account URL or service endpoint to scan",
    )
    p.add_argument(
        "--file",
        help="Path to dummy JSON file (required for dummy mode)",
    )
    p.add_argument(
        "--threshold",
        type=int,
        help="Threshold in days; overrides the environment variable",
    )
    p.add_argument(
        "--region",
        help="AWS region (optional)",
    )
    p.add_argument(
        "--page-size",
        type=positive_int,
        default=DEFAULT_PAGE_SIZE,
        help="Items per page requested from the provider (optional)",
    )
    p.add_argument(
        "--report-dir",
        default=DEFAULT_REPORT_DIR,
        help="Directory to save reports (default: reports)",
    )
    p.add_argument(
        "--print-table",
        action="store_true",
        help="Print full violations table to stdout",
    )
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.mode == "dummy" and not args.file:
        raise SystemExit("dummy mode requires --file path to JSON")
    raise SystemExit(run(
        args.check,
        args.mode,
        args.base_url,
        file_path=args.file,
        threshold=args.threshold,
        region=args.region,
        page_size=args.page_size,
        report_dir=args.report_dir,
        print_table=args.print_table,
    ))


if __name__ == "__main__":
    main()
