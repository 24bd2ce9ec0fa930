# utils.py
"""
Utility helpers: JSON loading, report generation, and console output.

- Uses Rich for colorful, wrapped tables in the terminal.
- Saves JSON, CSV, and HTML reports.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List
import csv
import html
import json
import os
from json import JSONDecodeError

from rich.console import Console
from rich.table import Table
from rich.text import Text

from models import TimestampKind, Violation, iso_utc, to_utc

_console = Console()


def load_json_file(path: str) -> dict:
    """
    Load JSON from a file and return a Python dict.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input JSON file not found: {path}.")
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            return json.load(fh)
    except JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e.msg} (line {e.lineno} column {e.colno})") from e


def ensure_reports_dir(path: str = "reports") -> str:
    os.makedirs(path, exist_ok=True)
    return path


def violations_to_json(violations: List[Violation]) -> str:
    return json.dumps([v.to_record() for v in violations], indent=2)


def violations_to_table_rows(violations: List[Violation]) -> List[List[str]]:
    return [[v.resource_id, v.kind.value, iso_utc(v.timestamp)] for v in violations]


def save_report(violations: List[Violation], check: str, mode: str, extra: dict = None,
                out_dir: str = "reports") -> Dict[str, str]:
    """
    Save JSON, CSV, and HTML reports and return their paths.
    """
    out_dir = ensure_reports_dir(out_dir)
    now = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    report: Dict[str, Any] = {
        "scan_time": now,
        "check": check,
        "mode": mode,
        "summary": {"violations_count": len(violations)},
        "violations": [v.to_record() for v in violations],
    }
    if extra:
        report["extra"] = extra

    base_ts = now.replace(":", "-")
    json_path = os.path.join(out_dir, f"scan-{base_ts}-{check}-{mode}.json")
    csv_path = os.path.join(out_dir, f"scan-{base_ts}-{check}-{mode}.csv")
    html_path = os.path.join(out_dir, f"scan-{base_ts}-{check}-{mode}.html")

    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2)

    fieldnames = ["resource", "kind", "timestamp"]
    with open(csv_path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        for resource, kind, timestamp in violations_to_table_rows(violations):
            writer.writerow({"resource": resource, "kind": kind, "timestamp": timestamp})

    html_rows: List[str] = []
    html_rows.append("<!doctype html>")
    html_rows.append("<html><head><meta charset='utf-8'><title>Scan Report</title>")
    html_rows.append("<style>body{font-family:Arial,Helvetica,sans-serif;margin:20px}table{border-collapse:collapse;width:100%}th,td{border:1px solid #ddd;padding:8px}th{background:#f2f2f2;text-align:left}tr:nth-child(even){background:#fafafa}</style>")
    html_rows.append("</head><body>")
    html_rows.append(f"<h2>Scan Report - {now} - check: {check} - mode: {mode}</h2>")
    html_rows.append(f"<p>Total violations: {len(violations)}</p>")
    if extra:
        html_rows.append("<div><strong>Metadata:</strong><ul>")
        for k, v in extra.items():
            html_rows.append(f"<li>{html.escape(str(k))}: {html.escape(str(v))}</li>")
        html_rows.append("</ul></div>")
    html_rows.append("<table><thead><tr><th>Resource</th><th>Kind</th><th>Timestamp</th></tr></thead><tbody>")
    for resource, kind, timestamp in violations_to_table_rows(violations):
        html_rows.append(f"<tr><td>{html.escape(resource)}</td><td>{kind}</td><td>{timestamp}</td></tr>")
    html_rows.append("</tbody></table></body></html>")
    with open(html_path, "w", encoding="utf-8") as fh:
        fh.write("\n".join(html_rows))

    return {"json": json_path, "csv": csv_path, "html": html_path}

# --- Console printing with color/wrapping ---

def _rich_timestamp_text(v: Violation, now: datetime):
    """
    Red when the timestamp is already in the past for expiry, yellow otherwise.
    """
    stamp = iso_utc(v.timestamp)
    if v.kind is TimestampKind.EXPIRY and to_utc(v.timestamp) <= now:
        return Text(stamp, style="bold red")
    return Text(stamp, style="bold yellow")


def print_summary_and_report_path(violations: List[Violation], report_paths: Dict[str, str],
                                  show_top: int = 5, print_full_table: bool = False):
    """
    Print a compact summary and a colorful table of violations.
    """
    total = len(violations)
    now = datetime.now(timezone.utc)
    _console.print("\nScan summary:")
    _console.print(f"- Total violations: {total}")
    if total:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Resource", style="cyan", overflow="fold")
        table.add_column("Kind", style="magenta")
        table.add_column("Timestamp")
        for v in (violations if print_full_table else violations[:show_top]):
            table.add_row(v.resource_id, v.kind.value, _rich_timestamp_text(v, now))
        _console.print(table)
    _console.print("\nSaved reports:")
    _console.print(f"- JSON: {report_paths.get('json')}")
    _console.print(f"- CSV:  {report_paths.get('csv')}")
    _console.print(f"- HTML: {report_paths.get('html')}\n")
