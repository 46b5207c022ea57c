"""
Export the append-only lead log for follow-up.

Reads LEADS_FILE_PATH (or --input) and writes the records as CSV or JSON to
stdout or --output. The log itself is never modified.
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Iterable, TextIO

from app.modules.leads.domain.recorder import LeadRecorder
from app.schemas.leads import LeadRecord

CSV_COLUMNS = (
    "timestamp",
    "email",
    "companyName",
    "industry",
    "employees",
    "manualHoursPerWeek",
    "avgHourlyRate",
    "processes",
    "annualSavings",
    "paybackWeeks",
    "fiveYearValue",
)


def _csv_row(record: LeadRecord) -> dict[str, object]:
    data = record.model_dump(by_alias=True)
    result = data.pop("result") or {}
    data["processes"] = ";".join(record.processes)
    for key in ("annualSavings", "paybackWeeks", "fiveYearValue"):
        data[key] = result.get(key, "")
    return {column: data.get(column, "") for column in CSV_COLUMNS}


def write_csv(records: Iterable[LeadRecord], out: TextIO) -> int:
    writer = csv.DictWriter(out, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    count = 0
    for record in records:
        writer.writerow(_csv_row(record))
        count += 1
    return count


def write_json(records: Iterable[LeadRecord], out: TextIO) -> int:
    items = [record.model_dump(mode="json", by_alias=True) for record in records]
    json.dump(items, out, indent=2)
    out.write("\n")
    return len(items)


def export_leads(source: Path, fmt: str, out: TextIO) -> int:
    records = LeadRecorder(source, fsync=False).read_all()
    if fmt == "csv":
        return write_csv(records, out)
    if fmt == "json":
        return write_json(records, out)
    raise ValueError(f"Unsupported export format: {fmt}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export captured calculator leads.")
    parser.add_argument(
        "--input",
        default=None,
        help="Lead log path (defaults to LEADS_FILE_PATH from settings).",
    )
    parser.add_argument("--format", choices=("csv", "json"), default="csv")
    parser.add_argument("--output", default=None, help="Write here instead of stdout.")
    args = parser.parse_args(argv)

    if args.input:
        source = Path(args.input)
    else:
        from app.shared.core.config import get_settings

        source = Path(get_settings().LEADS_FILE_PATH)

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as handle:
            count = export_leads(source, args.format, handle)
    else:
        count = export_leads(source, args.format, sys.stdout)

    print(f"Exported {count} lead(s) from {source}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
