"""Command-line interface for running rule invocations locally."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Sequence

import boto3
from botocore.exceptions import BotoCoreError

from ..errors import ConfigRuleError, PartialAcceptanceError
from ..handler import build_service, load_manifest
from ..logging_config import configure_logging
from ..models import ReportRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InvocationReport:
    """Records produced by an invocation plus the submission outcome."""

    records: Sequence[ReportRecord]
    submitted: bool = False
    failed_evaluations: Sequence[Mapping[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "submitted": self.submitted,
            "records": [_serialize_record(record) for record in self.records],
            "failed_evaluations": [dict(failure) for failure in self.failed_evaluations],
        }


def _format_timestamp(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _serialize_record(record: ReportRecord) -> dict[str, Any]:
    payload = record.to_api()
    payload["OrderingTimestamp"] = _format_timestamp(record.ordering_timestamp)
    return payload


def render_table(report: InvocationReport) -> str:
    """Render report records as a simple text table for terminal output."""

    if not report.records:
        return "No evaluations produced."

    headers = ("Compliance", "Resource Type", "Resource ID", "Ordering Timestamp")
    rows = [headers]
    for record in report.records:
        rows.append(
            (
                record.compliance_type,
                record.resource_type,
                record.resource_id,
                _format_timestamp(record.ordering_timestamp),
            )
        )

    widths = [max(len(str(row[idx])) for row in rows) for idx in range(len(headers))]

    def format_row(values: tuple[str, str, str, str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths, strict=True))

    lines = [format_row(headers)]
    lines.append("  ".join("=" * width for width in widths))
    for row in rows[1:]:
        lines.append(format_row(row))

    if report.failed_evaluations:
        lines.append("")
        lines.append(f"Rejected evaluations: {len(report.failed_evaluations)}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(prog="config-rule", description="Config rule runtime CLI")
    subparsers = parser.add_subparsers(dest="command")

    invoke_parser = subparsers.add_parser(
        "invoke", help="Evaluate a rule invocation payload and report the result."
    )
    invoke_parser.add_argument(
        "event",
        type=Path,
        help="Path to a JSON file holding the Lambda invocation payload.",
    )
    invoke_parser.add_argument(
        "--manifest",
        dest="manifests",
        action="append",
        type=Path,
        default=None,
        help="Rule manifest YAML file. May be repeated; later files override earlier ones.",
    )
    invoke_parser.add_argument(
        "--evaluator",
        default=None,
        metavar="MODULE:ATTR",
        help="Evaluator entry point overriding the one named by the manifest.",
    )
    invoke_parser.add_argument(
        "--region",
        default=None,
        help="AWS region for the Config service client.",
    )
    invoke_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the evaluations without submitting them.",
    )
    invoke_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format for the evaluations.",
    )
    invoke_parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for runtime diagnostics (defaults to the manifest's log_level).",
    )

    return parser


def create_client(region: str | None) -> Any:
    """Create the boto3 Config client used for history lookups and submission."""

    return boto3.client("config", region_name=region)


def _dry_run_client(region: str | None) -> Any | None:
    """Return a Config client for history lookups, or ``None`` when none can be built.

    Dry runs never submit, so inline notifications evaluate without a client.
    """

    try:
        return create_client(region)
    except BotoCoreError as exc:
        logger.warning(
            "Config client unavailable, history lookups disabled",
            extra={"action": "dry_run", "error": str(exc)},
        )
        return None


def _load_event(path: Path) -> Mapping[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read invocation payload {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in invocation payload {path}") from exc


def _format_report(report: InvocationReport, output_format: str) -> str:
    if output_format not in {"table", "json"}:
        raise ValueError("format must be either 'table' or 'json'")

    if output_format == "json":
        return json.dumps(report.to_dict(), indent=2)
    return render_table(report)


def _handle_invoke(args: argparse.Namespace) -> int:
    try:
        event = _load_event(args.event)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 2

    try:
        manifest = load_manifest(args.manifests)
        configure_logging(args.log_level or manifest.log_level or "WARNING")
        if args.dry_run:
            config_client = _dry_run_client(args.region)
        else:
            config_client = create_client(args.region)
        service = build_service(manifest, config_client=config_client, evaluator=args.evaluator)

        if args.dry_run:
            prepared = service.prepare(event)
            report = InvocationReport(records=prepared.records)
        else:
            result = service.handle(event)
            report = InvocationReport(records=result.records, submitted=True)
    except PartialAcceptanceError as exc:
        report = InvocationReport(
            records=exc.result.records,
            submitted=True,
            failed_evaluations=exc.result.failed_evaluations,
        )
        print(_format_report(report, args.format))
        return 1
    except (ConfigRuleError, BotoCoreError) as exc:
        print(f"Error: {exc}")
        return 2
    except Exception as exc:  # noqa: BLE001 - evaluator failures reported as CLI errors
        print(f"Error: {type(exc).__name__}: {exc}")
        return 2

    print(_format_report(report, args.format))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "invoke":
        return _handle_invoke(args)

    parser.print_help()
    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
