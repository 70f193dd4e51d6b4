"""
Command-line interface for parcel file intake.

Usage:
    parcel-intake check --input <file_path> [--validation-rules <yaml>]
    parcel-intake template --output <file_path>
    parcel-intake submit --input <file_path> --output <batch.json> [--ai]

    Any command accepts --metrics-port <port> to expose Prometheus metrics.
"""

import argparse
import sys

from parcel_intake.analysis import OpenAIParcelAnalyzer
from parcel_intake.batch import BatchBlockedError, BatchJsonWriter, IngestionError, IngestionPipeline, ReviewSession
from parcel_intake.batch.writers import blocking_reasons, write_template
from parcel_intake.core.models import ParcelStatus
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)


def build_session(args) -> ReviewSession:
    pipeline = IngestionPipeline(validation_rules_path=args.validation_rules)
    return ReviewSession(pipeline=pipeline)


def print_report(session: ReviewSession) -> None:
    """Print one line per flagged parcel followed by status totals."""
    report = session.report
    print(f"Delimiter: {report.delimiter!r}  mapping confidence: {report.mapping.confidence:.2f}")
    if report.mapping.fallback_fields:
        print(f"Positional fallback used for: {', '.join(report.mapping.fallback_fields)}")
    print(f"Rows: {report.data_rows}  parcels: {len(session.parcels)}  dropped: {report.dropped_rows}")

    for line_no, parcel in enumerate(session.parcels, start=1):
        if parcel.status != ParcelStatus.VALID:
            label = parcel.invoice_id or "<no invoice>"
            print(f"  #{line_no} {label}: {parcel.status.value} - {parcel.status_message}")

    counts = session.status_counts()
    print("  ".join(f"{status}: {count}" for status, count in counts.items()))


def check_command(args) -> int:
    """
    Ingest a file and report parcel statuses.

    Returns:
        0 when the batch could be confirmed, 1 otherwise
    """
    session = build_session(args)
    try:
        session.load_file(args.input)
    except IngestionError as e:
        print(e.message, file=sys.stderr)
        return 1

    print_report(session)
    reasons = blocking_reasons(session.parcels)
    if reasons:
        print("Blocked: " + "; ".join(reasons))
        return 1
    print("Ready to submit")
    return 0


def template_command(args) -> int:
    path = write_template(args.output)
    logger.info("Template written", extra={"path": str(path)})
    print(path)
    return 0


def submit_command(args) -> int:
    """
    Ingest, optionally AI-review, confirm and write the batch as JSON.
    """
    session = build_session(args)
    try:
        session.load_file(args.input)
    except IngestionError as e:
        print(e.message, file=sys.stderr)
        return 1

    if args.ai:
        result = session.run_ai_review(OpenAIParcelAnalyzer(model=args.model))
        print(f"AI review: {result.summary}")
        for recommendation in result.recommendations:
            print(f"  - {recommendation}")

    print_report(session)
    try:
        batch = session.confirm()
    except BatchBlockedError as e:
        print(str(e), file=sys.stderr)
        return 1

    path = BatchJsonWriter().write(batch, args.output)
    print(f"Batch {batch.id}: {batch.total_parcels} parcels written to {path}")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="parcel-intake",
        description="Bulk parcel CSV intake and validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a merchant file
  parcel-intake check --input data/orders.csv

  # Check with custom validation rules
  parcel-intake check --input data/orders.csv --validation-rules config/validation_rules.yaml

  # Write the official template
  parcel-intake template --output parcel_upload_template.csv

  # Confirm a batch with AI address review
  parcel-intake submit --input data/orders.csv --output out/batch.json --ai

  # Expose metrics while checking
  parcel-intake --metrics-port 9100 check --input data/orders.csv
        """
    )

    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Serve Prometheus metrics on this port while the command runs"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Validate a parcel CSV file")
    check_parser.add_argument("--input", required=True, help="Path to input CSV file")
    check_parser.add_argument(
        "--validation-rules",
        default=None,
        help="Path to validation rules YAML file (built-in rules when omitted)"
    )

    template_parser = subparsers.add_parser("template", help="Write the official upload template")
    template_parser.add_argument(
        "--output",
        default="parcel_upload_template.csv",
        help="Output path (default: parcel_upload_template.csv)"
    )

    submit_parser = subparsers.add_parser("submit", help="Validate, confirm and export a batch")
    submit_parser.add_argument("--input", required=True, help="Path to input CSV file")
    submit_parser.add_argument("--output", required=True, help="Path of the batch JSON to write")
    submit_parser.add_argument("--validation-rules", default=None, help="Path to validation rules YAML file")
    submit_parser.add_argument("--ai", action="store_true", help="Run AI address review before confirming")
    submit_parser.add_argument("--model", default=None, help="AI model (default: PARCEL_AI_MODEL or gpt-4o-mini)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.metrics_port is not None:
        metrics.start_metrics_server(args.metrics_port)
        logger.info("Metrics server started", extra={"port": args.metrics_port})

    commands = {
        "check": check_command,
        "template": template_command,
        "submit": submit_command,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
