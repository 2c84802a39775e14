"""CLI entrypoint for the weekly payroll summary batch."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import config
from logging_utils import configure_logging
from repository import ShiftFileRepository, dumps_summaries
from services import PayrollCalculator, validate_shifts

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payroll-summary",
        description="Summarize employee shifts into weekly regular and overtime hours",
    )
    parser.add_argument("input", help="Path to the JSON file of shifts")
    parser.add_argument(
        "-o", "--output",
        default=config.OUTPUT_FILENAME,
        help="Summary file to write; relative paths land in the data directory",
    )
    parser.add_argument("--pdf", help="Also write a PDF report to this path")
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip records with malformed timestamps instead of failing the batch",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=config.OVERTIME_THRESHOLD_H,
        help="Weekly hours above which time counts as overtime",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser


def run(args: argparse.Namespace) -> Path:
    raw = ShiftFileRepository().load_raw(args.input)
    shifts, errors = validate_shifts(raw, skip_invalid=args.skip_invalid)
    summaries = PayrollCalculator(args.threshold).summarize(shifts)
    if errors:
        logger.warning("Skipped %d malformed shift records", len(errors))

    # everything is rendered before anything is written
    outputs = {args.output: dumps_summaries(summaries).encode("utf-8")}
    if args.pdf:
        from report import summaries_to_pdf

        outputs[args.pdf] = summaries_to_pdf(summaries)
    # relative outputs land in the data directory, only probed when needed
    relative = any(not Path(p).is_absolute() for p in outputs)
    repo = ShiftFileRepository(config.pick_data_dir() if relative else Path.cwd())
    dest = repo.write_outputs(outputs)[0]
    logger.info("Summarized %d shifts into %d employee-weeks", len(shifts), len(summaries))
    return dest


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level.upper())
    try:
        run(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Could not write output: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
