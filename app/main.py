"""
Command-line entry point for the inspection report generator.

Usage:
    python -m app.main build job.json [--output-dir reports]

A job file is JSON with a ``metadata`` object (report header fields) and a
``defects`` list of ``{"type", "image", "description"}`` entries, where
``image`` is a path relative to the job file.
"""

import argparse
import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from src.errors import DefectValidationError
from src.schemas.models import ReportMetadata
from utils.config import config, REPORT_DIR
from utils.logger import setup_logger, print_summary_panel, print_error
from utils.validators import validate_image_path

from app.services.file_handler import load_image_file, save_report
from app.services.session_manager import DefectSession

logger = setup_logger(__name__, level=config.log_level, component="CLI")

JOB_DEFECT_FIELDS = ("type", "image", "description", "custom_type")


def load_job(job_path: Path) -> dict:
    with open(job_path, "r", encoding="utf-8") as f:
        job = json.load(f)
    if not isinstance(job, dict):
        raise ValueError("Job file must contain a JSON object")
    return job


def load_metadata(job: dict) -> ReportMetadata:
    fields = job.get("metadata") or {}
    if not isinstance(fields, dict):
        raise ValueError("'metadata' must be a JSON object")
    return ReportMetadata(**fields)


def build_session(job: dict, base_dir: Path) -> DefectSession:
    """Load every defect in ``job`` into a new session, validating as the form would."""
    defects = job.get("defects") or []
    if not isinstance(defects, list):
        raise DefectValidationError("'defects' must be a list")

    session = DefectSession()
    for index, entry in enumerate(defects, 1):
        if not isinstance(entry, dict):
            raise DefectValidationError(f"Defect {index}: entry must be an object")
        for key in JOB_DEFECT_FIELDS:
            if entry.get(key) is not None and not isinstance(entry[key], str):
                raise DefectValidationError(f"Defect {index}: '{key}' must be a string")

        is_valid, error, image_path = validate_image_path(str(base_dir / (entry.get("image") or "")))
        if not is_valid:
            raise DefectValidationError(f"Defect {index}: {error}")
        try:
            session.add_defect(
                entry.get("type"),
                load_image_file(image_path),
                entry.get("description"),
                custom_type=entry.get("custom_type"),
            )
        except DefectValidationError as e:
            raise DefectValidationError(f"Defect {index}: {e}") from e
    return session


def cmd_build(args: argparse.Namespace) -> int:
    job_path = Path(args.job)
    try:
        job = load_job(job_path)
        metadata = load_metadata(job)
        session = build_session(job, job_path.parent)
    except (OSError, ValueError, ValidationError, DefectValidationError) as e:
        print_error("Invalid job", str(e), details=str(job_path))
        return 1

    result = session.generate(metadata)
    if not result.success:
        print_error("Generation failed", result.status_message)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else REPORT_DIR
    saved = save_report(result, output_dir)

    print_summary_panel("Report Generated", {
        "File": saved,
        "Pages": result.page_count,
        "Defects": len(session),
    })
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Home defect inspection report generator")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Generate a PDF report from a job file")
    build.add_argument("job", help="Path to the JSON job file")
    build.add_argument("--output-dir", required=False, help="Directory to write the PDF into")
    build.set_defaults(func=cmd_build)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
