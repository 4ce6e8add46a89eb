import logging
from datetime import date, datetime
from typing import Dict, List, Any

from jsonschema import Draft7Validator

from post_auditor.models import Finding, PostRecord
from post_auditor.config.shared_constants import FRONT_MATTER_SCHEMA
from .base import make_finding, parse_post_date, calendar_day

logger = logging.getLogger(__name__)

_validator = Draft7Validator(FRONT_MATTER_SCHEMA)


def check_front_matter(record: PostRecord, severity: str = "error") -> List[Finding]:
    """Front matter must open on line 1, close with ---, and hold a YAML mapping."""
    return [
        make_finding("front-matter", severity, error["message"], record, error.get("line"))
        for error in record["load_errors"]
    ]


def check_title(record: PostRecord, severity: str = "error") -> List[Finding]:
    if record["load_errors"]:
        return []
    if "title" not in record["metadata"] or record["title"] is None:
        return [make_finding("title", severity, "title is missing", record)]
    if not record["title"].strip():
        return [make_finding("title", severity, "title is empty", record)]
    return []


def check_date(record: PostRecord, severity: str = "error") -> List[Finding]:
    if record["load_errors"]:
        return []
    value = record["date"]
    if value is None or (isinstance(value, str) and not value.strip()):
        return [make_finding("date", severity, "date is missing", record)]
    if parse_post_date(value) is None:
        return [make_finding("date", severity, f"date {value!r} is not a valid calendar date/time", record)]
    return []


def _schema_instance(metadata: Dict[str, Any]) -> Dict[str, Any]:
    instance = dict(metadata)
    if isinstance(instance.get("date"), (date, datetime)):
        instance["date"] = instance["date"].isoformat()
    return instance


def check_schema(record: PostRecord, severity: str = "error") -> List[Finding]:
    """Validate front-matter field types against FRONT_MATTER_SCHEMA."""
    if record["load_errors"]:
        return []

    findings = []
    errors = sorted(_validator.iter_errors(_schema_instance(record["metadata"])), key=lambda e: list(e.path))
    for error in errors:
        location = ".".join(str(part) for part in error.path) or "front matter"
        findings.append(make_finding("schema", severity, f"{location}: {error.message}", record))
    return findings


def check_layout(record: PostRecord, severity: str = "warning") -> List[Finding]:
    if record["load_errors"]:
        return []
    if not record["layout"] or not record["layout"].strip():
        return [make_finding("layout", severity, "layout is missing", record)]
    return []


def check_date_matches_filename(record: PostRecord, severity: str = "warning") -> List[Finding]:
    if record["load_errors"] or not record["filename_date"]:
        return []

    parsed = parse_post_date(record["date"])
    if parsed is None:
        return []

    written = calendar_day(parsed).isoformat()
    if written != record["filename_date"]:
        return [make_finding(
            "date-matches-filename", severity,
            f"front matter date {written} does not match filename date {record['filename_date']}",
            record,
        )]
    return []
