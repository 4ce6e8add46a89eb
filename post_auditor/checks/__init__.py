from .front_matter import (
    check_front_matter,
    check_title,
    check_date,
    check_schema,
    check_layout,
    check_date_matches_filename,
)
from .filename import check_filename
from .markdown import check_code_fences, check_code_language, check_body, scan_code_fences

# name -> check function and default severity, in report order
CHECKS = {
    "front-matter": {"run": check_front_matter, "severity": "error"},
    "title": {"run": check_title, "severity": "error"},
    "date": {"run": check_date, "severity": "error"},
    "code-fences": {"run": check_code_fences, "severity": "error"},
    "schema": {"run": check_schema, "severity": "error"},
    "layout": {"run": check_layout, "severity": "warning"},
    "filename": {"run": check_filename, "severity": "warning"},
    "date-matches-filename": {"run": check_date_matches_filename, "severity": "warning"},
    "code-language": {"run": check_code_language, "severity": "warning"},
    "body": {"run": check_body, "severity": "warning"},
}

__all__ = [
    "CHECKS",
    "check_front_matter",
    "check_title",
    "check_date",
    "check_schema",
    "check_layout",
    "check_date_matches_filename",
    "check_filename",
    "check_code_fences",
    "check_code_language",
    "check_body",
    "scan_code_fences",
]
