from datetime import date, datetime
from typing import Any, Optional, Union

from post_auditor.models import Finding, PostRecord
from post_auditor.config.shared_constants import DATE_FORMATS


def make_finding(check: str, severity: str, message: str, record: PostRecord,
                 line: Optional[int] = None) -> Finding:
    return {
        "check": check,
        "severity": severity,
        "message": message,
        "source": record["source"],
        "line": line,
    }


def parse_post_date(value: Any) -> Optional[Union[date, datetime]]:
    """Parse a front-matter date the way Jekyll writes them. Returns None when invalid."""
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.date() if fmt == "%Y-%m-%d" else parsed

    # ISO 8601 forms such as 2021-06-14T09:30:00Z
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def calendar_day(value: Union[date, datetime]) -> date:
    # Day as written; no timezone conversion
    return value.date() if isinstance(value, datetime) else value
