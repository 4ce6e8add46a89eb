from datetime import datetime
from pathlib import Path
from typing import List

from post_auditor.models import Finding, PostRecord
from post_auditor.config.shared_constants import POST_FILENAME
from .base import make_finding


def check_filename(record: PostRecord, severity: str = "warning") -> List[Finding]:
    """Post files are named YYYY-MM-DD-slug.md."""
    if record["is_bundle_segment"]:
        return []

    name = Path(record["source"]).name
    match = POST_FILENAME.match(Path(record["source"]).stem)
    if not match:
        return [make_finding("filename", severity, f"{name} does not follow YYYY-MM-DD-slug.md", record)]

    try:
        datetime.strptime(match.group("date"), "%Y-%m-%d")
    except ValueError:
        return [make_finding("filename", severity, f"{name} starts with an impossible date", record)]
    return []
