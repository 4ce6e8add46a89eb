from typing import TypedDict, List, Dict, Optional, Any


class PostRecord(TypedDict):
    # Where the post came from: a file path or "<bundle>#<n>"
    source: str
    is_bundle_segment: bool

    # Front matter as written, plus the conventional fields pulled from it
    metadata: Dict[str, Any]
    title: Optional[str]
    layout: Optional[str]
    categories: List[str]
    tags: List[str]
    date: Optional[Any]

    # Markdown after the closing delimiter
    body: str
    body_line: int

    # Parts of _posts/<topic>/<subtopic>/YYYY-MM-DD-slug.md
    topic: Optional[str]
    subtopic: Optional[str]
    filename_date: Optional[str]
    slug: Optional[str]

    # Structural problems found while splitting the file
    load_errors: List[Dict[str, Any]]


class Finding(TypedDict):
    check: str
    severity: str
    message: str
    source: str
    line: Optional[int]


class AuditReport(TypedDict):
    root: Optional[str]
    started: str
    posts: int
    findings: List[Finding]
    counts: Dict[str, int]
    fail_on: str
    passed: bool
