import re
from typing import Dict, List, Any, Iterator

import mistune

from post_auditor.loader import split_lines
from post_auditor.models import Finding, PostRecord
from .base import make_finding

# Applied to the line with its container indent removed
FENCE_OPEN = re.compile(r"^ {0,3}(?P<marker>`{3,}|~{3,})(?P<info>.*)$")
FENCE_CLOSE = re.compile(r"^ {0,3}(?P<marker>`{3,}|~{3,})[ \t]*$")
LIST_ITEM = re.compile(r"^(?P<indent> {0,3})(?P<marker>[-+*]|\d{1,9}[.)])(?P<space> +|$)")

_markdown_ast = mistune.create_markdown(renderer="ast")


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _content_indent(item) -> int:
    """Column where a list item's content starts."""
    start = len(item.group("indent")) + len(item.group("marker"))
    spaces = len(item.group("space"))
    # No text after the marker, or an indented code block right after it
    if spaces == 0 or spaces > 4:
        return start + 1
    return start + spaces


def scan_code_fences(body: str) -> List[Dict[str, Any]]:
    """
    Walk the body line by line and pair up fenced code blocks.

    A fence is indented at most 3 spaces relative to its container: the
    document, or the content column of the list item it sits in. A
    closing fence uses the same character as its opening fence, is at
    least as long and carries no info string. Backtick fences cannot have
    a backtick in the info string.

    Returns one dict per block with 0-based line indexes:
        {"line": int, "marker": str, "info": str, "closed": bool, "close_line": int | None}
    """
    blocks = []
    current = None
    containers: List[int] = []

    for idx, raw in enumerate(split_lines(body)):
        line = raw.expandtabs(4)

        if current is not None:
            container = current["container"]
            if _indent_width(line) < container and line.strip():
                continue
            match = FENCE_CLOSE.match(line[container:])
            if not match:
                continue
            marker = match.group("marker")
            if marker[0] == current["marker"][0] and len(marker) >= len(current["marker"]):
                current["closed"] = True
                current["close_line"] = idx
                current = None
            continue

        if not line.strip():
            continue

        width = _indent_width(line)
        while containers and width < containers[-1]:
            containers.pop()
        container = containers[-1] if containers else 0

        item = LIST_ITEM.match(line[container:])
        if item:
            container += _content_indent(item)
            containers.append(container)

        match = FENCE_OPEN.match(line[container:])
        if not match:
            continue
        marker = match.group("marker")
        info = match.group("info").strip()
        if marker[0] == "`" and "`" in info:
            continue
        current = {
            "line": idx, "marker": marker, "info": info,
            "closed": False, "close_line": None, "container": container,
        }
        blocks.append(current)

    for block in blocks:
        del block["container"]
    return blocks


def iter_code_tokens(tokens: List[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Yield block_code tokens from a mistune AST, depth first."""
    for token in tokens:
        if token.get("type") == "block_code":
            yield token
        children = token.get("children")
        if isinstance(children, list):
            yield from iter_code_tokens(children)


def check_code_fences(record: PostRecord, severity: str = "error") -> List[Finding]:
    """Every opening ``` (or ~~~) needs a matching closing fence."""
    findings = []
    for block in scan_code_fences(record["body"]):
        if not block["closed"]:
            line = record["body_line"] + block["line"]
            findings.append(make_finding(
                "code-fences", severity,
                f"code fence {block['marker']} opened on line {line} is never closed",
                record, line,
            ))
    return findings


def check_code_language(record: PostRecord, severity: str = "warning") -> List[Finding]:
    """
    Fenced blocks should name their language for syntax highlighting.

    Blocks come from mistune's AST. Line numbers are taken from the fence
    scanner when both agree on the number of fenced blocks; unclosed
    fences are left to the code-fences check.
    """
    fenced = [
        token for token in iter_code_tokens(_markdown_ast(record["body"]))
        if token.get("style") == "fenced"
    ]
    scanned = scan_code_fences(record["body"])
    paired = len(fenced) == len(scanned)

    findings = []
    for idx, token in enumerate(fenced):
        if (token.get("attrs") or {}).get("info"):
            continue

        block = scanned[idx] if paired else None
        if block is not None and not block["closed"]:
            continue

        if block is not None:
            line = record["body_line"] + block["line"]
            message = f"code block on line {line} has no language label"
        else:
            line = None
            first = token.get("raw", "").strip()[:40]
            if first:
                message = f"code block starting {first.splitlines()[0]!r} has no language label"
            else:
                message = "empty code block has no language label"
        findings.append(make_finding("code-language", severity, message, record, line))
    return findings


def check_body(record: PostRecord, severity: str = "warning") -> List[Finding]:
    if record["load_errors"]:
        return []
    if not record["body"].strip():
        return [make_finding("body", severity, "post body is empty", record)]
    return []
