import logging
from collections import defaultdict
from typing import List

from post_auditor.models import AuditReport
from post_auditor.utils.file_formats import write_to_file, write_to_json
from post_auditor.utils.views import format_finding, print_audit_output

logger = logging.getLogger(__name__)

REPORT_FORMATS = ["text", "json", "markdown"]


def summary_line(report: AuditReport) -> str:
    verdict = "passed" if report["passed"] else "failed"
    return (
        f"{report['posts']} posts audited, {report['counts'].get('error', 0)} errors, "
        f"{report['counts'].get('warning', 0)} warnings: {verdict} (fail on {report['fail_on']})"
    )


def render_text(report: AuditReport) -> str:
    lines = [format_finding(finding) for finding in report["findings"]]
    lines.append(summary_line(report))
    return "\n".join(lines) + "\n"


def print_report(report: AuditReport) -> None:
    for finding in report["findings"]:
        print_audit_output(format_finding(finding), finding["severity"])
    print_audit_output(summary_line(report), "OK" if report["passed"] else "ERROR")


def _escape_cell(text: str) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


def render_markdown(report: AuditReport) -> str:
    """Findings as one table per post, worst posts first."""
    by_source = defaultdict(list)
    for finding in report["findings"]:
        by_source[finding["source"]].append(finding)

    parts: List[str] = [
        "# Post audit",
        "",
        f"- Started: {report['started']}",
        f"- Posts: {report['posts']}",
        f"- Errors: {report['counts'].get('error', 0)}",
        f"- Warnings: {report['counts'].get('warning', 0)}",
        f"- Result: {'passed' if report['passed'] else 'failed'}",
    ]

    ordered = sorted(
        by_source.items(),
        key=lambda item: (-sum(f["severity"] == "error" for f in item[1]), item[0]),
    )
    for source, findings in ordered:
        parts.extend([
            "",
            f"## `{source}`",
            "",
            "| Line | Severity | Check | Message |",
            "|------|----------|-------|---------|",
        ])
        for finding in findings:
            parts.append(
                f"| {finding['line'] or ''} | {finding['severity']} | {finding['check']} "
                f"| {_escape_cell(finding['message'])} |"
            )

    if not by_source:
        parts.extend(["", "No findings."])
    return "\n".join(parts) + "\n"


async def write_report(report: AuditReport, output_format: str, output_path: str) -> str:
    """Write the report to output_path in the requested format."""
    if output_format not in REPORT_FORMATS:
        raise ValueError(f"Unsupported report format: {output_format}")

    if output_format == "json":
        return write_to_json(report, output_path)
    if output_format == "markdown":
        await write_to_file(output_path, render_markdown(report))
    else:
        await write_to_file(output_path, render_text(report))
    return output_path
