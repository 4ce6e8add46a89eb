import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any

from post_auditor.checks import CHECKS
from post_auditor.checks.base import make_finding
from post_auditor.config.shared_constants import DEFAULT_SETTINGS, SEVERITIES
from post_auditor.errors import PostLoadError
from post_auditor.loader import discover_posts, load_bundle, load_posts_async
from post_auditor.models import AuditReport, Finding, PostRecord

logger = logging.getLogger(__name__)


class PostAuditor:
    """Runs the enabled hygiene checks over post records and collects findings."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.settings = {**DEFAULT_SETTINGS, **(settings or {})}
        disabled = set(self.settings.get("disabled_checks") or [])
        overrides = self.settings.get("severity_overrides") or {}

        self.checks = {
            name: {"run": check["run"], "severity": overrides.get(name, check["severity"])}
            for name, check in CHECKS.items()
            if name not in disabled
        }

    def audit_post(self, record: PostRecord) -> List[Finding]:
        """Run every enabled check against one post."""
        findings = []
        for name, check in self.checks.items():
            try:
                findings.extend(check["run"](record, severity=check["severity"]))
            except Exception as e:
                logger.error(f"Check '{name}' crashed on {record['source']}: {e}", exc_info=True)
                findings.append(make_finding(
                    "internal", "error", f"check '{name}' failed: {type(e).__name__}: {e}", record,
                ))
        return findings

    def audit_posts(self, records: List[PostRecord]) -> List[Finding]:
        findings = []
        for record in records:
            findings.extend(self.audit_post(record))
        return findings

    def _read_error_finding(self, error: PostLoadError) -> Finding:
        return {
            "check": "read",
            "severity": "error",
            "message": f"could not read file: {error.reason}",
            "source": str(error.path),
            "line": None,
        }

    def build_report(self, findings: List[Finding], posts: int, started: datetime,
                     root: Optional[str] = None) -> AuditReport:
        counts = {severity: 0 for severity in SEVERITIES}
        for finding in findings:
            counts[finding["severity"]] = counts.get(finding["severity"], 0) + 1

        fail_on = self.settings["fail_on"]
        # "warning" fails on warnings and errors, "error" only on errors
        failing = SEVERITIES[:SEVERITIES.index(fail_on) + 1]
        passed = not any(counts.get(severity) for severity in failing)

        return {
            "root": root,
            "started": started.isoformat(timespec="seconds"),
            "posts": posts,
            "findings": findings,
            "counts": counts,
            "fail_on": fail_on,
            "passed": passed,
        }

    async def run(self, paths: Optional[List[Any]] = None,
                  bundles: Optional[List[Any]] = None) -> AuditReport:
        """
        Audit post files and exported bundles.

        Args:
            paths: Files or directories. Directories are searched for posts
                with the configured extensions. Defaults to settings["posts_dir"]
                when neither paths nor bundles are given.
            bundles: Concatenated corpus exports to split and audit.

        Returns:
            AuditReport: findings plus per-severity counts and the pass/fail verdict.
        """
        started = datetime.now()
        if not paths and not bundles:
            paths = [self.settings["posts_dir"]]
        paths = paths or []

        files = []
        for path in paths:
            files.extend(discover_posts(path, self.settings["extensions"]))

        findings = []
        posts = 0
        for result in await load_posts_async(files):
            if isinstance(result, PostLoadError):
                logger.warning(str(result))
                findings.append(self._read_error_finding(result))
                continue
            posts += 1
            findings.extend(self.audit_post(result))

        for bundle in bundles or []:
            records = load_bundle(bundle)
            posts += len(records)
            findings.extend(self.audit_posts(records))

        root = str(Path(paths[0])) if len(paths) == 1 and not bundles else None
        report = self.build_report(findings, posts, started, root=root)
        logger.info(
            f"Audited {posts} posts: {report['counts'].get('error', 0)} errors, "
            f"{report['counts'].get('warning', 0)} warnings"
        )
        return report
