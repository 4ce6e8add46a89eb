"""
Tests for report rendering and writing
"""

import json

import pytest

from post_auditor.reporting import render_markdown, render_text, summary_line, write_report


@pytest.fixture
def report():
    return {
        "root": "_posts",
        "started": "2026-10-18T10:00:00",
        "posts": 2,
        "findings": [
            {"check": "layout", "severity": "warning", "message": "layout is missing",
             "source": "_posts/a.md", "line": None},
            {"check": "code-fences", "severity": "error", "message": "code fence ``` opened on line 9 is never closed",
             "source": "_posts/b.md", "line": 9},
        ],
        "counts": {"error": 1, "warning": 1},
        "fail_on": "error",
        "passed": False,
    }


class TestRendering:
    """Test text and markdown renderers"""

    def test_summary_line(self, report):
        assert summary_line(report) == "2 posts audited, 1 errors, 1 warnings: failed (fail on error)"

    def test_text(self, report):
        lines = render_text(report).splitlines()

        assert lines[0] == "_posts/a.md: warning [layout] layout is missing"
        assert lines[1].startswith("_posts/b.md:9: error [code-fences]")
        assert lines[-1] == summary_line(report)

    def test_markdown_orders_posts_with_errors_first(self, report):
        text = render_markdown(report)

        assert text.index("## `_posts/b.md`") < text.index("## `_posts/a.md`")
        assert "| 9 | error | code-fences |" in text
        assert "- Result: failed" in text

    def test_markdown_without_findings(self, report):
        report.update({"findings": [], "counts": {"error": 0, "warning": 0}, "passed": True})
        assert "No findings." in render_markdown(report)


class TestWriteReport:
    """Test writing reports to disk"""

    @pytest.mark.asyncio
    async def test_json(self, report, tmp_path):
        path = await write_report(report, "json", str(tmp_path / "out" / "report.json"))

        with open(path, encoding="utf-8") as f:
            assert json.load(f) == report

    @pytest.mark.asyncio
    async def test_markdown(self, report, tmp_path):
        path = await write_report(report, "markdown", str(tmp_path / "report.md"))

        with open(path, encoding="utf-8") as f:
            assert f.read() == render_markdown(report)

    @pytest.mark.asyncio
    async def test_unknown_format(self, report, tmp_path):
        with pytest.raises(ValueError):
            await write_report(report, "pdf", str(tmp_path / "report.pdf"))
