"""
Unit tests for post hygiene checks
"""

from datetime import date, datetime

from post_auditor.checks import (
    check_body,
    check_code_fences,
    check_code_language,
    check_date,
    check_date_matches_filename,
    check_filename,
    check_front_matter,
    check_layout,
    check_schema,
    check_title,
    scan_code_fences,
)
from post_auditor.checks.base import parse_post_date
from post_auditor.loader import parse_post


def make_record(front_matter="title: Hello\nlayout: post\ndate: 2021-06-14", body="Some text.",
                path="_posts/apk/android/2021-06-14-hello.md"):
    return parse_post(f"---\n{front_matter}\n---\n{body}", source=path, path=path)


class TestFrontMatterCheck:
    """Test front-matter delimiter and YAML findings"""

    def test_good_post_is_clean(self, good_post):
        """Test no findings for a well formed post"""
        assert check_front_matter(parse_post(good_post, source="inline")) == []

    def test_missing_block(self):
        """Test a post with no front matter"""
        findings = check_front_matter(parse_post("hello", source="p.md"))

        assert len(findings) == 1
        assert findings[0]["check"] == "front-matter"
        assert findings[0]["severity"] == "error"
        assert findings[0]["line"] == 1

    def test_dependent_checks_skip_unparsed_posts(self):
        """Test title/date checks stay quiet when front matter is broken"""
        record = parse_post("---\ntitle: [x\n---\n", source="p.md")

        assert check_front_matter(record)
        assert check_title(record) == []
        assert check_date(record) == []
        assert check_schema(record) == []


class TestTitleCheck:
    """Test title presence"""

    def test_missing_title(self):
        findings = check_title(make_record("layout: post\ndate: 2021-06-14"))
        assert findings[0]["message"] == "title is missing"

    def test_blank_title(self):
        findings = check_title(make_record("title: '   '\ndate: 2021-06-14"))
        assert findings[0]["message"] == "title is empty"

    def test_null_title(self):
        """Test `title:` with no value counts as missing"""
        findings = check_title(make_record("title:\ndate: 2021-06-14"))
        assert findings[0]["message"] == "title is missing"

    def test_numeric_title(self):
        """Test YAML numbers are acceptable titles"""
        assert check_title(make_record("title: 2048\ndate: 2021-06-14")) == []


class TestDateCheck:
    """Test date parsing"""

    def test_valid_forms(self):
        """Test the forms Jekyll posts use"""
        for value in [
            "2021-06-14",
            "2021-06-14 09:30",
            "2021-06-14 09:30:00",
            "2021-06-14 09:30:00 +0800",
            "2021-06-14 09:30:00 +08:00",
            "2021-06-14T09:30:00Z",
            "2021-06-14T09:30:00+08:00",
        ]:
            assert check_date(make_record(f"title: x\ndate: {value}")) == [], value

    def test_fractional_seconds(self):
        """Test fractional seconds with and without an offset"""
        for value in ["2021-06-14 09:30:00.5 +0800", "2021-06-14 09:30:00.123"]:
            assert check_date(make_record(f"title: x\ndate: {value}")) == [], value

    def test_missing_date(self):
        findings = check_date(make_record("title: x"))
        assert findings[0]["message"] == "date is missing"

    def test_impossible_date(self):
        """Test calendar-invalid dates fail"""
        findings = check_date(make_record("title: x\ndate: 2021-02-30"))

        assert findings[0]["check"] == "date"
        assert "2021-02-30" in findings[0]["message"]

    def test_garbage_date(self):
        assert check_date(make_record("title: x\ndate: last tuesday"))

    def test_parse_post_date(self):
        """Test returned types for date-only and date-time values"""
        assert parse_post_date("2021-06-14") == date(2021, 6, 14)
        assert parse_post_date("2021-06-14 09:30:00") == datetime(2021, 6, 14, 9, 30)
        assert parse_post_date(date(2021, 6, 14)) == date(2021, 6, 14)
        assert parse_post_date(20210614) is None
        assert parse_post_date("") is None


class TestSchemaCheck:
    """Test front-matter field types"""

    def test_good_types(self, good_post):
        assert check_schema(parse_post(good_post, source="inline")) == []

    def test_tags_as_mapping(self):
        findings = check_schema(make_record("title: x\ndate: 2021-06-14\ntags: {a: 1}"))

        assert len(findings) == 1
        assert findings[0]["message"].startswith("tags:")

    def test_layout_must_be_string(self):
        findings = check_schema(make_record("title: x\ndate: 2021-06-14\nlayout: [post]"))
        assert findings[0]["message"].startswith("layout:")

    def test_categories_list(self):
        """Test categories may be a list"""
        assert check_schema(make_record("title: x\ndate: 2021-06-14\ncategories: [ios, swift]")) == []


class TestLayoutCheck:
    """Test layout presence"""

    def test_missing_layout(self):
        findings = check_layout(make_record("title: x\ndate: 2021-06-14"))

        assert findings[0]["severity"] == "warning"
        assert findings[0]["check"] == "layout"

    def test_present_layout(self):
        assert check_layout(make_record()) == []


class TestFilenameChecks:
    """Test filename convention and filename/front-matter date agreement"""

    def test_conventional_name(self):
        assert check_filename(make_record()) == []

    def test_unconventional_name(self):
        findings = check_filename(make_record(path="_posts/apk/android/room.md"))
        assert "does not follow" in findings[0]["message"]

    def test_impossible_filename_date(self):
        findings = check_filename(make_record(path="_posts/apk/2021-13-40-room.md"))
        assert "impossible date" in findings[0]["message"]

    def test_bundle_segments_skip_filename(self):
        record = parse_post("---\ntitle: x\n---\n", source="export.txt#1", is_bundle_segment=True)
        assert check_filename(record) == []

    def test_dates_agree(self):
        record = make_record("title: x\ndate: 2021-06-14 23:30:00 -0700")
        assert check_date_matches_filename(record) == []

    def test_dates_disagree(self):
        findings = check_date_matches_filename(make_record("title: x\ndate: 2021-06-15"))

        assert findings[0]["check"] == "date-matches-filename"
        assert "2021-06-15" in findings[0]["message"]

    def test_invalid_date_left_to_date_check(self):
        assert check_date_matches_filename(make_record("title: x\ndate: nonsense")) == []


class TestCodeFences:
    """Test fenced code block pairing"""

    def test_scan_pairs_blocks(self):
        body = "```kotlin\nval x = 1\n```\n\n~~~\nplain\n~~~\n"
        blocks = scan_code_fences(body)

        assert [(b["line"], b["info"], b["closed"], b["close_line"]) for b in blocks] == [
            (0, "kotlin", True, 2),
            (4, "", True, 6),
        ]

    def test_unclosed_fence_reports_file_line(self):
        """Test the opening line is reported as a file line number"""
        record = make_record(body="intro\n\n```bash\nls -la\n")
        findings = check_code_fences(record)

        assert len(findings) == 1
        # 3 front matter lines + 2 delimiters, then the fence is body line 3
        assert findings[0]["line"] == 8
        assert findings[0]["severity"] == "error"

    def test_other_marker_does_not_close(self):
        """Test ~~~ inside a backtick block is content"""
        findings = check_code_fences(make_record(body="```\n~~~\n"))
        assert len(findings) == 1

    def test_shorter_fence_does_not_close(self):
        findings = check_code_fences(make_record(body="````md\n```\ninner\n```\n"))
        assert len(findings) == 1

    def test_longer_fence_closes(self):
        assert check_code_fences(make_record(body="```\ncode\n`````\n")) == []

    def test_fence_with_info_does_not_close(self):
        """Test a line like ```kotlin inside a block is content"""
        findings = check_code_fences(make_record(body="```\n```kotlin\n"))
        assert len(findings) == 1

    def test_inline_backticks_are_not_fences(self):
        """Test a backtick info string means the line is not a fence"""
        assert check_code_fences(make_record(body="``` `not a fence` ```\ntext\n")) == []

    def test_indented_fences_in_lists(self):
        body = "1. Run it:\n\n    ```bash\n    ./gradlew build\n    ```\n"
        assert check_code_fences(make_record(body=body)) == []

    def test_indented_code_block_is_not_a_fence(self):
        """Test a 4-space indented ``` line is code, not an opening fence"""
        body = "To open a fence type:\n\n    ```\n\nDone.\n"
        assert check_code_fences(make_record(body=body)) == []

    def test_indented_fence_line_does_not_close(self):
        """Test an over-indented ``` inside a block is content"""
        blocks = scan_code_fences("```md\n    ```\n```\n")

        assert len(blocks) == 1
        assert blocks[0]["close_line"] == 2

    def test_nested_list_fences(self):
        """Test fences indented to a nested list item's content column"""
        body = "- Build:\n  - Run:\n\n    ```bash\n    ./gradlew build\n    ```\n\nAfter.\n"
        blocks = scan_code_fences(body)

        assert [(b["line"], b["closed"]) for b in blocks] == [(3, True)]

    def test_fence_on_list_marker_line(self):
        """Test a fence that starts right after a list marker"""
        assert check_code_fences(make_record(body="- ```bash\n  ls\n  ```\n")) == []

    def test_form_feed_keeps_line_numbers(self):
        """Test only real line endings count towards file line numbers"""
        record = make_record(body="intro\x0cmore\u2028still intro\n```bash\n")
        findings = check_code_fences(record)

        assert findings[0]["line"] == 7

    def test_missing_language(self):
        findings = check_code_language(make_record(body="text\n\n```\ncode\n```\n"))

        assert len(findings) == 1
        assert findings[0]["severity"] == "warning"
        assert findings[0]["line"] == 8

    def test_missing_language_in_list_item(self):
        """Test unlabelled blocks nested in lists are found"""
        body = "1. Run it:\n\n   ~~~\n   ls\n   ~~~\n"
        findings = check_code_language(make_record(body=body))

        assert len(findings) == 1
        assert findings[0]["line"] == 8

    def test_labelled_blocks_are_clean(self):
        body = "```kotlin\nval x = 1\n```\n\n~~~ bash\nls\n~~~\n"
        assert check_code_language(make_record(body=body)) == []

    def test_unclosed_fence_not_reported_as_missing_language(self):
        assert check_code_language(make_record(body="```\ncode\n")) == []


class TestBodyCheck:
    """Test empty post bodies"""

    def test_empty_body(self):
        findings = check_body(make_record(body="\n\n"))
        assert findings[0]["check"] == "body"

    def test_body_with_text(self):
        assert check_body(make_record(body="# Heading\n\nText")) == []
