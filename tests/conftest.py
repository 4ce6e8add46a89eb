"""
Shared fixtures for post auditor tests
"""

import textwrap

import pytest

from post_auditor.config.shared_constants import ENV_OVERRIDES

GOOD_POST = textwrap.dedent("""\
    ---
    layout: post
    title: Room migrations without losing data
    categories: android
    tags: [room, jetpack]
    date: 2021-06-14 09:30:00 +0800
    ---

    Room needs a migration for every schema version.

    ```kotlin
    val MIGRATION_1_2 = object : Migration(1, 2) {}
    ```
    """)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of settings"""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def good_post():
    return GOOD_POST


@pytest.fixture
def posts_root(tmp_path):
    return tmp_path / "_posts"


@pytest.fixture
def write_post(posts_root):
    """Write a post under _posts/<topic>/<subtopic>/ and return its path"""

    def _write(name, text, topic="apk", subtopic="android"):
        directory = posts_root / topic / subtopic
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
