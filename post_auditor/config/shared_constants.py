import re

SEVERITIES = ("error", "warning")

POST_EXTENSIONS = [".md", ".markdown"]

FRONT_MATTER_DELIMITER = "---"

# Artifact of concatenated corpus exports, not part of any post
BUNDLE_SEPARATOR = re.compile(r"<\|RELATED_DOC_SEP-magic-[^|]*\|>")

# YYYY-MM-DD-slug.ext
POST_FILENAME = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)$")

# Formats tried, in order, for string dates in front matter
DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
]

JEKYLL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

SAMPLE_FRONT_MATTER = {
    "layout": "post",
    "title": "Room migrations without losing data",
    "categories": "android",
    "tags": ["room", "jetpack", "sqlite"],
    "date": "2021-06-14 09:30:00 +0800",
}

_STRING_OR_STRINGS = {
    "oneOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": ["string", "number"]}},
    ]
}

FRONT_MATTER_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": ["string", "number"]},
        "layout": {"type": "string"},
        "categories": _STRING_OR_STRINGS,
        "tags": _STRING_OR_STRINGS,
        "date": {"type": "string"},
    },
}

DEFAULT_SETTINGS = {
    "posts_dir": "_posts",
    "extensions": POST_EXTENSIONS,
    "fail_on": "error",
    "disabled_checks": [],
    "severity_overrides": {},
    "log_level": "INFO",
    "log_file": None,
}

ENV_OVERRIDES = {
    "POSTS_DIR": "posts_dir",
    "POST_AUDIT_FAIL_ON": "fail_on",
    "POST_AUDIT_LOG_LEVEL": "log_level",
    "POST_AUDIT_LOG_FILE": "log_file",
}

DEFAULT_CONFIG_FILE = "post_audit.json"
