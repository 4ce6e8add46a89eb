import re
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

import aiofiles
import frontmatter
import yaml

from post_auditor.errors import PostLoadError
from post_auditor.models import PostRecord
from post_auditor.config.shared_constants import (
    BUNDLE_SEPARATOR,
    FRONT_MATTER_DELIMITER,
    POST_EXTENSIONS,
    POST_FILENAME,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

LINE_BREAK = re.compile(r"\r\n|\r|\n")


class PostYAMLLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as written so date checks see the raw value."""


PostYAMLLoader.add_constructor("tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_scalar)


def split_lines(text: str) -> List[str]:
    """Split on real line endings only; form feeds and U+2028 stay inside their line."""
    return LINE_BREAK.split(text)


def _as_list(value: Any) -> List[str]:
    """Jekyll accepts both "a b c" and [a, b, c] for tags and categories."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def parse_post_path(path: PathLike) -> Dict[str, Optional[str]]:
    """Split _posts/<topic>/<subtopic>/YYYY-MM-DD-slug.md into its parts."""
    path = Path(path)
    parts = {"topic": None, "subtopic": None, "filename_date": None, "slug": None}

    if "_posts" in path.parts:
        # Last _posts wins so nested checkouts still resolve
        idx = len(path.parts) - 1 - path.parts[::-1].index("_posts")
        dirs = path.parts[idx + 1:-1]
        if len(dirs) >= 1:
            parts["topic"] = dirs[0]
        if len(dirs) >= 2:
            parts["subtopic"] = dirs[1]

    match = POST_FILENAME.match(path.stem)
    if match:
        parts["filename_date"] = match.group("date")
        parts["slug"] = match.group("slug")
    else:
        parts["slug"] = path.stem
    return parts


def _split_front_matter(lines: List[str]):
    """Return (front matter lines, body start index, error) for a post."""
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return None, 0, {
            "message": f"missing front matter: line 1 must be '{FRONT_MATTER_DELIMITER}'",
            "line": 1,
        }

    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_DELIMITER:
            return lines[1:idx], idx + 1, None

    return None, 0, {
        "message": f"front matter opened on line 1 is never closed with '{FRONT_MATTER_DELIMITER}'",
        "line": 1,
    }


def parse_post(text: str, source: str, path: Optional[PathLike] = None,
               is_bundle_segment: bool = False) -> PostRecord:
    """Build a PostRecord from raw post text. Structural problems go to load_errors."""
    text = text.lstrip("\ufeff")
    lines = split_lines(text)
    load_errors = []
    metadata: Dict[str, Any] = {}

    fm_lines, body_start, error = _split_front_matter(lines)
    if error:
        load_errors.append(error)
        body_lines = lines
    else:
        body_lines = lines[body_start:]
        try:
            loaded = frontmatter.YAMLHandler().load("\n".join(fm_lines), Loader=PostYAMLLoader)
        except yaml.YAMLError as e:
            line = None
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                # +2: the mark is 0-based and the block starts after line 1
                line = mark.line + 2
            load_errors.append({"message": f"front matter is not valid YAML: {e}", "line": line})
            loaded = None
        else:
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                load_errors.append({
                    "message": f"front matter must be a mapping, got {type(loaded).__name__}",
                    "line": 2,
                })
                loaded = None
        metadata = loaded or {}

    title = metadata.get("title")
    layout = metadata.get("layout")
    path_parts = parse_post_path(path) if path is not None else {
        "topic": None, "subtopic": None, "filename_date": None, "slug": None,
    }

    return {
        "source": source,
        "is_bundle_segment": is_bundle_segment,
        "metadata": metadata,
        "title": str(title) if title is not None else None,
        "layout": str(layout) if layout is not None else None,
        "categories": _as_list(metadata.get("categories", metadata.get("category"))),
        "tags": _as_list(metadata.get("tags")),
        "date": metadata.get("date"),
        "body": "\n".join(body_lines),
        "body_line": body_start + 1,
        **path_parts,
        "load_errors": load_errors,
    }


def load_post(path: PathLike) -> PostRecord:
    """Read a single post file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PostLoadError(path, e) from e
    return parse_post(text, source=str(path), path=path)


async def read_post_async(path: PathLike) -> PostRecord:
    path = Path(path)
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            text = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PostLoadError(path, e) from e
    return parse_post(text, source=str(path), path=path)


async def load_posts_async(paths: List[PathLike]) -> List[Union[PostRecord, PostLoadError]]:
    """Read posts concurrently. Unreadable files come back as PostLoadError values."""
    results = await asyncio.gather(
        *(read_post_async(path) for path in paths),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, PostLoadError):
            raise result
    return list(results)


def discover_posts(root: PathLike, extensions: Optional[List[str]] = None) -> List[Path]:
    """List post files under root, sorted, skipping hidden directories."""
    root = Path(root)
    extensions = [ext.lower() for ext in (extensions or POST_EXTENSIONS)]

    if root.is_file():
        return [root]
    if not root.is_dir():
        raise PostLoadError(root, "no such file or directory")

    found = []
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix.lower() in extensions:
            found.append(path)

    logger.info(f"Discovered {len(found)} posts under {root}")
    return sorted(found)


def split_bundle(text: str) -> List[str]:
    """Split a concatenated corpus export into individual post texts."""
    segments = [segment.strip() for segment in BUNDLE_SEPARATOR.split(text)]
    return [segment for segment in segments if segment]


def load_bundle(path: PathLike) -> List[PostRecord]:
    """Read a concatenated export and parse each segment as a post."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PostLoadError(path, e) from e

    records = [
        parse_post(segment, source=f"{path}#{number}", is_bundle_segment=True)
        for number, segment in enumerate(split_bundle(text), 1)
    ]
    logger.info(f"Split {path.name} into {len(records)} posts")
    return records
