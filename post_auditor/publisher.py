import re
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import frontmatter

from post_auditor.config.shared_constants import JEKYLL_DATE_FORMAT

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Lowercase slug for filenames: punctuation dropped, spaces and underscores become hyphens."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)
    return re.sub(r"[\s_]+", "-", text).strip("-")


class PostPublisher:
    """Creates new post files with a complete front-matter block."""

    def __init__(self, root: Union[str, Path], layout: str = "post"):
        self.root = Path(root)
        self.layout = layout

    def generate_frontmatter(self, title: str, categories: Optional[Union[str, List[str]]] = None,
                             tags: Optional[List[str]] = None, date: Optional[datetime] = None,
                             layout: Optional[str] = None) -> dict:
        """Front matter in the field order posts use."""
        if not title or not title.strip():
            raise ValueError("A post needs a non-empty title")

        date = date or datetime.now().astimezone()
        return {
            "layout": layout or self.layout,
            "title": title.strip(),
            "categories": categories or "",
            "tags": list(tags or []),
            "date": date.strftime(JEKYLL_DATE_FORMAT).strip(),
        }

    def post_directory(self, topic: Optional[str] = None, subtopic: Optional[str] = None) -> Path:
        directory = self.root
        for part in (topic, subtopic):
            if part:
                directory = directory / slugify(part)
        return directory

    def write_post(self, metadata: dict, body: str, directory: Path, date: datetime) -> Path:
        """Write the post, never overwriting an existing file."""
        directory.mkdir(parents=True, exist_ok=True)

        slug = slugify(metadata["title"]) or "post"
        base_name = f"{date.strftime('%Y-%m-%d')}-{slug}"
        output_path = directory / f"{base_name}.md"

        # Handle duplicates
        counter = 1
        while output_path.exists():
            output_path = directory / f"{base_name}-{counter}.md"
            counter += 1

        post = frontmatter.Post(body, **metadata)
        with output_path.open("wb") as f:
            frontmatter.dump(post, f, sort_keys=False)

        logger.info(f"Created post {output_path}")
        return output_path

    def new_post(self, title: str, topic: Optional[str] = None, subtopic: Optional[str] = None,
                 categories: Optional[Union[str, List[str]]] = None, tags: Optional[List[str]] = None,
                 layout: Optional[str] = None, date: Optional[datetime] = None, body: str = "") -> Path:
        date = date or datetime.now().astimezone()
        metadata = self.generate_frontmatter(
            title, categories=categories or topic, tags=tags, date=date, layout=layout,
        )
        return self.write_post(metadata, body, self.post_directory(topic, subtopic), date)
