from .auditor import PostAuditor
from .errors import PostAuditError, ConfigError, PostLoadError
from .loader import load_post, parse_post, discover_posts, split_bundle, load_bundle
from .publisher import PostPublisher, slugify

__all__ = [
    "PostAuditor",
    "PostAuditError",
    "ConfigError",
    "PostLoadError",
    "load_post",
    "parse_post",
    "discover_posts",
    "split_bundle",
    "load_bundle",
    "PostPublisher",
    "slugify",
]
