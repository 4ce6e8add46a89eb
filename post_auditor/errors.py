class PostAuditError(Exception):
    """Base class for errors raised by the post auditor."""


class ConfigError(PostAuditError):
    """Raised when audit settings are invalid."""


class PostLoadError(PostAuditError):
    """Raised when a post file cannot be read at all."""

    def __init__(self, path, reason):
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason
