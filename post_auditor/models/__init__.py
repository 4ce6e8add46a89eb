from .post import PostRecord, Finding, AuditReport

__all__ = [
    "PostRecord",
    "Finding",
    "AuditReport",
]
