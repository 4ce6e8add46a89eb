import time
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Any

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from post_auditor.auditor import PostAuditor
from post_auditor.errors import PostLoadError
from post_auditor.loader import load_post
from post_auditor.utils.views import format_finding, print_audit_output

logger = logging.getLogger(__name__)


def wait_until_ready(file_path: Path, timeout=10) -> bool:
    """Wait until the file stops growing in size."""
    start = time.time()
    last_size = -1
    while time.time() - start < timeout:
        try:
            current_size = file_path.stat().st_size
            if current_size == last_size:
                return True
            last_size = current_size
            time.sleep(0.5)
        except FileNotFoundError:
            pass
    return False


def print_findings(path: Path, findings) -> None:
    if not findings:
        print_audit_output(f"{path}: clean", "OK")
        return
    for finding in findings:
        print_audit_output(format_finding(finding), finding["severity"])


class PostChangeHandler(FileSystemEventHandler):
    """Re-audits a post whenever it is created or modified."""

    def __init__(self, auditor: PostAuditor, extensions, on_findings: Optional[Callable] = None,
                 ready_timeout: float = 10):
        super().__init__()
        self.auditor = auditor
        self.extensions = [ext.lower() for ext in extensions]
        self.on_findings = on_findings or print_findings
        self.ready_timeout = ready_timeout

    def _is_post(self, event) -> bool:
        path = Path(event.src_path)
        return not event.is_directory and path.suffix.lower() in self.extensions

    def audit_path(self, path: Path):
        logger.info(f"📄 Auditing {path.name}")

        if not wait_until_ready(path, timeout=self.ready_timeout):
            logger.warning(f"⚠️ File never stabilized: {path.name}")
            return None

        try:
            record = load_post(path)
        except PostLoadError as e:
            logger.error(f"❌ {e}")
            return None

        findings = self.auditor.audit_post(record)
        self.on_findings(path, findings)
        return findings

    def on_created(self, event):
        if self._is_post(event):
            self.audit_path(Path(event.src_path))

    def on_modified(self, event):
        if self._is_post(event):
            self.audit_path(Path(event.src_path))


def watch(root, settings: Dict[str, Any]) -> None:
    """Watch a posts directory and audit files as they change, until interrupted."""
    root = Path(root)
    if not root.is_dir():
        raise PostLoadError(root, "watch target must be a directory")

    auditor = PostAuditor(settings)
    event_handler = PostChangeHandler(auditor, settings["extensions"])
    observer = Observer()
    observer.schedule(event_handler, path=str(root), recursive=True)
    observer.start()
    logger.info(f"👀 Watching folder: {root}")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
        logger.info("👋 Stopped watching.")
    observer.join()
