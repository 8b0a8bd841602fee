from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import AppConfig
from .file_discovery import has_accepted_extension
from .trigger import DebouncedScanTrigger

if TYPE_CHECKING:  # pragma: no cover
    from .scanner import Scanner


LOGGER = logging.getLogger(__name__)


class _LibraryChangeHandler(FileSystemEventHandler):
    def __init__(self, notify: Callable[[str], None], extensions: Sequence[str]) -> None:
        self._notify = notify
        self._extensions = list(extensions)
        self.suppressed = False

    def on_created(self, event) -> None:  # type: ignore[override]
        if getattr(event, "is_directory", False):
            return
        self._emit("created", Path(event.src_path))

    def on_modified(self, event) -> None:  # type: ignore[override]
        if getattr(event, "is_directory", False):
            return
        self._emit("modified", Path(event.src_path))

    def on_moved(self, event) -> None:  # type: ignore[override]
        if getattr(event, "is_directory", False):
            return
        self._emit("moved", Path(event.dest_path))

    def on_deleted(self, event) -> None:  # type: ignore[override]
        if getattr(event, "is_directory", False):
            return
        self._emit("deleted", Path(event.src_path))

    def _emit(self, kind: str, path: Path) -> None:
        if self.suppressed:
            return
        if self._extensions and not has_accepted_extension(path.name, self._extensions):
            return
        self._notify(f"{kind}: {path}")


class LibraryWatcher:
    """Watches library directories and feeds changes to a debounced scan trigger."""

    def __init__(self, scanner: Scanner, config: AppConfig) -> None:
        self._scanner = scanner
        self._config = config
        settings = config.settings
        extensions = list(settings.video_extensions) + list(config.scan.extensions)
        self.trigger = DebouncedScanTrigger(self._run_guarded, delay=settings.file_watcher.debounce_seconds)
        self._handler = _LibraryChangeHandler(self.trigger.notify, extensions)
        self._observer = Observer()
        self._roots = self._resolve_roots()
        for root in self._roots:
            self._observer.schedule(self._handler, str(root), recursive=True)

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        if not self._roots:
            LOGGER.warning("Filesystem watcher has no existing library directories to monitor.")
        stop = stop_event or threading.Event()
        self._observer.start()
        LOGGER.info("Filesystem watcher monitoring: %s", ", ".join(str(path) for path in self._roots) or "(nothing)")
        try:
            while not stop.wait(timeout=1.0):
                pass
        finally:
            self.trigger.shutdown()
            self._observer.stop()
            self._observer.join(timeout=5)

    def _run_guarded(self) -> None:
        """Run a live scan with event suppression so the scan's own writes do not re-trigger it."""
        self._handler.suppressed = True
        try:
            self._scanner.run(dry_run=False)
        finally:
            self._handler.suppressed = False

    def _resolve_roots(self) -> list[Path]:
        settings = self._config.settings
        raw_roots = settings.file_watcher.paths or [str(path) for path in settings.library_dirs]
        resolved: list[Path] = []
        for raw in raw_roots:
            try:
                path = Path(raw).expanduser()
            except RuntimeError:
                path = Path(raw)
            if not path.is_dir():
                LOGGER.warning("Filesystem watcher skipping missing directory: %s", path)
                continue
            resolved.append(path)
        return resolved


__all__ = ["LibraryWatcher"]
