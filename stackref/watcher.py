"""
File-based template watcher.

Monitors directories for template changes and re-runs analysis for the
affected document. Uses the watchdog library for file system monitoring.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from .log import Logger


class TemplateWatcher:
    """
    Watches directories for template changes and notifies callbacks.

    Events are debounced per file: rapid writes to the same file (editor
    save, atomic rename) produce a single ``on_change`` call after
    ``debounce_ms`` of quiet time. Removed files trigger ``on_delete``
    immediately and cancel any pending change for that file.

    Example:
        >>> watcher = TemplateWatcher(lg, [Path("stacks")], suffixes=[".yaml"])
        >>> watcher.configure(on_change=refresh, on_delete=forget).start()
        >>> watcher.stop()
    """

    def __init__(
        self,
        lg: Logger,
        roots: Iterable[Path],
        suffixes: Iterable[str] = (".yaml", ".yml", ".template"),
        recursive: bool = True,
    ) -> None:
        self._lg = lg
        self._roots = [Path(r).resolve() for r in roots]
        self._suffixes = tuple(suffixes)
        self._recursive = recursive
        self._debounce_ms = 300
        self._timers: dict[Path, threading.Timer] = {}
        self._lock = threading.RLock()
        self._observer: Any = None  # watchdog Observer
        self._running = False
        self._on_change: Callable[[Path], None] | None = None
        self._on_delete: Callable[[Path], None] | None = None

    def configure(
        self,
        on_change: Callable[[Path], None] | None = None,
        on_delete: Callable[[Path], None] | None = None,
        debounce_ms: int = 300,
    ) -> TemplateWatcher:
        """Set callbacks and debounce delay (fluent API)."""
        with self._lock:
            self._on_change = on_change
            self._on_delete = on_delete
            self._debounce_ms = debounce_ms
        return self

    def is_template(self, path: Path) -> bool:
        return path.suffix in self._suffixes

    def _create_handler(self) -> Any:  # pragma: no cover
        """Create watchdog event handler for template changes."""
        from watchdog.events import FileSystemEventHandler

        watcher = self

        class TemplateFileHandler(FileSystemEventHandler):  # type: ignore[misc]
            def on_modified(self, event: Any) -> None:
                if not event.is_directory:
                    watcher.file_changed(Path(event.src_path))

            def on_created(self, event: Any) -> None:
                if not event.is_directory:
                    watcher.file_changed(Path(event.src_path))

            def on_deleted(self, event: Any) -> None:
                if not event.is_directory:
                    watcher.file_deleted(Path(event.src_path))

            def on_moved(self, event: Any) -> None:
                if event.is_directory:
                    return
                watcher.file_deleted(Path(event.src_path))
                watcher.file_changed(Path(event.dest_path))

        return TemplateFileHandler()

    def start(self) -> None:
        """Start watching for file changes."""
        from watchdog.observers import Observer

        with self._lock:  # pragma: no cover
            if self._running:
                return
            self._observer = Observer()
            handler = self._create_handler()
            for root in self._roots:
                self._observer.schedule(handler, str(root), recursive=self._recursive)
            self._observer.start()
            self._running = True
            self._lg.debug(
                "watching templates", extra={"roots": len(self._roots)}
            )

    def stop(self) -> None:
        """Stop watching and cancel pending notifications."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            if self._observer is not None:  # pragma: no cover
                self._observer.stop()
                self._observer.join(timeout=2.0)
                self._observer = None
            self._running = False

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def file_changed(self, path: Path) -> None:
        """Schedule ``on_change`` for ``path`` with trailing-edge debounce."""
        if not self.is_template(path):
            return
        path = path.resolve()
        with self._lock:
            pending = self._timers.pop(path, None)
            if pending is not None:
                pending.cancel()
            timer = threading.Timer(
                self._debounce_ms / 1000.0, self._notify_change, args=(path,)
            )
            timer.daemon = True
            self._timers[path] = timer
            timer.start()

    def file_deleted(self, path: Path) -> None:
        """Notify ``on_delete`` for ``path`` and drop any pending change."""
        if not self.is_template(path):
            return
        path = path.resolve()
        with self._lock:
            pending = self._timers.pop(path, None)
            if pending is not None:
                pending.cancel()
            callback = self._on_delete
        if callback is not None:
            self._invoke(callback, path)

    def _notify_change(self, path: Path) -> None:
        with self._lock:
            self._timers.pop(path, None)
            callback = self._on_change
        if callback is not None:
            self._invoke(callback, path)

    def _invoke(self, callback: Callable[[Path], None], path: Path) -> None:
        try:
            callback(path)
        except Exception as e:
            self._lg.error(
                "watch callback failed", extra={"path": path, "exception": e}
            )

    def flush(self) -> None:
        """Run all pending change notifications now."""
        with self._lock:
            pending = list(self._timers.items())
            self._timers.clear()
        for path, timer in pending:
            timer.cancel()
            self._notify_change(path)
