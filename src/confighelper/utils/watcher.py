import time
from pathlib import Path
from typing import Callable, Optional
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

class ConfigChangeHandler(FileSystemEventHandler):
    """
    Listens for saves of the configuration file and triggers a callback.
    """
    def __init__(self, target_file: str, callback: Callable[[str], None], debounce_seconds: float = 0.5):
        self.target_file = str(Path(target_file).resolve())
        self.callback = callback
        self.last_triggered = 0.0
        self.debounce_seconds = debounce_seconds # Editors often write twice per save

    def _matches(self, path) -> bool:
        if isinstance(path, bytes):
            path = path.decode()
        return str(Path(path).resolve()) == self.target_file

    def _trigger(self):
        now = time.time()
        if now - self.last_triggered > self.debounce_seconds:
            self.last_triggered = now
            self.callback(self.target_file)

    def on_modified(self, event):
        if event.is_directory:
            return
        if self._matches(event.src_path):
            self._trigger()

    def on_moved(self, event):
        # Atomic saves write a temp file and rename it over the config
        if event.is_directory:
            return
        if self._matches(event.dest_path):
            self._trigger()

class FileWatcher:
    """
    Watches a single configuration file on a background observer thread.

    Only one file is watched at a time. ``stop_watching`` leaves the watcher
    reusable: a fresh observer is created on the next ``start_watching``.
    """
    def __init__(self):
        self.observer: Optional[Observer] = None
        self.watched_file: Optional[Path] = None

    @property
    def is_watching(self) -> bool:
        return self.observer is not None and self.observer.is_alive()

    def start_watching(self, file_path: str, callback: Callable[[str], None], debounce_seconds: float = 0.5):
        """
        Calls ``callback`` with the resolved path each time the config file
        is saved. The parent directory is watched so that saves which
        replace the file by rename are seen too.
        """
        path = Path(file_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"Cannot watch non-existent file: {file_path}")
        if self.is_watching:
            raise RuntimeError(f"Already watching {self.watched_file}")

        handler = ConfigChangeHandler(str(path), callback, debounce_seconds)
        self.observer = Observer()
        self.observer.schedule(handler, str(path.parent), recursive=False)
        self.observer.start()
        self.watched_file = path

    def stop_watching(self):
        if self.is_watching:
            self.observer.stop()
            self.observer.join()
        self.observer = None
        self.watched_file = None
