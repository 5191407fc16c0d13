"""Watchdog handler that turns events for one file into queue items."""
import os
from dataclasses import dataclass
from enum import Enum

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)


class EventKind(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    OTHER = "other"


@dataclass(frozen=True)
class ChangeEvent:
    kind: EventKind
    path: str


@dataclass(frozen=True)
class WatchError:
    detail: str


class ScriptFileHandler(FileSystemEventHandler):
    """Forwards events for a single file to ``enqueue``.

    The parent directory is what gets scheduled, so events for sibling files
    are dropped here. An editor saving through a rename shows up as a move onto
    the watched path and is reported as a create.
    """

    def __init__(self, file_path, enqueue):
        super().__init__()
        self.file_path = os.path.abspath(file_path)
        self._enqueue = enqueue

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory:
            return

        try:
            change = self._classify(event)
        except Exception as e:
            self._enqueue(WatchError(f"Malformed event {event!r}: {e}"))
            return

        if change is not None:
            self._enqueue(change)

    def _classify(self, event: FileSystemEvent):
        src_path = _to_str(event.src_path)

        if event.event_type == EVENT_TYPE_MOVED:
            dest_path = _to_str(getattr(event, "dest_path", ""))
            if dest_path and self._is_target(dest_path):
                return ChangeEvent(EventKind.CREATED, dest_path)
            if self._is_target(src_path):
                return ChangeEvent(EventKind.OTHER, src_path)
            return None

        if not self._is_target(src_path):
            return None

        if event.event_type == EVENT_TYPE_MODIFIED:
            return ChangeEvent(EventKind.MODIFIED, src_path)
        if event.event_type == EVENT_TYPE_CREATED:
            return ChangeEvent(EventKind.CREATED, src_path)
        return ChangeEvent(EventKind.OTHER, src_path)

    def _is_target(self, path: str) -> bool:
        return os.path.abspath(path) == self.file_path


def _to_str(path) -> str:
    if isinstance(path, bytes):
        return os.fsdecode(path)
    return str(path)
