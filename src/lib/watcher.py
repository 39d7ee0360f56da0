"""
Polling watcher for document files

After every successful build the CLI re-arms a SourceWatcher with
LineView.all_sources(); `changed()` then tells it when to rebuild. The
watcher only compares modification times, polled at a fixed interval.
"""

import time
from pathlib import Path
from typing import Dict, Iterable, Optional

from .log import LOG


class SourceWatcher:
    """
    Detects modification of a set of files

    A file that disappears or reappears also counts as a change.
    """

    def __init__(self, paths: Iterable[Path], interval: Optional[float] = None) -> None:
        from ..config import appsettings

        self.interval = appsettings.watch_interval if interval is None else interval
        self.stamps: Dict[Path, Optional[int]] = {}
        self.rearm(paths)

    @staticmethod
    def stamp_get(path: Path) -> Optional[int]:
        try:
            return path.stat().st_mtime_ns
        except OSError:
            return None

    def rearm(self, paths: Iterable[Path]) -> None:
        """Watch exactly `paths`, starting from their current state"""
        self.stamps = {path: self.stamp_get(path) for path in paths}
        LOG(f"Watching {len(self.stamps)} files", level=2)

    def changed(self) -> bool:
        """Whether any watched file changed since the last rearm"""
        for path, stamp in self.stamps.items():
            if self.stamp_get(path) != stamp:
                LOG(f"Change detected in {path}", level=2)
                return True
        return False

    def wait(self) -> None:
        """Block until a watched file changes"""
        while not self.changed():
            time.sleep(self.interval)
