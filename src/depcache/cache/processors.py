import logging
import threading
from pathlib import Path
from typing import Dict, FrozenSet

from ..archive import ArchiveInspector
from ..dependency import ExternalDependency

logger = logging.getLogger(__name__)


class ProcessorTable:
    """
    Memo of the annotation processors each dependency declares.

    Lookups for the same dependency are coalesced behind one per-key lock,
    so concurrent callers trigger a single extraction and all observe its
    result. Lookups for different dependencies never wait on each other.
    A failed extraction is not memoized; the next caller retries it.
    """

    def __init__(self, inspector: ArchiveInspector):
        self.inspector = inspector
        self._memo: Dict[ExternalDependency, FrozenSet[str]] = {}
        self._locks: Dict[ExternalDependency, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, dep: ExternalDependency) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(dep)
            if lock is None:
                lock = self._locks[dep] = threading.Lock()
            return lock

    def get(self, dep: ExternalDependency, jar: Path) -> FrozenSet[str]:
        """
        Processor classes declared by a dependency.

        Args:
            dep: Key of the memo entry
            jar: Cached copy of the dependency to read on a miss

        Returns:
            FrozenSet[str]: Fully-qualified processor class names
        """
        processors = self._memo.get(dep)
        if processors is not None:
            return processors

        with self._lock_for(dep):
            processors = self._memo.get(dep)
            if processors is None:
                logger.debug(f"Reading annotation processors of {dep} from {jar}")
                processors = self.inspector.read_annotation_processors(jar)
                self._memo[dep] = processors
            return processors

    def __len__(self) -> int:
        return len(self._memo)
