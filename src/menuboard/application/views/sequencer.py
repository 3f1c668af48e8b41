from __future__ import annotations

import threading
from collections import defaultdict


class MutationSequencer:
    """Issues monotonic per-entity versions for outgoing mutations.

    A response may only be merged into local state while its version is still the
    latest one issued for the same entity key. Anything older has been superseded
    by a mutation sent after it and must be discarded.

    Keys that are never issued again (one per draft) should be released once their
    latest mutation resolves; keys that can be reissued must be kept, otherwise a
    restarted counter would let an older in-flight response pass as latest.
    """

    def __init__(self) -> None:
        self._latest: dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def issue(self, key: str) -> int:
        with self._lock:
            self._latest[key] += 1
            return self._latest[key]

    def is_latest(self, key: str, version: int) -> bool:
        with self._lock:
            return self._latest.get(key, 0) == version

    def release(self, key: str, version: int) -> None:
        with self._lock:
            if self._latest.get(key) == version:
                del self._latest[key]
