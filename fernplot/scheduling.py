from __future__ import annotations

import itertools
from typing import Callable, Dict

FrameCallback = Callable[[], None]

class FrameScheduler:

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        due = list(self._pending)
        ran = 0
        for handle in due:
            # an earlier callback in this frame may have cancelled it
            callback = self._pending.pop(handle, None)
            if callback is None:
                continue
            callback()
            ran += 1
        return ran
