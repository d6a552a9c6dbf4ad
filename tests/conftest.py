from typing import Any, Callable, List

import pytest


class VirtualCall:
    def __init__(self, due_ms: int, callback: Callable[[], Any]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """
    IScheduler driven by a manual clock. Nothing fires until advance() is called.
    """
    def __init__(self):
        self.now_ms = 0
        self._calls: List[VirtualCall] = []

    def schedule_after(self, delay_ms: int, callback: Callable[[], Any]) -> VirtualCall:
        call = VirtualCall(self.now_ms + delay_ms, callback)
        self._calls.append(call)
        return call

    @property
    def pending(self) -> List[VirtualCall]:
        return [c for c in self._calls if not c.cancelled]

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [c for c in self.pending if c.due_ms <= target]
            if not due:
                break
            call = min(due, key=lambda c: c.due_ms)
            self._calls.remove(call)
            self.now_ms = call.due_ms
            call.callback()
        self.now_ms = target


@pytest.fixture
def scheduler():
    return VirtualScheduler()
