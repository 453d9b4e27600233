"""进程内 API 调用计数：总次数 + 当前统计窗口次数，定时输出并清零窗口。"""

from __future__ import annotations

import threading
from typing import Callable, Optional


class RequestCounter:
    """Thread-safe counter with an explicit start/stop lifecycle for the reset tick."""

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0
        self._window = 0
        self._stop_flag: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def increment(self) -> None:
        with self._lock:
            self._total += 1
            self._window += 1

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def window(self) -> int:
        with self._lock:
            return self._window

    def reset_window(self) -> int:
        """清零窗口计数，返回清零前的值。"""
        with self._lock:
            count, self._window = self._window, 0
            return count

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._window = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval: float, on_tick: Callable[[int], None]) -> None:
        """每 interval 秒调用一次 on_tick(窗口计数) 并清零窗口；重复 start 不会开多个线程。"""
        if interval <= 0 or self.running:
            return
        stop_flag = threading.Event()

        def run():
            while not stop_flag.wait(interval):
                on_tick(self.reset_window())

        self._stop_flag = stop_flag
        self._thread = threading.Thread(target=run, name="request-counter", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._stop_flag is not None:
            self._stop_flag.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
        self._stop_flag = None
        self._thread = None
