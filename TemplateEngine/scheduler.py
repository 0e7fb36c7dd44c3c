"""
模板更新定时巡检。

后台守护线程按固定间隔调用 check_for_updates，与请求流量无关。
单次巡检出错只记录日志，不会终止循环。
"""

from __future__ import annotations

import threading
from typing import Dict, Optional

from loguru import logger

from .core.freshness import FreshnessController
from .state import UpdateStatus


class UpdateSweeper:
    """周期性执行模板更新巡检的后台线程。"""

    def __init__(self, controller: FreshnessController, interval: float):
        self.controller = controller
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.last_result: Dict[str, UpdateStatus] = {}

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> Dict[str, UpdateStatus]:
        self.last_result = self.controller.check_for_updates()
        return self.last_result

    def _loop(self):
        logger.info(f"模板更新巡检线程已启动，间隔 {self.interval}s")
        while not self._stop_event.wait(self.interval):
            try:
                self.run_once()
            except Exception as exc:
                logger.exception(f"模板更新巡检失败: {exc}")
        logger.info("模板更新巡检线程已停止")

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="template-update-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


__all__ = ["UpdateSweeper"]
