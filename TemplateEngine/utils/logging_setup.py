"""
loguru 日志落盘配置。

进程内只挂载一次文件sink，重复调用直接返回已有的handler id。
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import settings

_sink_lock = threading.Lock()
_file_sink_id: Optional[int] = None


def configure_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> int:
    """
    为模板引擎挂载文件日志。

    参数:
        log_file: 日志路径，缺省取 settings.LOG_FILE。
        level: 日志级别，缺省取 settings.LOG_LEVEL。

    返回:
        int: loguru handler id。
    """
    global _file_sink_id
    with _sink_lock:
        if _file_sink_id is not None:
            return _file_sink_id

        path = Path(log_file or settings.LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        _file_sink_id = logger.add(
            str(path),
            level=(level or settings.LOG_LEVEL).upper(),
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            enqueue=False,
        )
        logger.info(f"Template Engine 日志已写入: {path}")
        return _file_sink_id


def reset_logging() -> None:
    """移除本模块挂载的文件sink（测试与重新初始化使用）。"""
    global _file_sink_id
    with _sink_lock:
        if _file_sink_id is None:
            return
        try:
            logger.remove(_file_sink_id)
        except ValueError:
            logger.debug("文件sink已被外部移除")
        _file_sink_id = None


__all__ = ["configure_logging", "reset_logging"]
