"""
内存模板来源。

用于用户自定义提示词以及测试：模板原文与修改时间都由调用方写入，
并统计每个模板被读取的次数。
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .base import SourceUnavailable, TemplateSource


class InMemoryTemplateSource(TemplateSource):
    """以字典保存 (原文, 修改时间) 的模板来源。"""

    def __init__(self, templates: Optional[Dict[str, Tuple[str, float]]] = None):
        self._lock = threading.Lock()
        self._templates: Dict[str, Tuple[str, float]] = dict(templates or {})
        self.read_counts: Counter = Counter()
        self.mod_time_counts: Counter = Counter()

    def put(self, name: str, text: str, mod_time: float) -> None:
        with self._lock:
            self._templates[name] = (text, mod_time)

    def touch(self, name: str, mod_time: float) -> None:
        """只更新修改时间，模拟文件被重新保存"""
        with self._lock:
            text, _ = self._lookup(name)
            self._templates[name] = (text, mod_time)

    def remove(self, name: str) -> None:
        with self._lock:
            self._templates.pop(name, None)

    def _lookup(self, name: str) -> Tuple[str, float]:
        try:
            return self._templates[name]
        except KeyError:
            raise SourceUnavailable(name, f"No template file defined for: {name}") from None

    def names(self) -> List[str]:
        with self._lock:
            return list(self._templates)

    def source_ref(self, name: str) -> str:
        return f"memory://{name}"

    def mod_time(self, name: str) -> float:
        with self._lock:
            self.mod_time_counts[name] += 1
            return self._lookup(name)[1]

    def read(self, name: str) -> str:
        with self._lock:
            self.read_counts[name] += 1
            return self._lookup(name)[0]
