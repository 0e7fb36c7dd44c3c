"""
模板缓存存储。

每个模板名对应一条不可变的 TemplateEntry：原文、派生结构、
加载时间与来源修改时间总是作为一个整体被替换，读者不会看到
新原文配旧结构的中间状态。

同名模板的并发重载通过“单飞”合并：同一时刻只有一个线程真正
读取来源，其余线程等待同一个 Future 并拿到同一条结果（或同一个异常）。
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set

from loguru import logger

from ..sources.base import SourceUnavailable, TemplateSource
from .structure_parser import COMPLETE_THRESHOLD, TemplateStructure, parse_structure
from .synonyms import SectionSynonyms

Clock = Callable[[], float]


@dataclass(frozen=True)
class TemplateEntry:
    """一次成功加载的模板快照。"""

    name: str
    source_ref: str
    raw_text: Any
    structure: TemplateStructure
    last_load_time: float
    last_known_mod_time: float


class TemplateStore:
    """
    模板缓存。

    只负责保存条目与执行重载；“要不要重载”由 FreshnessController 决定。
    """

    def __init__(
        self,
        source: TemplateSource,
        clock: Optional[Clock] = None,
        synonyms: Optional[SectionSynonyms] = None,
        complete_threshold: float = COMPLETE_THRESHOLD,
    ):
        self.source = source
        self.clock: Clock = clock or time.time
        self.synonyms = synonyms
        self.complete_threshold = complete_threshold
        self._lock = threading.Lock()
        self._entries: Dict[str, TemplateEntry] = {}
        self._inflight: Dict[str, Future] = {}
        self._loaded: Set[str] = set()

    # ======== 读取 ========

    def get(self, name: str) -> Optional[TemplateEntry]:
        with self._lock:
            return self._entries.get(name)

    def snapshot(self) -> Dict[str, TemplateEntry]:
        with self._lock:
            return dict(self._entries)

    def cached_names(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def loaded_names(self) -> List[str]:
        """曾经成功加载过的模板名（清缓存不会抹掉）"""
        with self._lock:
            return sorted(self._loaded)

    # ======== 重载 ========

    def reload(self, name: str, mod_time: float, seen: Optional[TemplateEntry] = None) -> TemplateEntry:
        """
        重新读取并解析模板，原子替换缓存条目。

        参数:
            name: 模板名。
            mod_time: 调用方做决策时拿到的来源修改时间。
            seen: 调用方做决策时看到的条目；若缓存已被其他线程
                替换为更新的条目，直接返回该条目而不再读取来源。

        返回:
            TemplateEntry: 重载后的条目。

        异常:
            SourceUnavailable: 来源读取失败，原有条目保持不变。
        """
        with self._lock:
            flight = self._inflight.get(name)
            leader = flight is None
            if leader:
                current = self._entries.get(name)
                if current is not None and current is not seen:
                    logger.debug(f"模板 {name} 已被并发请求刷新，直接复用")
                    return current
                flight = Future()
                self._inflight[name] = flight

        if not leader:
            logger.debug(f"模板 {name} 正在重载，等待同一次加载结果")
            return flight.result()

        try:
            entry = self._load(name, mod_time)
        except BaseException as exc:
            flight.set_exception(exc)
            raise
        else:
            flight.set_result(entry)
            return entry
        finally:
            with self._lock:
                self._inflight.pop(name, None)

    def _load(self, name: str, mod_time: float) -> TemplateEntry:
        try:
            source_ref = self.source.source_ref(name)
            raw_text = self.source.read(name)
        except SourceUnavailable:
            raise
        except Exception as exc:
            raise SourceUnavailable(name, f"Failed to read template {name}: {exc}", exc) from exc

        structure = parse_structure(
            raw_text,
            synonyms=self.synonyms,
            complete_threshold=self.complete_threshold,
        )
        entry = TemplateEntry(
            name=name,
            source_ref=source_ref,
            raw_text=raw_text,
            structure=structure,
            last_load_time=self.clock(),
            last_known_mod_time=mod_time,
        )
        with self._lock:
            self._entries[name] = entry
            self._loaded.add(name)

        length = len(raw_text) if isinstance(raw_text, str) else 0
        logger.info(
            f"模板 {name} 已加载 ({length} chars, {len(structure.sections)} sections, "
            f"completeness={structure.completeness_score:.2f})"
        )
        return entry

    # ======== 失效 ========

    def invalidate(self, name: Optional[str] = None) -> List[str]:
        """移除一个或全部条目，返回被移除的模板名"""
        with self._lock:
            if name is None:
                removed = list(self._entries)
                self._entries.clear()
            else:
                removed = [name] if self._entries.pop(name, None) is not None else []
        return removed


__all__ = ["TemplateEntry", "TemplateStore", "Clock"]
