"""
模板新鲜度控制。

每次 load 都重新计算是否需要重载：
- 来源修改时间比缓存记录的更新（文件被改过）；
- 缓存年龄超过TTL；
- 尚未缓存。
三者任一成立即重载，否则直接返回缓存。TTL与文件都未变化时，
连续调用 load 的结果完全一致且不会读取来源。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from loguru import logger

from ..sources.base import SourceUnavailable
from ..state.state import FreshnessInfo, UpdateStatus, to_iso
from .structure_parser import TemplateStructure
from .template_store import TemplateEntry, TemplateStore

DEFAULT_CACHE_TTL = 30.0


@dataclass(frozen=True)
class ReloadDecision:
    """单次 load 的重载判定"""

    file_modified: bool
    cache_expired: bool
    not_cached: bool

    @property
    def should_reload(self) -> bool:
        return self.file_modified or self.cache_expired or self.not_cached

    def reason(self) -> str:
        if self.not_cached:
            return "not cached"
        if self.file_modified:
            return "source modified"
        if self.cache_expired:
            return "cache expired"
        return "fresh"


class FreshnessController:
    """
    缓存编排器。

    负责重载判定、新鲜度诊断、定时更新巡检与缓存清理。
    """

    def __init__(self, store: TemplateStore, ttl: float = DEFAULT_CACHE_TTL):
        self.store = store
        self.ttl = ttl

    @property
    def source(self):
        return self.store.source

    def known_names(self) -> List[str]:
        """来源声明的模板名 + 当前缓存中的模板名（保持顺序去重）"""
        names: List[str] = []
        for name in list(self.source.names()) + self.store.cached_names():
            if name not in names:
                names.append(name)
        return names

    # ======== 加载 ========

    def _current_mod_time(self, name: str) -> float:
        try:
            return self.source.mod_time(name)
        except SourceUnavailable:
            raise
        except Exception as exc:
            raise SourceUnavailable(name, f"Cannot get modification time for {name}: {exc}", exc) from exc

    def decide(self, entry: Optional[TemplateEntry], current_mod_time: float, now: float) -> ReloadDecision:
        exists = entry is not None
        return ReloadDecision(
            file_modified=exists and current_mod_time > entry.last_known_mod_time,
            cache_expired=not exists or (now - entry.last_load_time) > self.ttl,
            not_cached=not exists,
        )

    def load_entry(self, name: str) -> TemplateEntry:
        """
        加载模板条目（带缓存）。

        异常:
            SourceUnavailable: 来源不可用；已有缓存条目不会被改动。
        """
        current_mod_time = self._current_mod_time(name)
        entry = self.store.get(name)
        decision = self.decide(entry, current_mod_time, self.store.clock())

        if decision.should_reload:
            logger.info(f"重新加载模板 {name}: {decision.reason()}")
            return self.store.reload(name, current_mod_time, seen=entry)

        logger.debug(f"使用缓存模板: {name}")
        return entry

    def load(self, name: str) -> TemplateStructure:
        return self.load_entry(name).structure

    # ======== 诊断 ========

    def _freshness_of(self, name: str, now: float) -> FreshnessInfo:
        entry = self.store.get(name)
        if entry is None:
            return FreshnessInfo(
                template_name=name,
                is_cached=False,
                last_load_time=None,
                modification_time=None,
                cache_age=None,
                is_expired=True,
                needs_reload=True,
            )
        cache_age = now - entry.last_load_time
        is_expired = cache_age > self.ttl
        return FreshnessInfo(
            template_name=name,
            is_cached=True,
            last_load_time=entry.last_load_time,
            modification_time=entry.last_known_mod_time,
            cache_age=cache_age,
            is_expired=is_expired,
            needs_reload=is_expired,
        )

    def freshness(self, name: Optional[str] = None) -> Union[FreshnessInfo, Dict[str, FreshnessInfo]]:
        """
        读取缓存新鲜度，不触发任何来源I/O。

        传入 name 时返回单个 FreshnessInfo，否则返回全部已知模板的字典。
        """
        now = self.store.clock()
        if name is not None:
            return self._freshness_of(name, now)
        return {n: self._freshness_of(n, now) for n in self.known_names()}

    def status(self) -> Dict[str, object]:
        snapshot = self.store.snapshot()
        return {
            "loadedTemplates": self.store.loaded_names(),
            "cachedTemplates": list(snapshot),
            "cacheTimeout": self.ttl,
            "lastLoadTimes": {name: to_iso(e.last_load_time) for name, e in snapshot.items()},
        }

    # ======== 巡检与清理 ========

    def check_for_updates(self) -> Dict[str, UpdateStatus]:
        """
        遍历全部已知模板，对比来源修改时间，有更新则立即重载。

        单个模板失败只记录在该模板的状态里，巡检继续进行。
        """
        statuses: Dict[str, UpdateStatus] = {}
        for name in self.known_names():
            status = UpdateStatus(template_name=name)
            try:
                current_mod_time = self._current_mod_time(name)
                entry = self.store.get(name)
                cached_mod_time = entry.last_known_mod_time if entry else None
                status.current_mod_time = current_mod_time
                status.cached_mod_time = cached_mod_time
                status.has_update = cached_mod_time is None or current_mod_time > cached_mod_time
                if status.has_update:
                    self.load_entry(name)
                    status.reloaded = True
            except SourceUnavailable as exc:
                logger.warning(f"模板 {name} 更新检查失败: {exc}")
                status.has_update = False
                status.error = str(exc)
            statuses[name] = status

        reloaded = [n for n, s in statuses.items() if s.reloaded]
        if reloaded:
            logger.info(f"模板更新巡检完成，已重载: {reloaded}")
        return statuses

    def clear_cache(self, name: Optional[str] = None) -> List[str]:
        removed = self.store.invalidate(name)
        if name is not None:
            logger.info(f"Cache cleared for template: {name}")
        else:
            logger.info("All template cache cleared")
        return removed

    def reload_all(self) -> Dict[str, Union[bool, str]]:
        """清空缓存后逐个加载全部模板，返回 模板名 -> True 或错误信息"""
        logger.info("Reloading all templates...")
        self.clear_cache()
        results: Dict[str, Union[bool, str]] = {}
        for name in self.source.names():
            try:
                self.load_entry(name)
                results[name] = True
            except SourceUnavailable as exc:
                logger.error(f"模板 {name} 重载失败: {exc}")
                results[name] = str(exc)
        return results


__all__ = ["FreshnessController", "ReloadDecision", "DEFAULT_CACHE_TTL"]
