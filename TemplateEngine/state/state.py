"""
Template Engine结果信封。

模板应用、报告校验、新鲜度诊断与更新巡检的返回值都在这里定义，
均为一次性结果，不做持久化。to_dict 输出驼峰键，直接用于接口层JSON。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.section_matcher import StructuralValidation
from ..core.structure_parser import TemplateStructure


def utc_now_iso() -> str:
    """当前UTC时间的ISO字符串"""
    return datetime.now(timezone.utc).isoformat()


def to_iso(timestamp: Optional[float]) -> Optional[str]:
    """POSIX秒转ISO字符串，None原样返回"""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


@dataclass
class ApplicationResult:
    """
    单次模板应用结果。

    success=False 时 error 说明原因，fallback_template 提供可直接
    交给LLM层的内置骨架模板。
    """

    template_name: str
    timestamp: str = field(default_factory=utc_now_iso)
    success: bool = False
    template: Optional[str] = None
    rendered_template: Optional[str] = None
    structure: Optional[TemplateStructure] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    fallback_template: Optional[str] = None
    validated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        validation = None
        if self.structure is not None:
            validation = {
                "templateStructure": self.structure.to_dict(),
                "isValid": self.success,
                "timestamp": self.validated_at,
            }
        return {
            "templateName": self.template_name,
            "timestamp": self.timestamp,
            "success": self.success,
            "template": self.template,
            "renderedTemplate": self.rendered_template,
            "validation": validation,
            "error": self.error,
            "warnings": list(self.warnings),
            "fallbackTemplate": self.fallback_template,
        }


@dataclass
class ReportValidation:
    """
    生成报告的质量校验结果。

    success 需要同时满足：得分达到质量阈值、issue数量不超过上限。
    """

    template_name: str
    structure_validation: StructuralValidation
    report_length: int = 0
    quality_score: float = 0.0
    success: bool = False
    error: Optional[str] = None
    timestamp: str = field(default_factory=utc_now_iso)

    @property
    def issues(self) -> List[str]:
        return self.structure_validation.issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateName": self.template_name,
            "timestamp": self.timestamp,
            "reportLength": self.report_length,
            "structureValidation": self.structure_validation.to_dict(),
            "qualityScore": self.quality_score,
            "issues": list(self.issues),
            "success": self.success,
            "error": self.error,
        }


@dataclass
class FreshnessInfo:
    """缓存新鲜度诊断（只看TTL，不看文件修改时间）"""

    template_name: str
    is_cached: bool
    last_load_time: Optional[float]
    modification_time: Optional[float]
    cache_age: Optional[float]
    is_expired: bool
    needs_reload: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateName": self.template_name,
            "isCached": self.is_cached,
            "lastLoadTime": to_iso(self.last_load_time),
            "modificationTime": to_iso(self.modification_time),
            "cacheAge": self.cache_age,
            "isExpired": self.is_expired,
            "needsReload": self.needs_reload,
        }


@dataclass
class UpdateStatus:
    """单个模板在一次更新巡检中的状态"""

    template_name: str
    has_update: bool = False
    current_mod_time: Optional[float] = None
    cached_mod_time: Optional[float] = None
    reloaded: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateName": self.template_name,
            "hasUpdate": self.has_update,
            "currentModTime": to_iso(self.current_mod_time),
            "cachedModTime": to_iso(self.cached_mod_time),
            "reloaded": self.reloaded,
            "error": self.error,
        }
