"""
模板校验编排器。

对报告生成流水线暴露两个入口：
1. apply_template：加载最新模板、校验模板自身并返回结果信封；
2. validate_generated_report：对LLM产出的报告做章节结构评分。

所有错误都在这里被转成结果值，不会越过编排器边界抛出。
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Sequence

from loguru import logger

from .core import (
    CANONICAL_SECTIONS,
    FreshnessController,
    SectionSynonyms,
    TemplateStore,
    validate_structure,
)
from .core.template_store import Clock
from .fallbacks import get_fallback_template
from .sources import FileSystemTemplateSource, SourceUnavailable, TemplateSource
from .state import ApplicationResult, ReportValidation, utc_now_iso
from .utils.config import Settings, settings as default_settings

INSTRUCTION_KEYWORDS = ("分析", "レポート", "投資")

placeholder_pattern = re.compile(r"\{\{\s*(?P<key>[A-Za-z_][A-Za-z0-9_.-]*)\s*\}\}")


class EmptyOrInvalidTemplate(ValueError):
    """加载到的模板为空或不是文本时抛出，仅在编排器内部使用。"""


def render_placeholders(template: str, user_data: Optional[Mapping[str, Any]]) -> str:
    """
    用用户数据替换 `{{ key }}` 占位符。

    user_data 中不存在的键保持原样，方便LLM层继续识别；
    user_data 不是映射（如JSON数组或字符串）时按无数据处理。
    """
    if not user_data or not isinstance(user_data, Mapping):
        return template

    def _replace(match: re.Match) -> str:
        key = match.group("key")
        if key in user_data:
            return str(user_data[key])
        return match.group(0)

    return placeholder_pattern.sub(_replace, template)


class ValidationOrchestrator:
    """
    模板校验编排器。

    说明：
        - apply_template 返回 ApplicationResult，失败时附带兜底模板
        - validate_generated_report 返回 ReportValidation
        - 质量阈值(0.7)与issue上限(2)彼此独立
    """

    def __init__(
        self,
        controller: FreshnessController,
        synonyms: Optional[SectionSynonyms] = None,
        required_sections: Sequence[str] = CANONICAL_SECTIONS,
        quality_threshold: float = 0.7,
        max_issues: int = 2,
    ):
        self.controller = controller
        self.synonyms = synonyms or controller.store.synonyms
        self.required_sections = tuple(required_sections)
        self.quality_threshold = quality_threshold
        self.max_issues = max_issues

    # ======== 模板应用 ========

    def validate_template(self, template: Any, template_name: str) -> list:
        """
        校验模板原文，返回警告列表。

        异常:
            EmptyOrInvalidTemplate: 模板不是字符串或内容为空。
        """
        if not isinstance(template, str):
            raise EmptyOrInvalidTemplate(f"Template {template_name} is not a valid string")
        if not template.strip():
            raise EmptyOrInvalidTemplate(f"Template {template_name} is empty")

        warnings = []
        if not any(keyword in template for keyword in INSTRUCTION_KEYWORDS):
            message = f"Template {template_name} may not contain proper instructions"
            logger.warning(message)
            warnings.append(message)
        return warnings

    def apply_template(self, template_name: str, user_data: Optional[Mapping[str, Any]] = None) -> ApplicationResult:
        """
        加载并校验模板。

        参数:
            template_name: 模板名。
            user_data: 用户输入，用于替换模板中的占位符。

        返回:
            ApplicationResult: 成功时包含模板原文、渲染结果与结构；
                失败时 success=False 并给出 error 与兜底模板。
        """
        result = ApplicationResult(template_name=template_name)
        logger.info(f"Applying template {template_name} with user data")
        try:
            entry = self.controller.load_entry(template_name)
            result.warnings.extend(self.validate_template(entry.raw_text, template_name))
            if user_data is not None and not isinstance(user_data, Mapping):
                message = f"User data for {template_name} is not a mapping; placeholders left unrendered"
                logger.warning(message)
                result.warnings.append(message)
            rendered = render_placeholders(entry.raw_text, user_data)
        except (SourceUnavailable, EmptyOrInvalidTemplate) as exc:
            logger.exception(f"Error applying template {template_name}: {exc}")
            result.error = str(exc)
            result.fallback_template = get_fallback_template(template_name)
            return result

        result.template = entry.raw_text
        result.rendered_template = rendered
        result.structure = entry.structure
        result.validated_at = utc_now_iso()
        result.success = True
        logger.info(f"Template {template_name} applied successfully")
        return result

    # ======== 报告校验 ========

    def validate_generated_report(self, report_text: Optional[str], template_name: str) -> ReportValidation:
        """
        校验LLM生成的报告结构。

        success 要求 quality_score >= 0.7 且 issues 不超过2条。
        """
        structure_validation = validate_structure(
            report_text,
            template_name=template_name,
            required_sections=self.required_sections,
            synonyms=self.synonyms,
        )
        quality_score = structure_validation.score
        validation = ReportValidation(
            template_name=template_name,
            structure_validation=structure_validation,
            report_length=len(report_text) if isinstance(report_text, str) else 0,
            quality_score=quality_score,
            success=quality_score >= self.quality_threshold
            and len(structure_validation.issues) <= self.max_issues,
        )
        if not validation.success:
            logger.warning(
                f"报告 {template_name} 结构校验未通过: score={quality_score:.2f}, "
                f"issues={structure_validation.issues}"
            )
        return validation

    # ======== 运维入口 ========

    def freshness(self, template_name: Optional[str] = None):
        return self.controller.freshness(template_name)

    def check_for_updates(self):
        return self.controller.check_for_updates()

    def clear_cache(self, template_name: Optional[str] = None):
        return self.controller.clear_cache(template_name)

    def status(self) -> Dict[str, object]:
        return self.controller.status()


def create_orchestrator(
    config: Optional[Settings] = None,
    source: Optional[TemplateSource] = None,
    clock: Optional[Clock] = None,
    ttl: Optional[float] = None,
) -> ValidationOrchestrator:
    """
    按配置组装来源、缓存、新鲜度控制与编排器。

    参数:
        config: 配置对象，缺省使用全局 settings。
        source: 模板来源，缺省按配置创建文件系统来源。
        clock: 时钟函数，测试中可注入可控时钟。
        ttl: 缓存TTL（秒），缺省取 TEMPLATE_CACHE_TTL。
    """
    config = config or default_settings
    synonyms = SectionSynonyms(extra=config.TEMPLATE_SECTION_SYNONYMS)
    source = source or FileSystemTemplateSource(config.TEMPLATE_DIR, config.TEMPLATE_FILES)
    store = TemplateStore(
        source,
        clock=clock,
        synonyms=synonyms,
        complete_threshold=config.TEMPLATE_COMPLETE_THRESHOLD,
    )
    controller = FreshnessController(store, ttl=config.TEMPLATE_CACHE_TTL if ttl is None else ttl)
    return ValidationOrchestrator(
        controller,
        synonyms=synonyms,
        quality_threshold=config.REPORT_QUALITY_THRESHOLD,
        max_issues=config.REPORT_MAX_ISSUES,
    )


__all__ = [
    "ValidationOrchestrator",
    "EmptyOrInvalidTemplate",
    "create_orchestrator",
    "render_placeholders",
    "INSTRUCTION_KEYWORDS",
]
