"""
生成报告的章节结构校验。

只关心报告里的标题行：四个标准章节每命中一个加0.25分，
缺失的章节记为一条 issue。得分达到阈值（0.7）即视为结构合格。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .structure_parser import iter_headings
from .synonyms import CANONICAL_SECTIONS, DEFAULT_SECTION_SYNONYMS, SectionSynonyms

SECTION_WEIGHT = 0.25
VALIDITY_THRESHOLD = 0.7
EMPTY_REPORT_ISSUE = "Report content is empty"


@dataclass
class StructuralValidation:
    """单次结构校验结果，不做持久化。"""

    template_name: str
    score: float = 0.0
    matches: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    threshold: float = VALIDITY_THRESHOLD

    @property
    def valid(self) -> bool:
        return self.score >= self.threshold

    def to_dict(self) -> dict:
        return {
            "templateName": self.template_name,
            "valid": self.valid,
            "score": self.score,
            "matches": list(self.matches),
            "issues": list(self.issues),
        }


def extract_report_sections(report_text: str) -> List[str]:
    """提取报告中所有标题行的标题文本。"""
    return [title for _, title, _ in iter_headings(report_text)]


def validate_structure(
    report_text: Optional[str],
    template_name: str = "",
    required_sections: Sequence[str] = CANONICAL_SECTIONS,
    synonyms: Optional[SectionSynonyms] = None,
    threshold: float = VALIDITY_THRESHOLD,
) -> StructuralValidation:
    """
    按标准章节校验报告结构。

    参数:
        report_text: LLM生成的报告全文。
        template_name: 报告所用模板名，仅用于回填结果。
        required_sections: 需要出现的标准章节名。
        synonyms: 标准名到本地化写法的同义词表。
        threshold: 判定 valid 的得分下限。

    返回:
        StructuralValidation: 得分、命中列表与缺失列表。
    """
    synonyms = synonyms or DEFAULT_SECTION_SYNONYMS
    validation = StructuralValidation(template_name=template_name, threshold=threshold)

    if not report_text:
        validation.issues.append(EMPTY_REPORT_ISSUE)
        return validation

    titles = extract_report_sections(report_text)
    for required in required_sections:
        if synonyms.any_title_matches(titles, required):
            validation.matches.append(f"Required section found: {required}")
            validation.score += SECTION_WEIGHT
        else:
            validation.issues.append(f"Missing required section: {required}")

    return validation


__all__ = [
    "StructuralValidation",
    "validate_structure",
    "extract_report_sections",
    "SECTION_WEIGHT",
    "VALIDITY_THRESHOLD",
    "EMPTY_REPORT_ISSUE",
]
