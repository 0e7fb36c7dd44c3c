"""
提示词模板结构解析。

模板是“可选的 `---` 元数据块 + 以 `#` 标记标题的正文”。
这里把原文解析为 TemplateStructure：元数据、章节提纲、
需求引用以及四个标准章节的覆盖情况与完整度得分。

解析是全函数：任何输入都不会抛异常，无法识别的行直接跳过。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .synonyms import (
    BENEFITS,
    DEFAULT_SECTION_SYNONYMS,
    EVIDENCE,
    EXECUTIVE_SUMMARY,
    RISKS,
    SectionSynonyms,
)

METADATA_DELIMITER = "---"
REQUIREMENT_TOKEN = "_Requirements:"
COMPLETE_THRESHOLD = 0.75

heading_pattern = re.compile(r"^(?P<marker>#+)\s*(?P<title>.*)$")
requirement_pattern = re.compile(r"_Requirements?:\s*(?P<tag>.+)")
QUOTE_CHARS = ('"', "'")


@dataclass(frozen=True)
class Section:
    """模板中的一个标题行。"""

    level: int
    title: str
    line_number: int

    def to_dict(self) -> dict:
        return {"level": self.level, "title": self.title, "line": self.line_number}


@dataclass(frozen=True)
class TemplateStructure:
    """
    模板的派生结构，计算完成后不可变。

    valid 表示输入是非空文本（与是否识别出标题无关）。
    completeness_score 只由四个布尔标志推出，
    取值必然落在 {0, 0.25, 0.5, 0.75, 1.0} 之内。
    """

    metadata: Dict[str, str] = field(default_factory=dict)
    sections: Tuple[Section, ...] = ()
    requirement_tags: Tuple[str, ...] = ()
    valid: bool = False
    has_metadata: bool = False
    has_executive_summary: bool = False
    has_benefits: bool = False
    has_risks: bool = False
    has_evidence: bool = False
    complete_threshold: float = COMPLETE_THRESHOLD

    @property
    def completeness_score(self) -> float:
        flags = (self.has_executive_summary, self.has_benefits, self.has_risks, self.has_evidence)
        return sum(1 for flag in flags if flag) / len(flags)

    @property
    def is_complete(self) -> bool:
        return self.completeness_score >= self.complete_threshold

    def to_dict(self) -> dict:
        """序列化为接口层使用的驼峰字典。"""
        return {
            "valid": self.valid,
            "hasMetadata": self.has_metadata,
            "metadata": dict(self.metadata),
            "sections": [s.to_dict() for s in self.sections],
            "requirements": list(self.requirement_tags),
            "hasExecutiveSummary": self.has_executive_summary,
            "hasBenefits": self.has_benefits,
            "hasRisks": self.has_risks,
            "hasEvidence": self.has_evidence,
            "completenessScore": self.completeness_score,
            "isComplete": self.is_complete,
        }


def match_heading(line: str) -> Optional[Tuple[int, str]]:
    """
    判断一行是否为标题。

    去除首尾空白后以一个或多个 `#` 开头即视为标题，
    返回 (标记长度, 去掉标记后的标题)。
    """
    stripped = line.strip()
    if not stripped.startswith("#"):
        return None
    match = heading_pattern.match(stripped)
    if not match:
        return None
    return len(match.group("marker")), match.group("title").strip()


def iter_headings(text: str) -> Iterator[Tuple[int, str, int]]:
    """逐行产出 (level, title, line_number)，行号从1开始。"""
    for idx, line in enumerate((text or "").split("\n"), start=1):
        heading = match_heading(line)
        if heading:
            yield heading[0], heading[1], idx


def _unquote(value: str) -> str:
    """剥掉一层成对的引号。"""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARS:
        return value[1:-1]
    return value


def parse_structure(
    raw_text: Optional[str],
    synonyms: Optional[SectionSynonyms] = None,
    complete_threshold: float = COMPLETE_THRESHOLD,
) -> TemplateStructure:
    """
    把模板原文解析为 TemplateStructure。

    参数:
        raw_text: 模板全文；None 或非字符串按空文本处理。
        synonyms: 标准章节同义词表，缺省使用内置表。
        complete_threshold: 判定 is_complete 的得分下限。

    返回:
        TemplateStructure: 不可变的结构快照。
    """
    synonyms = synonyms or DEFAULT_SECTION_SYNONYMS
    if not isinstance(raw_text, str) or not raw_text:
        return TemplateStructure(complete_threshold=complete_threshold)

    metadata: Dict[str, str] = {}
    sections: List[Section] = []
    requirements: List[str] = []
    has_metadata = False
    in_metadata = False

    for idx, raw_line in enumerate(raw_text.split("\n")):
        line = raw_line.strip()

        if idx == 0 and line == METADATA_DELIMITER:
            in_metadata = True
            has_metadata = True
            continue

        if in_metadata:
            if line == METADATA_DELIMITER:
                in_metadata = False
                continue
            key, sep, value = line.partition(":")
            if sep and key.strip():
                metadata[key.strip()] = _unquote(value.strip())
            continue

        heading = match_heading(line)
        if heading:
            sections.append(Section(level=heading[0], title=heading[1], line_number=idx + 1))

        if REQUIREMENT_TOKEN in line:
            req_match = requirement_pattern.search(line)
            if req_match:
                requirements.append(req_match.group("tag").strip())

    titles = [s.title for s in sections]
    return TemplateStructure(
        valid=True,
        metadata=metadata,
        sections=tuple(sections),
        requirement_tags=tuple(requirements),
        has_metadata=has_metadata,
        has_executive_summary=synonyms.any_title_matches(titles, EXECUTIVE_SUMMARY),
        has_benefits=synonyms.any_title_matches(titles, BENEFITS),
        has_risks=synonyms.any_title_matches(titles, RISKS),
        has_evidence=synonyms.any_title_matches(titles, EVIDENCE),
        complete_threshold=complete_threshold,
    )


__all__ = [
    "Section",
    "TemplateStructure",
    "parse_structure",
    "match_heading",
    "iter_headings",
    "METADATA_DELIMITER",
    "REQUIREMENT_TOKEN",
    "COMPLETE_THRESHOLD",
]
