"""
标准章节与同义词表。

每份生成报告都应包含四个标准章节。章节标题的判定基于子串匹配，
因此这里用“标准名 -> 可接受子串列表”的表结构承载本地化写法，
新增语种或别名时只需扩充表，不必改动匹配逻辑。
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

EXECUTIVE_SUMMARY = "Executive Summary"
BENEFITS = "Benefits"
RISKS = "Risks"
EVIDENCE = "Evidence"

CANONICAL_SECTIONS: Tuple[str, ...] = (EXECUTIVE_SUMMARY, BENEFITS, RISKS, EVIDENCE)

DEFAULT_SYNONYMS: Dict[str, List[str]] = {
    EXECUTIVE_SUMMARY: ["概要", "エグゼクティブサマリー", "投資概要", "サマリー", "サマリ"],
    BENEFITS: ["優位性", "メリット", "利点", "投資の優位性"],
    RISKS: ["リスク", "潜在リスク", "リスク分析", "注意事項"],
    EVIDENCE: ["証拠", "定量的証拠", "データ", "エビデンス"],
}


class SectionSynonyms:
    """
    标准章节同义词表。

    matches() 只做大小写无关的子串判断：标题中出现标准名本身
    或任一同义词即视为命中。
    """

    def __init__(
        self,
        table: Optional[Mapping[str, Sequence[str]]] = None,
        extra: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        base = DEFAULT_SYNONYMS if table is None else table
        self._table: Dict[str, List[str]] = {name: list(aliases) for name, aliases in base.items()}
        for name, aliases in (extra or {}).items():
            bucket = self._table.setdefault(name, [])
            for alias in aliases:
                if alias not in bucket:
                    bucket.append(alias)

    def aliases(self, canonical: str) -> List[str]:
        """返回标准名及其全部同义词，标准名排在首位。"""
        return [canonical] + [a for a in self._table.get(canonical, []) if a != canonical]

    def matches(self, title: str, canonical: str) -> bool:
        lowered = title.casefold()
        return any(alias.casefold() in lowered for alias in self.aliases(canonical) if alias)

    def any_title_matches(self, titles: Iterable[str], canonical: str) -> bool:
        return any(self.matches(title, canonical) for title in titles)

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(aliases) for name, aliases in self._table.items()}


DEFAULT_SECTION_SYNONYMS = SectionSynonyms()

__all__ = [
    "EXECUTIVE_SUMMARY",
    "BENEFITS",
    "RISKS",
    "EVIDENCE",
    "CANONICAL_SECTIONS",
    "DEFAULT_SYNONYMS",
    "DEFAULT_SECTION_SYNONYMS",
    "SectionSynonyms",
]
