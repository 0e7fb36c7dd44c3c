"""
Template Engine核心工具集合。

包含模板结构解析、报告章节匹配、模板缓存与新鲜度控制四项能力。
"""

from .synonyms import CANONICAL_SECTIONS, DEFAULT_SYNONYMS, SectionSynonyms
from .structure_parser import Section, TemplateStructure, parse_structure
from .section_matcher import StructuralValidation, validate_structure
from .template_store import TemplateEntry, TemplateStore
from .freshness import FreshnessController, ReloadDecision

__all__ = [
    "CANONICAL_SECTIONS",
    "DEFAULT_SYNONYMS",
    "SectionSynonyms",
    "Section",
    "TemplateStructure",
    "parse_structure",
    "StructuralValidation",
    "validate_structure",
    "TemplateEntry",
    "TemplateStore",
    "FreshnessController",
    "ReloadDecision",
]
