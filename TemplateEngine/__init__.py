"""
Template Engine。

报告生成流水线中的提示词模板新鲜度与报告结构校验引擎：
保证缓存中的模板始终反映最新文件，并对LLM生成的报告按标准章节评分。
"""

from .orchestrator import ValidationOrchestrator, create_orchestrator

__version__ = "1.0.0"
__author__ = "Report Engine Team"

__all__ = ["ValidationOrchestrator", "create_orchestrator"]
