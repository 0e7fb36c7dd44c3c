"""
Template Engine 配置。

沿用宿主报告引擎的 pydantic_settings 风格：字段全部大写，
优先读取同名环境变量，其次读取 `.env`，最后回落到默认值。
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATE_FILES: Dict[str, str] = {
    "jp_investment_4part": "jp_investment_4part.md",
    "jp_tax_strategy": "jp_tax_strategy.md",
    "jp_inheritance_strategy": "jp_inheritance_strategy.md",
    "comparison_analysis": "comparison_analysis.md",
}


class Settings(BaseSettings):
    """
    模板引擎的全部可调参数。

    阈值类常量（0.75 / 0.7 / 2）保持各自独立，不做合并。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    TEMPLATE_DIR: str = "PROMPTS"
    TEMPLATE_FILES: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TEMPLATE_FILES))
    TEMPLATE_CACHE_TTL: float = 30.0
    TEMPLATE_UPDATE_INTERVAL: float = 60.0
    TEMPLATE_SECTION_SYNONYMS: Dict[str, List[str]] = Field(default_factory=dict)

    TEMPLATE_COMPLETE_THRESHOLD: float = 0.75
    REPORT_QUALITY_THRESHOLD: float = 0.7
    REPORT_MAX_ISSUES: int = 2

    LOG_FILE: str = "logs/template_engine.log"
    LOG_LEVEL: str = "INFO"


settings = Settings()

__all__ = ["Settings", "settings", "DEFAULT_TEMPLATE_FILES"]
