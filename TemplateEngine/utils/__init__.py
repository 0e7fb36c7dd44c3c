"""
Template Engine工具模块。

暴露配置读取与日志落盘两项通用能力。
"""

from TemplateEngine.utils.config import Settings, settings
from TemplateEngine.utils.logging_setup import configure_logging, reset_logging

__all__ = ["Settings", "settings", "configure_logging", "reset_logging"]
