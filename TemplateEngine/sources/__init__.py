"""
模板来源实现集合。

对外暴露抽象接口、文件系统实现与内存实现。
"""

from .base import SourceUnavailable, TemplateSource
from .filesystem import FileSystemTemplateSource
from .memory import InMemoryTemplateSource

__all__ = [
    "SourceUnavailable",
    "TemplateSource",
    "FileSystemTemplateSource",
    "InMemoryTemplateSource",
]
