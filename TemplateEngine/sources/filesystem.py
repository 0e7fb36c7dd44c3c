"""
本地文件系统模板来源。

按 `模板名 -> 相对文件名` 映射在模板目录中定位 Markdown 文件。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from ..utils.config import settings
from .base import SourceUnavailable, TemplateSource


class FileSystemTemplateSource(TemplateSource):
    """
    从 TEMPLATE_DIR 读取提示词模板。

    模板名必须出现在映射中；映射值为 None 的条目（如用户自定义提示词）
    视为“没有对应文件”。
    """

    def __init__(
        self,
        template_dir: Optional[str] = None,
        template_files: Optional[Dict[str, Optional[str]]] = None,
    ):
        self.template_dir = Path(template_dir or settings.TEMPLATE_DIR)
        self.template_files: Dict[str, Optional[str]] = dict(
            settings.TEMPLATE_FILES if template_files is None else template_files
        )
        if not self.template_dir.exists():
            logger.warning(f"模板目录不存在: {self.template_dir}")

    def names(self) -> List[str]:
        return [name for name, filename in self.template_files.items() if filename]

    def _path(self, name: str) -> Path:
        filename = self.template_files.get(name)
        if not filename:
            raise SourceUnavailable(name, f"No template file defined for: {name}")
        return self.template_dir / filename

    def source_ref(self, name: str) -> str:
        return str(self._path(name))

    def mod_time(self, name: str) -> float:
        path = self._path(name)
        try:
            return os.stat(path).st_mtime
        except OSError as exc:
            raise SourceUnavailable(name, f"Cannot stat template {name} ({path}): {exc}", exc) from exc

    def read(self, name: str) -> str:
        path = self._path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(name, f"Failed to read template {name} ({path}): {exc}", exc) from exc
