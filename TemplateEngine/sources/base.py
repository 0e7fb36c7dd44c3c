"""
模板来源接口。

模板引擎本身不关心模板存在哪里，只通过 TemplateSource
读取“原文 + 修改时间”。任何读取失败统一抛出 SourceUnavailable。
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class SourceUnavailable(ValueError):
    """模板来源读取失败（未定义、文件缺失、无法解码等）时抛出。"""

    def __init__(self, template_name: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.template_name = template_name
        self.cause = cause


class TemplateSource(ABC):
    """
    模板来源基类。

    子类需提供模板名枚举、修改时间与原文读取三项能力。
    """

    @abstractmethod
    def names(self) -> List[str]:
        """返回该来源已知的全部模板名"""

    @abstractmethod
    def source_ref(self, name: str) -> str:
        """返回模板的定位信息（路径或URI），仅用于日志与诊断"""

    @abstractmethod
    def mod_time(self, name: str) -> float:
        """返回模板当前的修改时间（POSIX秒）"""

    @abstractmethod
    def read(self, name: str) -> str:
        """读取模板原文"""

    def knows(self, name: str) -> bool:
        return name in self.names()
