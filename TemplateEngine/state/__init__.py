"""
Template Engine状态与结果模块。

导出各类结果信封，供编排器与Flask接口共享。
"""

from .state import (
    ApplicationResult,
    FreshnessInfo,
    ReportValidation,
    UpdateStatus,
    to_iso,
    utc_now_iso,
)

__all__ = [
    "ApplicationResult",
    "FreshnessInfo",
    "ReportValidation",
    "UpdateStatus",
    "to_iso",
    "utc_now_iso",
]
