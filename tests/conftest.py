"""
测试公共夹具。

提供可控时钟、内存模板来源以及基于二者组装的编排器。
"""

import pytest

from TemplateEngine.core import FreshnessController, TemplateStore
from TemplateEngine.orchestrator import ValidationOrchestrator
from TemplateEngine.sources import InMemoryTemplateSource

BASE_TIME = 1_700_000_000.0

INVESTMENT_TEMPLATE = """---
title: "機関投資家レベル不動産投資分析レポート"
version: '1.0'
aiOptimized: true
---

# 投資分析レポート作成指示書

## 1. Executive Summary（投資概要）
投資案件の全体像を要約してください。

## 2. Benefits（投資の優位性）
この物件がもたらす財務的メリットを分析してください。

## 3. Risks（潜在リスクの分析）
多角的にリスクを分析してください。

## 4. Evidence（定量的証拠）
投資判断の裏付けとなる定量的データをリストアップしてください。
_Requirements: 1.1, 2.3
"""

TAX_TEMPLATE = """---
title: "税務戦略レポート"
---

# 税務戦略レポート作成指示書

## 1. 戦略サマリー
減税メカニズムの核心を要約してください。

## 2. 減税メカニズムの詳細解説
減価償却による所得控除の仕組みを説明してください。

## 3. リスク分析と対策
税務リスクとその対策を分析してください。
"""


class ManualClock:
    """手动推进的时钟"""

    def __init__(self, start: float = BASE_TIME):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def memory_source():
    return InMemoryTemplateSource({
        "jp_investment_4part": (INVESTMENT_TEMPLATE, BASE_TIME - 60),
        "jp_tax_strategy": (TAX_TEMPLATE, BASE_TIME - 70),
    })


@pytest.fixture
def store(memory_source, clock):
    return TemplateStore(memory_source, clock=clock)


@pytest.fixture
def controller(store):
    return FreshnessController(store, ttl=30.0)


@pytest.fixture
def orchestrator(controller):
    return ValidationOrchestrator(controller)
