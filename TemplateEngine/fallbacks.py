"""
内置兜底模板。

模板无法加载或未通过校验时，编排器把这里的骨架模板随结果一并返回，
上层可以选择用它继续调用LLM。
"""

FALLBACK_TEMPLATES = {
    "jp_investment_4part": """# 投資分析レポート

## 概要
投資機会の詳細な分析を行います。

## 分析項目
1. 財務分析
2. リスク評価
3. 市場分析
4. 推奨事項

提供された情報を基に、包括的な投資分析レポートを作成してください。""",
    "jp_inheritance_strategy": """# 相続対策戦略レポート

## 概要
相続対策の包括的な戦略を提案します。

## 分析項目
1. 現在の資産状況
2. 相続税試算
3. 対策提案
4. 実行計画

提供された情報を基に、効果的な相続対策戦略を提案してください。""",
    "jp_tax_strategy": """# 税務戦略レポート

## 概要
税務最適化の戦略を提案します。

## 分析項目
1. 現在の税務状況
2. 節税機会の特定
3. 戦略提案
4. 実行計画

提供された情報を基に、効果的な税務戦略を提案してください。""",
    "comparison_analysis": """# 比較分析レポート

## 概要
複数の選択肢を比較分析します。

## 分析項目
1. 各選択肢の特徴
2. 比較評価
3. 優劣分析
4. 推奨事項

提供された情報を基に、詳細な比較分析を行ってください。""",
}


def get_fallback_template(template_name: str) -> str:
    """返回指定模板的兜底骨架；未知模板名使用通用骨架。"""
    fallback = FALLBACK_TEMPLATES.get(template_name)
    if fallback is None:
        fallback = f"# {template_name} レポート\n\n提供された情報を基に、詳細な分析レポートを作成してください。"
    return fallback


__all__ = ["FALLBACK_TEMPLATES", "get_fallback_template"]
