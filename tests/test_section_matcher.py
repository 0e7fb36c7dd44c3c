"""
报告章节匹配测试。

运行测试：
    python -m pytest tests/test_section_matcher.py -v
"""

from TemplateEngine.core.section_matcher import (
    EMPTY_REPORT_ISSUE,
    extract_report_sections,
    validate_structure,
)
from TemplateEngine.core.synonyms import SectionSynonyms

FULL_REPORT = """# 投資分析レポート

## 1. Executive Summary（投資概要）
この投資案件は優れた収益性を示しています。FCR 5.2%、CCR 8.1%の実績があります。

## 2. Benefits（投資の優位性）
- 安定した賃料収入

## 3. Risks（潜在リスク）
- 金利上昇リスク

## 4. Evidence（定量的証拠）
- DCR: 1.35倍
"""

JAPANESE_ONLY_REPORT = """# 分析結果
## エグゼクティブサマリー
## 利点
## 注意事項
## エビデンス
"""


class TestValidateStructure:
    """测试validate_structure"""

    def test_all_sections_present(self):
        """四章齐全得满分"""
        result = validate_structure(FULL_REPORT, "jp_investment_4part")
        assert result.score == 1.0
        assert result.valid
        assert result.issues == []
        assert len(result.matches) == 4
        assert result.matches[0] == "Required section found: Executive Summary"

    def test_localized_titles(self):
        """纯日文标题通过同义词命中"""
        result = validate_structure(JAPANESE_ONLY_REPORT, "x")
        assert result.score == 1.0

    def test_missing_evidence(self):
        """缺少Evidence => 0.75、一条issue、仍然合格"""
        report = "## Executive Summary\n## Benefits\n## Risks\n本文"
        result = validate_structure(report, "jp_investment_4part")
        assert result.score == 0.75
        assert result.issues == ["Missing required section: Evidence"]
        assert result.valid

    def test_two_sections_not_valid(self):
        """2/4 => 0.5，不合格"""
        result = validate_structure("# 概要\n# リスク", "jp_investment_4part")
        assert result.score == 0.5
        assert not result.valid
        assert len(result.issues) == 2

    def test_empty_report(self):
        """空报告直接短路"""
        for name in ("jp_investment_4part", "unknown", ""):
            result = validate_structure("", name)
            assert result.score == 0
            assert not result.valid
            assert result.issues == [EMPTY_REPORT_ISSUE]
            assert result.template_name == name

    def test_none_report(self):
        result = validate_structure(None, "x")
        assert result.issues == [EMPTY_REPORT_ISSUE]

    def test_body_text_is_ignored(self):
        """只有标题行参与匹配"""
        report = "Executive Summary Benefits Risks Evidence\n# タイトル"
        result = validate_structure(report, "x")
        assert result.score == 0
        assert len(result.issues) == 4

    def test_custom_required_sections(self):
        """自定义章节与同义词"""
        synonyms = SectionSynonyms(table={"Conclusion": ["結論"]})
        result = validate_structure("## 結論", "x", required_sections=["Conclusion"], synonyms=synonyms)
        assert result.score == 0.25
        assert result.matches == ["Required section found: Conclusion"]

    def test_to_dict(self):
        data = validate_structure(FULL_REPORT, "jp_investment_4part").to_dict()
        assert data["templateName"] == "jp_investment_4part"
        assert data["valid"] is True
        assert data["score"] == 1.0


class TestExtractReportSections:
    """测试标题提取"""

    def test_indented_headings(self):
        assert extract_report_sections("  ## A \ntext\n#B") == ["A", "B"]
