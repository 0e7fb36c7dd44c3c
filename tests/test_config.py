"""
配置测试。

运行测试：
    python -m pytest tests/test_config.py -v
"""

from TemplateEngine.core.synonyms import SectionSynonyms
from TemplateEngine.orchestrator import create_orchestrator
from TemplateEngine.sources import InMemoryTemplateSource
from TemplateEngine.utils.config import DEFAULT_TEMPLATE_FILES, Settings


class TestSettings:
    """测试Settings"""

    def test_defaults(self, monkeypatch):
        for key in ("TEMPLATE_CACHE_TTL", "TEMPLATE_DIR", "REPORT_MAX_ISSUES"):
            monkeypatch.delenv(key, raising=False)
        config = Settings(_env_file=None)
        assert config.TEMPLATE_CACHE_TTL == 30.0
        assert config.TEMPLATE_FILES == DEFAULT_TEMPLATE_FILES
        assert config.TEMPLATE_COMPLETE_THRESHOLD == 0.75
        assert config.REPORT_QUALITY_THRESHOLD == 0.7
        assert config.REPORT_MAX_ISSUES == 2

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_CACHE_TTL", "5")
        monkeypatch.setenv("TEMPLATE_SECTION_SYNONYMS", '{"Benefits": ["Advantages"]}')
        config = Settings(_env_file=None)
        assert config.TEMPLATE_CACHE_TTL == 5.0
        assert config.TEMPLATE_SECTION_SYNONYMS == {"Benefits": ["Advantages"]}

    def test_factory_applies_settings(self):
        config = Settings(
            _env_file=None,
            TEMPLATE_CACHE_TTL=5,
            REPORT_MAX_ISSUES=1,
            TEMPLATE_SECTION_SYNONYMS={"Benefits": ["Advantages"]},
        )
        source = InMemoryTemplateSource({"t": ("# 分析\n## Advantages", 1.0)})
        engine = create_orchestrator(config, source=source)

        assert engine.controller.ttl == 5
        assert engine.max_issues == 1
        assert engine.controller.load("t").has_benefits


class TestSectionSynonyms:
    def test_extra_aliases_are_merged(self):
        synonyms = SectionSynonyms(extra={"Benefits": ["Advantages", "メリット"], "Appendix": ["付録"]})
        assert synonyms.aliases("Benefits").count("メリット") == 1
        assert "Advantages" in synonyms.aliases("Benefits")
        assert synonyms.matches("付録A", "Appendix")
        assert synonyms.aliases("Unknown") == ["Unknown"]


class TestLoggingSetup:
    """测试日志落盘配置"""

    def test_file_sink_is_added_once(self, tmp_path):
        from loguru import logger

        from TemplateEngine.utils.logging_setup import configure_logging, reset_logging

        log_file = tmp_path / "logs" / "engine.log"
        reset_logging()
        try:
            first = configure_logging(str(log_file), level="debug")
            second = configure_logging(str(tmp_path / "other.log"))
            logger.info("template sink check")
        finally:
            reset_logging()

        assert first == second
        assert "template sink check" in log_file.read_text(encoding="utf-8")
        assert not (tmp_path / "other.log").exists()
