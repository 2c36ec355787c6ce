"""Tests for utility helpers."""

from unittest.mock import MagicMock, patch

import pytest
import structlog
from langchain_core.documents import Document as PageDocument

from docqa.config import LLMConfig, LoggingConfig
from docqa.utils.helpers import ELLIPSIS, get_llm, replace_t_with_space, truncate_excerpt
from docqa.utils.logging import configure_logging


class TestGetLLM:

    def test_openai_provider(self):
        """Should instantiate ChatOpenAI for openai provider."""
        fake_module = MagicMock()
        with patch.dict("sys.modules", {"langchain_openai": fake_module}):
            result = get_llm(LLMConfig(provider="openai", model_name="gpt-4"))

        fake_module.ChatOpenAI.assert_called_once_with(
            model="gpt-4", temperature=0.0, max_tokens=2000,
        )
        assert result is fake_module.ChatOpenAI.return_value

    def test_anthropic_provider(self):
        """Should instantiate ChatAnthropic for anthropic provider."""
        fake_module = MagicMock()
        with patch.dict("sys.modules", {"langchain_anthropic": fake_module}):
            get_llm(LLMConfig(provider="anthropic", model_name="claude-sonnet-4-5-20250929"))

        fake_module.ChatAnthropic.assert_called_once_with(
            model="claude-sonnet-4-5-20250929", temperature=0.0, max_tokens=2000,
        )

    def test_unknown_provider_raises(self):
        """Unknown provider should raise ValueError."""
        config = LLMConfig()
        config.provider = "unsupported"
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_llm(config)


class TestReplaceTabsWithSpace:

    def test_replaces_tabs(self):
        docs = [
            PageDocument(page_content="hello\tworld", metadata={}),
            PageDocument(page_content="no\ttabs\there", metadata={}),
        ]
        result = replace_t_with_space(docs)

        assert result[0].page_content == "hello world"
        assert result[1].page_content == "no tabs here"

    def test_returns_same_list(self):
        """Should modify in-place and return the same list."""
        docs = [PageDocument(page_content="a\tb", metadata={})]
        assert replace_t_with_space(docs) is docs

    def test_empty_list(self):
        assert replace_t_with_space([]) == []


class TestTruncateExcerpt:

    def test_short_text_unchanged(self):
        assert truncate_excerpt("The sky is blue.", 200) == "The sky is blue."

    def test_exact_limit_unchanged(self):
        text = "x" * 200
        assert truncate_excerpt(text, 200) == text

    def test_long_text_cut_and_marked(self):
        text = "y" * 201
        result = truncate_excerpt(text, 200)
        assert result == "y" * 200 + ELLIPSIS
        assert len(result) == 203


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def _reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_json_output(self):
        configure_logging(LoggingConfig(level="DEBUG", json_output=True))

        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_console_output(self):
        configure_logging(LoggingConfig(level="warning"))
        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)
