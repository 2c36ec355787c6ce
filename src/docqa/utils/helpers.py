"""
Shared utility functions.

Helpers used across docqa — LLM factory, text cleaning, excerpts.
"""

from langchain_core.language_models.chat_models import BaseChatModel

from docqa.config import LLMConfig, LLMProvider

ELLIPSIS = "..."


def get_llm(config: LLMConfig) -> BaseChatModel:
    """
    Factory that returns a LangChain chat model based on config.

    Lazy imports so you only need the package for the provider you
    actually use (pip install docqa[openai] or docqa[anthropic]).

    Args:
        config: LLMConfig with provider, model_name, temperature, max_tokens.

    Returns:
        A LangChain BaseChatModel instance.
    """
    if config.provider == LLMProvider.OPENAI:
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=config.model_name,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    elif config.provider == LLMProvider.ANTHROPIC:
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=config.model_name,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    else:
        raise ValueError(
            f"Unknown LLM provider: '{config.provider}'. "
            f"Supported: 'openai', 'anthropic'."
        )


def replace_t_with_space(documents: list) -> list:
    """
    Replace tab characters with spaces in document content.

    PDF and DOCX extraction often leaves stray tabs from table cells
    and indented layouts.
    """
    for doc in documents:
        doc.page_content = doc.page_content.replace("\t", " ")
    return documents


def truncate_excerpt(text: str, limit: int) -> str:
    """Cut text to at most limit characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS
