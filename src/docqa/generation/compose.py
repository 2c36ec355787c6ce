"""
Answer composition from ranked chunks.

The final stage of the query pipeline: take the question + ranked chunks
and produce the answer text.

Two composers share the BaseComposer interface:
    - TemplateComposer fills a fixed paragraph with the number of sources
      and their relevance range. No model call, no API key.
    - LLMComposer numbers the chunks as context and asks a chat model to
      answer from them.

Both return NO_RELEVANT_INFORMATION when nothing was retrieved, without
calling anything, and both time themselves.

Usage:
    from docqa.generation.compose import get_composer

    composer = get_composer(config.generation)
    result = composer.compose("What is RAG?", retrieval)
    print(result.answer)
"""

import time

import structlog
from langchain_core.prompts import PromptTemplate

from docqa.base.retriever import BaseComposer
from docqa.config import GenerationConfig, LLMConfig
from docqa.models.result import GenerationResult, RetrievalResult
from docqa.utils.helpers import get_llm

logger = structlog.get_logger(__name__)

NO_RELEVANT_INFORMATION = (
    "I couldn't find relevant information in your documents to answer this "
    "question. Please make sure your documents contain information related "
    "to your query."
)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class TemplateComposer(BaseComposer):
    """
    Fills a fixed explanatory paragraph from the retrieval result.

    Stands in for a model call: the answer says how many sections matched
    and the lowest/highest relevance as whole percentages, but does not
    read the chunk text itself.
    """

    model_name = "template"

    def __init__(self):
        self._prompt = PromptTemplate(
            input_variables=["query", "count", "low", "high"],
            template=(
                'Based on your uploaded documents, here\'s what I found regarding "{query}":\n\n'
                "The information from your documents indicates that this topic is covered "
                "across {count} relevant sections. The key insights from your documents "
                "suggest comprehensive coverage of the subject matter.\n\n"
                "The documents provide detailed explanations and practical examples that "
                "directly address your question. This information appears to be particularly "
                "relevant based on the content analysis of your uploaded materials.\n\n"
                "The sources show strong relevance to your inquiry, with relevance scores "
                "ranging from {low}% to {high}%."
            ),
        )

    def compose(self, query: str, retrieval: RetrievalResult) -> GenerationResult:
        started = time.perf_counter()

        if not retrieval.chunks:
            answer = NO_RELEVANT_INFORMATION
        else:
            scores = [c.score for c in retrieval.chunks]
            answer = self._prompt.format(
                query=query,
                count=len(scores),
                low=round(min(scores) * 100),
                high=round(max(scores) * 100),
            )

        return GenerationResult(
            answer=answer,
            model=self.model_name,
            elapsed_ms=_elapsed_ms(started),
        )


class LLMComposer(BaseComposer):
    """
    Grounded answer from a chat model.

    How it works:
        1. Numbers the ranked chunks as context, tagged with their document
        2. Builds a prompt: "Given this context, answer the question"
        3. Calls the LLM and returns a GenerationResult

    Model errors propagate; the query pipeline reports them as a failed
    query rather than returning a half-made answer.
    """

    def __init__(self, llm_config: LLMConfig = None):
        config = llm_config or LLMConfig()
        self._llm = get_llm(config)
        self._model_name = f"{config.provider.value}/{config.model_name}"

        self._prompt = PromptTemplate(
            input_variables=["context", "query"],
            template=(
                "Answer the question based on the following excerpts from the "
                "user's documents.\n\n"
                "Context:\n{context}\n\n"
                "Question: {query}\n\n"
                "Instructions:\n"
                "- Base your answer on the provided context.\n"
                "- If the context doesn't contain enough information, say so.\n"
                "- Be concise and accurate.\n"
                "- Cite which context pieces you used (by number).\n\n"
                "Answer:"
            ),
        )

    def compose(self, query: str, retrieval: RetrievalResult) -> GenerationResult:
        started = time.perf_counter()

        if not retrieval.chunks:
            return GenerationResult(
                answer=NO_RELEVANT_INFORMATION,
                model=self._model_name,
                elapsed_ms=_elapsed_ms(started),
            )

        # Numbering lets the LLM cite specific pieces: "According to [1]..."
        context = "\n\n".join(
            f"[{i}] ({c.document_name}) {c.chunk.content}"
            for i, c in enumerate(retrieval.chunks, 1)
        )

        chain = self._prompt | self._llm
        response = chain.invoke({"context": context, "query": query})

        # LangChain chat models return AIMessage objects: extract the text
        answer = response.content if hasattr(response, "content") else str(response)

        elapsed = _elapsed_ms(started)
        logger.info("llm_answer_composed", model=self._model_name, elapsed_ms=round(elapsed, 1))

        return GenerationResult(answer=answer, model=self._model_name, elapsed_ms=elapsed)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def get_composer(config: GenerationConfig = None) -> BaseComposer:
    """
    Factory that returns the composer named by config.strategy.

    Raises:
        ValueError: If the strategy is not recognized.
    """
    config = config or GenerationConfig()
    strategy = config.strategy.lower()

    if strategy == "template":
        return TemplateComposer()

    elif strategy == "llm":
        return LLMComposer(config.llm)

    else:
        raise ValueError(
            f"Unknown answer composer: '{config.strategy}'. "
            f"Supported: 'template', 'llm'."
        )
