"""AI generation collaborator backed by the LLM client.

Wraps LLMClient.stream_ndjson with the article-field prompts. Every intent
returns None when the model produced nothing usable; transport errors
propagate to the caller.
"""

from typing import Optional

from draftdesk.llm import prompts
from draftdesk.models.config import EditorConfig
from draftdesk.models.llm_chunks import SuggestionChunk
from draftdesk.services.llm_client import LLMClient
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)


def _clean(text: str) -> str:
    """Strip whitespace and quotes models like to wrap single answers in."""
    return text.strip().strip('"').strip("«»").strip()


class LLMArticleGenerator:
    """Implements the AIGenerator collaborator protocol over an LLM endpoint."""

    def __init__(self, llm_client: LLMClient, editor_config: Optional[EditorConfig] = None):
        self.llm_client = llm_client
        self.editor_config = editor_config or EditorConfig()

    async def _collect(self, intent: str, system_prompt: str, prompt: str, temperature: float) -> list[str]:
        texts = []
        async for chunk in self.llm_client.stream_ndjson(
            prompt=prompt,
            system_prompt=system_prompt,
            chunk_model=SuggestionChunk,
            temperature=temperature,
            request_id=intent,
        ):
            text = _clean(chunk.text)
            if text:
                texts.append(text)

        logger.info("ai_generation_completed", intent=intent, suggestion_count=len(texts))
        return texts

    async def _first(self, intent: str, system_prompt: str, prompt: str, temperature: float = 0.7) -> Optional[str]:
        texts = await self._collect(intent, system_prompt, prompt, temperature)
        return texts[0] if texts else None

    async def generate_intro(self, content: str) -> Optional[str]:
        system_prompt, prompt = prompts.build_intro_messages(content, self.editor_config.language)
        return await self._first("generate_intro", system_prompt, prompt)

    async def generate_conclusion(self, content: str) -> Optional[str]:
        system_prompt, prompt = prompts.build_conclusion_messages(content, self.editor_config.language)
        return await self._first("generate_conclusion", system_prompt, prompt)

    async def suggest_titles(self, content: str) -> Optional[list[str]]:
        """Return title candidates, best first, without duplicates."""
        count = self.editor_config.title_suggestion_count
        system_prompt, prompt = prompts.build_title_messages(content, count, self.editor_config.language)
        titles = await self._collect("suggest_titles", system_prompt, prompt, temperature=0.9)
        unique = list(dict.fromkeys(titles))[:count]
        return unique or None

    async def generate_meta_description(self, title: str, content: str) -> Optional[str]:
        system_prompt, prompt = prompts.build_meta_description_messages(
            title, content, self.editor_config.language
        )
        return await self._first("generate_meta_description", system_prompt, prompt, temperature=0.5)

    async def generate_excerpt(self, content: str) -> Optional[str]:
        system_prompt, prompt = prompts.build_excerpt_messages(content, self.editor_config.language)
        return await self._first("generate_excerpt", system_prompt, prompt, temperature=0.5)
