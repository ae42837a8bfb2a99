"""Registry mapping article fields to the AI routine that regenerates them."""

from typing import Awaitable, Callable, Iterator, Optional

from draftdesk.models.article import ArticleForm
from draftdesk.services.collaborators import AIGenerator
from draftdesk.services.exceptions import BufferInvariantError


FieldGenerator = Callable[[ArticleForm], Awaitable[Optional[str]]]


class GeneratorRegistry:
    """
    Explicit dispatch table for Regenerate.

    Each entry names the field it fills and the field its source text comes
    from; regeneration is skipped when that source is empty.

    Example:
        >>> registry = GeneratorRegistry()
        >>> registry.register("excerpt", lambda article: ai.generate_excerpt(article.content))
    """

    def __init__(self):
        self._generators: dict[str, tuple[FieldGenerator, str]] = {}

    def register(self, field: str, generator: FieldGenerator, source_field: str = "content") -> None:
        """
        Register (or replace) the generator for a field.

        Raises:
            BufferInvariantError: If either field is not part of the article schema
        """
        for name in (field, source_field):
            if not ArticleForm.has_field(name):
                raise BufferInvariantError(name)
        self._generators[field] = (generator, source_field)

    def get(self, field: str) -> Optional[FieldGenerator]:
        entry = self._generators.get(field)
        return entry[0] if entry else None

    def source_field(self, field: str) -> Optional[str]:
        entry = self._generators.get(field)
        return entry[1] if entry else None

    def __contains__(self, field: str) -> bool:
        return field in self._generators

    def __iter__(self) -> Iterator[str]:
        return iter(self._generators)

    def __len__(self) -> int:
        return len(self._generators)


def build_default_registry(ai: AIGenerator) -> GeneratorRegistry:
    """
    Registry for the fields the editor offers AI suggestions on.

    title and seo_title take the first title candidate; excerpt and
    seo_description use their dedicated intents.
    """
    async def first_title(article: ArticleForm) -> Optional[str]:
        titles = await ai.suggest_titles(article.content)
        return titles[0] if titles else None

    async def excerpt(article: ArticleForm) -> Optional[str]:
        return await ai.generate_excerpt(article.content)

    async def meta_description(article: ArticleForm) -> Optional[str]:
        return await ai.generate_meta_description(article.title, article.content)

    registry = GeneratorRegistry()
    registry.register("title", first_title)
    registry.register("seo_title", first_title)
    registry.register("excerpt", excerpt)
    registry.register("seo_description", meta_description)
    return registry
