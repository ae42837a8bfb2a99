"""Prompt templates for article field generation.

All generation intents share one output contract: NDJSON lines of the form
{"text": "..."}, which the LLM client parses into SuggestionChunk models.
"""

from textwrap import dedent


LANGUAGE_NAMES = {
    "fr": "French",
    "en": "English",
    "es": "Spanish",
    "de": "German",
}

OUTPUT_FORMAT = dedent("""
    OUTPUT FORMAT:
    Respond with NDJSON only: one JSON object per line, no prose, no code fences.
    Each line must look like: {"text": "<your suggestion>"}
""").strip()


def _system_prompt(task: str, language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, "French")
    return dedent(f"""
        You are an editorial assistant for a blog and e-commerce content team.

        {task}

        Write in {language_name}. Never invent facts that are not supported by the article.
        Plain text only: no HTML tags, no Markdown, no surrounding quotes.
    """).strip() + "\n\n" + OUTPUT_FORMAT


def _article_block(content: str, title: str | None = None) -> str:
    parts = []
    if title:
        parts.append(f"<title>{title}</title>")
    parts.append(f"<article>\n{content}\n</article>")
    return "\n".join(parts)


def build_title_messages(content: str, count: int, language: str = "fr") -> tuple[str, str]:
    """Build (system_prompt, prompt) asking for ``count`` title candidates, best first."""
    system_prompt = _system_prompt(
        f"Suggest {count} distinct titles for the article. "
        "Each title should be 30 to 60 characters long and contain the article's main topic. "
        "Output the strongest title first, one JSON line per title.",
        language,
    )
    return system_prompt, _article_block(content)


def build_meta_description_messages(title: str, content: str, language: str = "fr") -> tuple[str, str]:
    """Build (system_prompt, prompt) for a search-result meta description."""
    system_prompt = _system_prompt(
        "Write one meta description for search results. "
        "It must be 120 to 160 characters long, summarise the article's value "
        "and invite the reader to click. Output exactly one JSON line.",
        language,
    )
    return system_prompt, _article_block(content, title)


def build_excerpt_messages(content: str, language: str = "fr") -> tuple[str, str]:
    """Build (system_prompt, prompt) for a listing excerpt."""
    system_prompt = _system_prompt(
        "Write one excerpt of at most 300 characters that summarises the article "
        "for blog listings. Output exactly one JSON line.",
        language,
    )
    return system_prompt, _article_block(content)


def build_intro_messages(content: str, language: str = "fr") -> tuple[str, str]:
    """Build (system_prompt, prompt) for an introduction paragraph."""
    system_prompt = _system_prompt(
        "Write one engaging introduction paragraph (2 to 4 sentences) that leads "
        "into the article below. Output exactly one JSON line.",
        language,
    )
    return system_prompt, _article_block(content)


def build_conclusion_messages(content: str, language: str = "fr") -> tuple[str, str]:
    """Build (system_prompt, prompt) for a closing paragraph."""
    system_prompt = _system_prompt(
        "Write one concluding paragraph (2 to 4 sentences) that wraps up the "
        "article below and ends with a light call to action. Output exactly one JSON line.",
        language,
    )
    return system_prompt, _article_block(content)
