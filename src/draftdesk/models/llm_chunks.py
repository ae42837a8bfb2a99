"""Pydantic models for LLM NDJSON streaming chunks."""

from pydantic import BaseModel, Field
from typing import Literal


class SuggestionChunk(BaseModel):
    """
    NDJSON chunk for a generated article field suggestion.

    Each line is one candidate text. Single-answer intents (excerpt, meta
    description, intro, conclusion) stream one line; title suggestions stream
    one line per candidate, best first.
    """

    type: Literal["suggestion"] = Field(
        default="suggestion",
        description="Chunk type identifier"
    )

    text: str = Field(
        ...,
        description="Suggested text for the field"
    )
