"""Shared test fixtures for all test modules."""

from typing import Any, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from draftdesk.models.article import ArticleForm
from draftdesk.models.sync import ConnectedPlatform, PublishOptions, SyncState
from draftdesk.services.ai_actions import LLMArticleGenerator


class FakeSaver:
    """Save collaborator that records what it was asked to store."""

    def __init__(self, article_id: str = "article-1", fail_with: Optional[Exception] = None):
        self.article_id = article_id
        self.fail_with = fail_with
        self.result_override: Any = ...
        self.saved: list[ArticleForm] = []
        self.published: list[ArticleForm] = []

    def _result(self, working: ArticleForm) -> Optional[dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        if self.result_override is not ...:
            return self.result_override
        return {"id": self.article_id, **working.model_dump()}

    async def save_draft(self, working: ArticleForm) -> Optional[dict[str, Any]]:
        self.saved.append(working)
        return self._result(working)

    async def save_and_publish(self, working: ArticleForm) -> Optional[dict[str, Any]]:
        self.published.append(working)
        return self._result(working)


class FakeSync:
    """Sync collaborator with a settable state and mocked publish calls."""

    def __init__(self, state: Optional[SyncState] = None):
        self.state = state or SyncState()
        self.connected_platforms = [
            ConnectedPlatform(platform="flowz", connected=True),
            ConnectedPlatform(platform="wordpress", connected=False),
        ]
        self.publish_now = AsyncMock(return_value=True)
        self.schedule_publish = AsyncMock(return_value=True)
        self.retry_sync = AsyncMock(return_value=True)


@pytest.fixture
def mock_ai():
    """AI generator mock; every intent is an AsyncMock returning a fixed suggestion."""
    ai = Mock(spec=LLMArticleGenerator)
    ai.generate_intro = AsyncMock(return_value="An intro.")
    ai.generate_conclusion = AsyncMock(return_value="A conclusion.")
    ai.suggest_titles = AsyncMock(return_value=["Suggested title", "Another title"])
    ai.generate_meta_description = AsyncMock(return_value="Suggested meta description")
    ai.generate_excerpt = AsyncMock(return_value="Suggested excerpt")
    return ai


@pytest.fixture
def stored_article():
    """Stored article record as returned by the storage layer."""
    return {
        "id": "article-1",
        "title": "Original title",
        "slug": "original-title",
        "content": "<p>Some article body text.</p>",
        "excerpt": "Original excerpt",
        "status": "draft",
        "tags": ["python"],
    }


@pytest.fixture
def fake_saver():
    return FakeSaver()


@pytest.fixture
def fake_sync():
    return FakeSync()


@pytest.fixture
def publish_options_factory():
    """Build PublishOptions without repeating the required fields."""
    def factory(**overrides):
        data = {"mode": "now", "platforms": ["flowz"]}
        data.update(overrides)
        return PublishOptions(**data)
    return factory
