"""Integration tests for a full article editing workflow."""

import pytest

from draftdesk.models.sync import SyncLog, SyncState
from draftdesk.services.edit_session import EditSession


def seo_ready_body() -> str:
    return "<h2>Why it matters</h2><p>" + " ".join(["insight"] * 320) + "</p>"


class TestEditWorkflow:
    """End-to-end editing sessions with fake collaborators."""

    @pytest.mark.asyncio
    async def test_regenerate_accept_save_cycle(self, stored_article, mock_ai, fake_saver):
        """Test proposals flow through accept into a save and a clean state."""
        mock_ai.generate_meta_description.return_value = "d" * 140

        async with EditSession(
            article=stored_article,
            article_id=stored_article["id"],
            ai=mock_ai,
            saver=fake_saver,
        ) as session:
            session.set_field("content", seo_ready_body())
            session.set_field("seo_title", "A complete guide to editing long form articles")
            score_before = session.seo_score

            await session.draft_actions.handle_regenerate_field("seo_description")
            await session.draft_actions.handle_regenerate_field("excerpt")
            assert session.remaining_proposals == ("seo_description", "excerpt")

            # Drafts do not count towards the score until accepted
            assert session.seo_score == score_before

            await session.draft_actions.handle_accept_field("seo_description")
            await session.draft_actions.handle_reject_field("excerpt")

            assert session.seo_score == 100
            assert session.remaining_proposals == ()
            assert session.dirty_fields.changed_fields == ("content", "seo_title", "seo_description")

            assert await session.handle_save() is True

            assert session.dirty_fields.content_status == "synced"
            assert fake_saver.saved[-1].seo_description == "d" * 140
            assert fake_saver.saved[-1].excerpt == stored_article["excerpt"]

    @pytest.mark.asyncio
    async def test_accept_each_field_in_any_order(self, stored_article, mock_ai):
        """Test accepting every proposal empties the list and updates working."""
        async with EditSession(article=stored_article, ai=mock_ai) as session:
            for field in ("title", "seo_title", "excerpt", "seo_description"):
                await session.draft_actions.handle_regenerate_field(field)

            for field in ("excerpt", "title", "seo_description", "seo_title"):
                await session.draft_actions.handle_accept_field(field)

            assert session.remaining_proposals == ()
            assert session.content_buffer.draft_by_field == {}
            assert session.working.title == "Suggested title"
            assert session.working.seo_title == "Suggested title"
            assert session.working.excerpt == "Suggested excerpt"
            assert session.working.seo_description == "Suggested meta description"

    @pytest.mark.asyncio
    async def test_new_article_publish_flow(self, mock_ai, fake_saver, fake_sync):
        """Test a new article gets an id on save and reports sync status."""
        fake_saver.article_id = "created-1"

        async with EditSession(ai=mock_ai, saver=fake_saver, sync=fake_sync) as session:
            session.set_field("title", "Brand new article")
            session.generate_slug_from_title()
            assert session.article_sync.sync_status == "draft"

            assert await session.handle_save(publish=True) is True
            assert session.article_id == "created-1"

            fake_sync.state = SyncState(
                article_status="published",
                sync_logs=(SyncLog(platform="flowz", status="synced"),),
            )
            assert session.article_sync.sync_status == "synced"
            assert session.article_sync.is_published

            await session.article_sync.publish_now(["wordpress"])
            fake_sync.publish_now.assert_awaited_once_with(["wordpress"])

        assert fake_saver.published[-1].slug == "brand-new-article"

    @pytest.mark.asyncio
    async def test_remote_conflict_then_resolution(self, stored_article, fake_saver):
        """Test a remote change to an edited field is flagged until acknowledged."""
        async with EditSession(article=stored_article, article_id="article-1", saver=fake_saver) as session:
            session.refetch_original(stored_article)
            session.set_field("title", "Local rewrite")

            remote = dict(stored_article, title="Remote rewrite")
            snapshot = session.refetch_original(remote)

            assert snapshot.content_status == "conflict"
            assert session.dirty_fields.conflict_fields == ("title",)

            session.acknowledge_remote()
            assert session.dirty_fields.content_status == "modified"

            await session.handle_save()
            assert session.dirty_fields.content_status == "synced"
