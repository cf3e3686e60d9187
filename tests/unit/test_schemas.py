"""Tests for request schemas, text normalization and timestamps."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.schemas.base import format_utc
from app.schemas.comment import CommentCreate
from app.schemas.post import PostCreate, PostUpdate
from app.schemas.report import ReportCreate
from app.utils.text import normalize_tags
from app.utils.timestamps import utc_now


@pytest.mark.unit
class TestNormalizeTags:
    def test_lowercases_trims_and_dedupes(self) -> None:
        assert normalize_tags([" Python", "python", "", "FastAPI", "  "]) == ["python", "fastapi"]

    def test_keeps_first_seen_order(self) -> None:
        assert normalize_tags(["b", "a", "B"]) == ["b", "a"]

    def test_none_and_empty(self) -> None:
        assert normalize_tags(None) == []
        assert normalize_tags([]) == []


@pytest.mark.unit
class TestPostSchemas:
    def test_post_create_normalizes(self) -> None:
        data = PostCreate(
            title="  Midterm tips  ",
            content=" Share yours ",
            category_id=1,
            tags=["Exams", "exams", " STUDY "],
        )

        assert data.title == "Midterm tips"
        assert data.content == "Share yours"
        assert data.tags == ["exams", "study"]

    def test_post_create_requires_title(self) -> None:
        with pytest.raises(PydanticValidationError):
            PostCreate(title="", content="x", category_id=1)

    def test_whitespace_title_is_stripped_to_empty(self) -> None:
        """Blank-after-trim titles are rejected by the post service, not the schema."""
        assert PostCreate(title="   ", content="x", category_id=1).title == ""

    def test_post_update_leaves_missing_fields_none(self) -> None:
        data = PostUpdate(tags=["A"])

        assert data.title is None
        assert data.content is None
        assert data.tags == ["a"]


@pytest.mark.unit
class TestCommentCreate:
    def test_content_is_stripped(self) -> None:
        assert CommentCreate(post_id=1, content="  hi  ").content == "hi"

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            CommentCreate(post_id=1, content="")

    def test_parent_defaults_to_top_level(self) -> None:
        assert CommentCreate(post_id=1, content="hi").parent_comment_id is None


@pytest.mark.unit
class TestReportCreate:
    def test_unknown_target_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            ReportCreate(target_type="user", target_id=1, reason="spam")

    def test_reason_length_limit(self) -> None:
        with pytest.raises(PydanticValidationError):
            ReportCreate(
                target_type="post",
                target_id=1,
                reason="x" * (settings.REPORT_REASON_MAX_LENGTH + 1),
            )

    def test_reason_at_limit_accepted(self) -> None:
        data = ReportCreate(
            target_type="comment",
            target_id=1,
            reason="x" * settings.REPORT_REASON_MAX_LENGTH,
        )
        assert len(data.reason) == settings.REPORT_REASON_MAX_LENGTH


@pytest.mark.unit
class TestTimestamps:
    def test_utc_now_is_aware(self) -> None:
        now = utc_now()

        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)

    @pytest.mark.parametrize(
        "value",
        [
            datetime(2024, 5, 1, 12, 30, 0),
            datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC),
            datetime(2024, 5, 1, 14, 30, 0, tzinfo=timezone(timedelta(hours=2))),
        ],
    )
    def test_format_utc(self, value: datetime) -> None:
        assert format_utc(value) == "2024-05-01T12:30:00Z"
