"""
Report intake and triage.

A user may report a given post or comment once. The duplicate check runs
before the insert, and the (reporter_id, target_type, target_id) unique
constraint catches the case where two identical submissions race past it.
"""

from dataclasses import dataclass

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ReportTargetType, settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Comments, Posts, Reports, Users
from app.schemas.common import UserSummary
from app.schemas.report import ReportListItem

logger = get_logger(__name__)


@dataclass(frozen=True)
class PostTarget:
    post_id: int

    target_type = ReportTargetType.POST

    @property
    def target_id(self) -> int:
        return self.post_id


@dataclass(frozen=True)
class CommentTarget:
    comment_id: int

    target_type = ReportTargetType.COMMENT

    @property
    def target_id(self) -> int:
        return self.comment_id


ReportTarget = PostTarget | CommentTarget


def make_target(target_type: str, target_id: int) -> ReportTarget:
    """Turn the wire pair (target_type, target_id) into a typed target."""
    if target_type == ReportTargetType.POST:
        return PostTarget(post_id=target_id)
    if target_type == ReportTargetType.COMMENT:
        return CommentTarget(comment_id=target_id)
    raise ValidationError(
        f"target_type must be one of: {', '.join(ReportTargetType.ALL)}", field="target_type"
    )


async def resolve_target(db: AsyncSession, target: ReportTarget) -> Posts | Comments | None:
    """Load the reported row, or None if it no longer exists."""
    match target:
        case PostTarget(post_id=post_id):
            return await db.get(Posts, post_id)
        case CommentTarget(comment_id=comment_id):
            return await db.get(Comments, comment_id)


async def submit_report(
    db: AsyncSession, reporter: Users, target_type: str, target_id: int, reason: str
) -> Reports:
    """
    File a report against a post or a comment.

    Raises:
        ValidationError: reason blank or too long, unknown target type
        NotFoundError: target does not exist
        ConflictError: reporter already reported this target
    """
    reason = reason.strip()
    if not reason:
        raise ValidationError("reason is required", field="reason")
    if len(reason) > settings.REPORT_REASON_MAX_LENGTH:
        raise ValidationError(
            f"reason must be at most {settings.REPORT_REASON_MAX_LENGTH} characters",
            field="reason",
        )

    target = make_target(target_type, target_id)
    if await resolve_target(db, target) is None:
        raise NotFoundError(f"{target.target_type.capitalize()} not found")

    existing = await db.execute(
        select(Reports.report_id).where(  # type: ignore[call-overload]
            Reports.reporter_id == reporter.user_id,
            Reports.target_type == target.target_type,
            Reports.target_id == target.target_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("You already reported this")

    assert reporter.user_id is not None
    report = Reports(
        reporter_id=reporter.user_id,
        target_type=target.target_type,
        target_id=target.target_id,
        reason=reason,
    )
    db.add(report)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost the race against an identical submission
        raise ConflictError("You already reported this") from e

    logger.info(
        "report_submitted",
        report_id=report.report_id,
        reporter_id=reporter.user_id,
        target_type=target.target_type,
        target_id=target.target_id,
    )
    return report


async def list_reports(
    db: AsyncSession, resolved: bool | None = None, limit: int | None = None
) -> list[ReportListItem]:
    """Reports for the admin queue, newest first, with reporter and target existence."""
    limit = limit or settings.ADMIN_REPORTS_LIMIT

    query = select(Reports, Users.user_id, Users.name).join(  # type: ignore[call-overload]
        Users, Reports.reporter_id == Users.user_id, isouter=True
    )
    if resolved is not None:
        query = query.where(Reports.resolved == resolved)
    query = query.order_by(desc(Reports.created_at), desc(Reports.report_id)).limit(limit)

    result = await db.execute(query)

    items: list[ReportListItem] = []
    for report, reporter_id, reporter_name in result.all():
        item = ReportListItem.model_validate(report)
        if reporter_id is not None:
            item.reporter = UserSummary(user_id=reporter_id, name=reporter_name)
        target = make_target(report.target_type, report.target_id)
        item.target_exists = await resolve_target(db, target) is not None
        items.append(item)
    return items


async def resolve_report(db: AsyncSession, report_id: int) -> Reports:
    """
    Mark a report as handled. Resolving twice is a no-op.

    Raises:
        NotFoundError: report does not exist
    """
    report = await db.get(Reports, report_id)
    if report is None:
        raise NotFoundError("Report not found")

    if not report.resolved:
        report.resolved = True
        db.add(report)
        await db.flush()
        logger.info("report_resolved", report_id=report_id)

    return report
