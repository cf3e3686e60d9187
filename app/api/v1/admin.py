"""
Admin API endpoints

Report triage for moderators. Pinning posts and managing categories live
with their own resources (posts, categories) behind the same admin gate.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.schemas.report import ReportListItem, ReportResponse
from app.services.reports import list_reports, resolve_report

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/reports", response_model=list[ReportListItem])
async def get_reports(
    _admin: AdminUser,
    resolved: Annotated[
        bool | None, Query(description="Only resolved (true) or open (false) reports")
    ] = None,
    db: AsyncSession = Depends(get_db),
) -> list[ReportListItem]:
    """
    Reports awaiting (or past) review, newest first.

    `target_exists` is false when the reported post or comment has since
    been deleted.
    """
    return await list_reports(db, resolved=resolved)


@router.post("/reports/{report_id}/resolve", response_model=ReportResponse)
async def resolve(
    report_id: Annotated[int, Path(description="Report ID")],
    current_user: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> ReportResponse:
    """Mark a report as handled. Resolving an already resolved report is a no-op."""
    report = await resolve_report(db, report_id)
    logger.info("report_reviewed", report_id=report_id, reviewed_by=current_user.user_id)
    return ReportResponse.model_validate(report)
