"""
SQLModel-based Report models with inheritance for security

ReportBase (shared public fields)
    ├─> Reports (database table)
    └─> ReportCreate/ReportResponse (API schemas, defined in app/schemas)

target_id is polymorphic: it names a post or a comment depending on
target_type, so it cannot be a foreign key. app.services.reports resolves it.
"""

from datetime import datetime

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class ReportBase(SQLModel):
    """Base model with shared public fields for Reports."""

    # One of app.config.ReportTargetType
    target_type: str = Field(max_length=10)
    target_id: int

    reason: str = Field(max_length=500)


class Reports(ReportBase, table=True):
    """
    Database table for reports.

    A reporter can flag a given target once; the unique constraint makes
    that hold even for concurrent submissions.
    """

    __tablename__ = "reports"

    __table_args__ = (
        UniqueConstraint(
            "reporter_id", "target_type", "target_id", name="uq_reports_reporter_target"
        ),
        Index("idx_reports_resolved_created", "resolved", "created_at"),
        Index("idx_reports_target", "target_type", "target_id"),
    )

    report_id: int | None = Field(default=None, primary_key=True)

    reporter_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE")

    resolved: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)
