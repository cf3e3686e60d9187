"""
Timestamp helpers.

Timestamps are created timezone-aware in UTC. DATETIME columns drop the
offset on MariaDB and SQLite, so values read back may be naive; both forms
mean UTC and schemas render them with a Z suffix.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)
