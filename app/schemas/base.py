"""
UTC timestamp rendering shared by schemas and raw JSON responses.

Timestamps always mean UTC, whether they carry tzinfo (fresh from
app.utils.timestamps) or not (read back from a DATETIME column). On the
wire they carry a Z suffix so browsers convert them to local time.
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import PlainSerializer

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_utc(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.strftime(UTC_FORMAT)


# created_at: UTCDatetime instead of created_at: datetime
UTCDatetime = Annotated[datetime, PlainSerializer(format_utc, return_type=str)]
