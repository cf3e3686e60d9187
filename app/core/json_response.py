"""
JSON response for payloads built as plain dicts.

Post detail pages return nested comment dicts directly instead of going
through response_model validation, which walks the tree recursively. This
response renders those dicts with datetimes in the same UTC form as
UTCDatetime fields.
"""

import json
from datetime import datetime
from typing import Any

from fastapi.responses import JSONResponse

from app.schemas.base import format_utc


def _encode_default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return format_utc(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class UTCJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            default=_encode_default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")
