"""
Utility functions
"""

from app.utils.text import normalize_tags
from app.utils.timestamps import utc_now

__all__ = [
    "normalize_tags",
    "utc_now",
]
