"""
Text normalization helpers for user-supplied post fields.
"""

from collections.abc import Iterable


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """
    Normalize a list of post tags.

    Tags are trimmed and lowercased; empty tags are dropped and duplicates
    removed while keeping first-seen order.

    Example:
        normalize_tags([" Python", "python", "", "FastAPI"]) == ["python", "fastapi"]
    """
    if not tags:
        return []

    seen: set[str] = set()
    normalized: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if value and value not in seen:
            seen.add(value)
            normalized.append(value)
    return normalized
