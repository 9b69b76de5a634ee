"""Text helpers for note cards."""

from datetime import datetime

DEFAULT_PREVIEW_LENGTH = 200
DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def content_preview(content: str | None, limit: int = DEFAULT_PREVIEW_LENGTH) -> str | None:
    """First `limit` characters of the content, with an ellipsis when cut."""
    if not content:
        return None
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def format_created(created_at: datetime, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Creation date in local time. Naive timestamps are shown as stored."""
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone()
    return created_at.strftime(date_format)


def visibility_label(is_public: bool) -> str:
    return "Yes" if is_public else "No"


def toggle_label(is_public: bool) -> str:
    return "Make private" if is_public else "Make public"
