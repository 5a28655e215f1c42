"""Formatting helpers shared by every timer surface"""

from worktimer.i18n import tr


def format_time(seconds: int) -> str:
    """
    Format elapsed seconds as HH:MM:SS.

    Hours are not wrapped, so 100 hours renders as "100:00:00".
    Negative input is clamped to zero.
    """
    total = max(0, int(seconds or 0))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_time(text: str) -> int:
    """Inverse of format_time: "01:01:01" -> 3661"""
    hours, minutes, secs = (int(part) for part in text.split(":"))
    if hours < 0 or not (0 <= minutes < 60 and 0 <= secs < 60):
        raise ValueError(f"Invalid HH:MM:SS value: {text}")
    return hours * 3600 + minutes * 60 + secs


def format_duration_words(seconds: int) -> str:
    """Human readable duration, e.g. "2 h 5 min" or "less than a minute" """
    total = max(0, int(seconds or 0))
    hours, remainder = divmod(total, 3600)
    minutes = remainder // 60

    if hours and minutes:
        return tr("duration.hours_minutes", hours=hours, minutes=minutes)
    if hours:
        return tr("duration.hours", hours=hours)
    if minutes:
        return tr("duration.minutes", minutes=minutes)
    return tr("duration.less_than_minute")
