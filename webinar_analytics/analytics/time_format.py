"""Display formatting for second offsets and durations"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)"""
    return int(math.floor(value + 0.5))


def format_timestamp(seconds: float) -> str:
    """Format an offset as H:MM:SS, or M:SS when under an hour

    Examples:
        65 -> "1:05"
        3665 -> "1:01:05"
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration(seconds: float) -> str:
    """Format a duration as "Xh Ym", or "Ym" when under an hour"""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
