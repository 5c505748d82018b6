"""Display formatting for timer values."""

from __future__ import annotations


def format_time(total_seconds: int) -> str:
    """Render a signed second count as ``MM:SS`` or ``H:MM:SS``.

    Negative values (overrun) keep their sign::

        >>> format_time(75)
        '01:15'
        >>> format_time(3661)
        '1:01:01'
        >>> format_time(-5)
        '-00:05'
    """
    sign = "-" if total_seconds < 0 else ""
    hours, rest = divmod(abs(total_seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"
    return f"{sign}{minutes:02d}:{seconds:02d}"
