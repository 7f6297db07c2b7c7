"""
Parser for the tape timecode carried in packet metadata.
"""

from framefetch.models.packet import Timecode


def _fields(text: str, sep: str) -> list[str]:
    # Repeated separators collapse, as the server's own splitter does.
    return [f for f in text.split(sep) if f]


def parse_timecode(raw: str | None) -> Timecode | None:
    """
    Parses `HH:MM:SS:FF` (non-drop-frame) or `HH:MM:SS;FF` (drop-frame).

    The timecode is a best-effort field: a missing, empty, or malformed value
    yields None rather than an error.
    """
    if not raw:
        return None

    parts = _fields(raw.strip(), ":")
    drop_frame = False
    if len(parts) == 3:
        tail = _fields(parts[2], ";")
        if len(tail) != 2:
            return None
        parts = [parts[0], parts[1], *tail]
        drop_frame = True
    elif len(parts) != 4:
        return None

    try:
        hour, minute, second, frame = (int(p) for p in parts)
    except ValueError:
        return None
    if min(hour, minute, second, frame) < 0:
        return None

    return Timecode(hour, minute, second, frame, drop_frame)
