"""
Assembles Packet objects from protocol metadata and payload bytes.
"""

import re
from typing import Mapping

from framefetch.exceptions import ProtocolError
from framefetch.models.packet import Packet

from .buffer import ScratchBuffer
from .headers import DURATION, FRAME_NO, KEY_FRAME, PTS, TAPE_TIMECODE
from .timecode import parse_timecode

_INTEGER = re.compile(r"[+-]?\d+")


def _int_or_zero(headers: Mapping[str, str], key: str) -> int:
    value = headers.get(key)
    if value is None:
        return 0
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        raise ProtocolError(f"Header {key} is not a decimal integer: {value!r}")
    return int(value)


def _bool_or_false(headers: Mapping[str, str], key: str) -> bool:
    value = headers.get(key)
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ProtocolError(f"Header {key} is not a boolean: {value!r}")


def build_packet(headers: Mapping[str, str], payload: ScratchBuffer | bytes) -> Packet:
    """
    Builds a packet from a metadata mapping and its payload.

    Absent numeric fields default to 0, an absent key-frame flag to False, and
    an absent or unparseable timecode to None.

    Raises:
        ProtocolError: If a numeric or boolean field is present but malformed.
    """
    data = payload.to_bytes() if isinstance(payload, ScratchBuffer) else bytes(payload)
    return Packet(
        data=data,
        pts=_int_or_zero(headers, PTS),
        timescale=0,
        duration=_int_or_zero(headers, DURATION),
        frame_no=_int_or_zero(headers, FRAME_NO),
        key=_bool_or_false(headers, KEY_FRAME),
        timecode=parse_timecode(headers.get(TAPE_TIMECODE)),
    )
