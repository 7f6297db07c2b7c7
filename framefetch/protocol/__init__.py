"""
Wire Protocol Layer.

This package parses the frame server's response bodies: a cursor-based
scratch buffer, the multipart splitter, part header parsing and packet
assembly.
"""

from .buffer import ScratchBuffer
from .headers import parse_header_block
from .multipart import boundary_token, is_multipart, parse_multipart, split_parts
from .packets import build_packet
from .timecode import parse_timecode

__all__ = [
    "ScratchBuffer",
    "boundary_token",
    "build_packet",
    "is_multipart",
    "parse_header_block",
    "parse_multipart",
    "parse_timecode",
    "split_parts",
]
