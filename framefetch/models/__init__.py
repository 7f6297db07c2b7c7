"""
Data Models Layer.

This package contains the data structures used throughout the application:
packets and timecodes returned by the downloader, the media info model, and
the Pydantic configuration model.
"""

from .config import ClientConfig
from .media_info import MediaInfo, parse_media_info
from .packet import Packet, Timecode

__all__ = ["ClientConfig", "MediaInfo", "Packet", "Timecode", "parse_media_info"]
