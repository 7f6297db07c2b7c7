"""
Value types produced by the frame downloader.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Timecode:
    """SMPTE-style tape timecode, optionally drop-frame."""

    hour: int
    minute: int
    second: int
    frame: int
    drop_frame: bool = False

    def __str__(self) -> str:
        sep = ";" if self.drop_frame else ":"
        return (
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}{sep}{self.frame:02d}"
        )


@dataclass(frozen=True)
class Packet:
    """
    One decoded media frame: metadata plus payload bytes.

    `timescale` is the secondary timestamp of the protocol and is always 0 for
    packets built by the downloader.
    """

    data: bytes = field(repr=False)
    pts: int = 0
    timescale: int = 0
    duration: int = 0
    frame_no: int = 0
    key: bool = False
    timecode: Timecode | None = None

    @property
    def size(self) -> int:
        return len(self.data)
