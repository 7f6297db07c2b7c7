"""
Pydantic model for the stream description served at the base endpoint.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from framefetch.exceptions import ProtocolError


class Size(BaseModel):
    """Picture dimensions in pixels."""

    width: int = Field(ge=0)
    height: int = Field(ge=0)


class Rational(BaseModel):
    """Pixel aspect ratio."""

    num: int
    den: int = Field(gt=0)


class MediaInfo(BaseModel):
    """Describes one stream: codec, time base, length and track specifics."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["video", "audio"]
    codec: str
    timescale: int = Field(gt=0)
    duration: int = Field(ge=0)
    n_frames: int = Field(0, ge=0, alias="nFrames")
    name: str = ""

    # Video tracks
    dim: Size | None = None
    pasp: Rational | None = None

    # Audio tracks
    sample_rate: int | None = Field(None, alias="sampleRate")
    channels: int | None = None
    labels: list[str] = Field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return self.duration / self.timescale


def parse_media_info(text: str) -> MediaInfo:
    """
    Parses the JSON media description returned by the server.

    Raises:
        ProtocolError: If the text is not valid JSON or does not match the model.
    """
    try:
        return MediaInfo.model_validate_json(text)
    except ValidationError as e:
        raise ProtocolError(f"Invalid media info response:\n{e}") from e
