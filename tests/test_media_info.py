"""Tests for framefetch.models.media_info module."""

import pytest

from framefetch.exceptions import ProtocolError
from framefetch.models.media_info import parse_media_info


def test_video_media_info():
    info = parse_media_info(
        '{"type": "video", "codec": "apch", "timescale": 24000, "duration": 48048,'
        ' "nFrames": 48, "name": "tape-01", "dim": {"width": 1920, "height": 1080},'
        ' "pasp": {"num": 1, "den": 1}}'
    )
    assert info.codec == "apch"
    assert info.n_frames == 48
    assert info.duration_seconds == pytest.approx(2.002)
    assert (info.dim.width, info.dim.height) == (1920, 1080)
    assert info.sample_rate is None


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"type": "subtitle", "codec": "x", "timescale": 1, "duration": 0}',
        '{"type": "video", "codec": "x", "timescale": 0, "duration": 0}',
        '{"type": "video", "timescale": 1, "duration": 0}',
    ],
)
def test_invalid_media_info_raises(text):
    with pytest.raises(ProtocolError):
        parse_media_info(text)
