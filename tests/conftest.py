"""Shared fixtures: an in-memory transport standing in for the HTTP layer."""

import io

import pytest
from multidict import CIMultiDict

from framefetch.api.transport import TransportResponse


class TrackingBody(io.BytesIO):
    """BytesIO that remembers how many bytes were read before it was closed."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.bytes_read = 0

    def read(self, size=-1):
        chunk = super().read(size)
        self.bytes_read += len(chunk)
        return chunk

    def readinto(self, b):
        n = super().readinto(b)
        self.bytes_read += n
        return n


def _make_response(status=200, body=b"", headers=None, charset=None):
    return TransportResponse(
        status=status,
        headers=CIMultiDict(headers or {}),
        body=TrackingBody(body),
        charset=charset,
    )


class FakeTransport:
    """Returns canned responses in order and records requested URLs."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.urls: list[str] = []
        self.closed = False

    def get(self, url):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def fake_transport():
    def _factory(*responses):
        return FakeTransport(*responses)

    return _factory


@pytest.fixture
def make_response():
    return _make_response

