"""
Blocking HTTP GET transport used by the downloader.

The downloader only needs "execute a GET, give me status, headers and a body
stream". `AiohttpTransport` provides that on top of aiohttp by driving one
short-lived event loop per request on the calling thread.
"""

import asyncio
import io
import logging
import time
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

import aiohttp
from multidict import CIMultiDict

from framefetch.exceptions import ProtocolError, TransportError
from framefetch.models.config import DEFAULT_USER_AGENT

log = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """Status, headers and entity body of one HTTP response."""

    status: int
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    body: BinaryIO = field(default_factory=io.BytesIO)
    charset: str | None = None

    def drain(self) -> int:
        """Reads and discards whatever is left of the body; returns the byte count."""
        drained = 0
        while chunk := self.body.read(65536):
            drained += len(chunk)
        return drained

    def text(self) -> str:
        """
        Reads the rest of the body as text in the response charset (UTF-8 default).

        Raises:
            ProtocolError: If the charset is unknown or the body does not decode.
        """
        charset = self.charset or "utf-8"
        try:
            return self.body.read().decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            raise ProtocolError(f"Cannot decode body as {charset}: {e}") from e

    def close(self) -> None:
        self.body.close()


class Transport(Protocol):
    """The blocking GET capability the downloader depends on."""

    def get(self, url: str) -> TransportResponse: ...

    def close(self) -> None: ...


class AiohttpTransport:
    """
    Executes GET requests with aiohttp, blocking until the body has been read.

    Cookies are ignored (the frame protocol is stateless). Connection and read
    failures are raised as TransportError; nothing is retried.
    """

    def __init__(
        self,
        connect_timeout: float = 15.0,
        read_timeout: float = 30.0,
        total_timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        chunk_size: int = 65536,
    ):
        self.timeout = aiohttp.ClientTimeout(
            total=total_timeout, sock_connect=connect_timeout, sock_read=read_timeout
        )
        self.user_agent = user_agent
        self.chunk_size = chunk_size

    def get(self, url: str) -> TransportResponse:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise TransportError(
                "AiohttpTransport blocks the calling thread and cannot be used "
                "from inside a running event loop."
            )

        start_time = time.monotonic()
        try:
            response = asyncio.run(self._get(url))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"GET {url} failed: {e or type(e).__name__}") from e

        duration_ms = (time.monotonic() - start_time) * 1000
        log.debug(f"GET {url} -> {response.status} in {duration_ms:.1f} ms")
        return response

    async def _get(self, url: str) -> TransportResponse:
        async with (
            aiohttp.ClientSession(
                timeout=self.timeout,
                cookie_jar=aiohttp.DummyCookieJar(),
                headers={"User-Agent": self.user_agent},
            ) as session,
            session.get(url, allow_redirects=True) as r,
        ):
            body = io.BytesIO()
            async for chunk in r.content.iter_chunked(self.chunk_size):
                body.write(chunk)
            body.seek(0)

            # Repeated headers collapse to their last value.
            headers: CIMultiDict = CIMultiDict()
            for name, value in r.headers.items():
                headers[name] = value

            return TransportResponse(
                status=r.status, headers=headers, body=body, charset=r.charset
            )

    def close(self) -> None:
        """Nothing is held between requests."""
