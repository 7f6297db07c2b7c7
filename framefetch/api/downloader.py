"""
Client for the frame-serving media endpoint: fetches single frames, frame
ranges and media info, and turns response bodies into packets.
"""

import logging
import shutil
import threading
import time
from typing import Any, Callable, List, Optional

from framefetch.models.config import ClientConfig
from framefetch.models.media_info import parse_media_info
from framefetch.models.packet import Packet
from framefetch.protocol.buffer import ScratchBuffer
from framefetch.protocol.multipart import is_multipart, parse_multipart
from framefetch.protocol.packets import build_packet
from framefetch.utils.structured_logger import FetchLogger, StructuredLogger

from .transport import AiohttpTransport, Transport, TransportResponse

log = logging.getLogger(__name__)


class Downloader:
    """
    Blocking client for one stream of a frame server.

    Every public call issues exactly one GET and returns once the body has
    been read and parsed. Calls on the same instance are serialized by an
    internal lock; use separate instances for concurrent fetches.

    Frame calls return a list of packets, or None when the server has no data
    (any non-200 status, or a multipart body without parts). Malformed
    responses raise ProtocolError; transport failures propagate unchanged.

    The optional `target` bytearray is used as the scratch buffer instead of
    a fresh allocation. It is filled up to its length and never resized; the
    caller must not touch it until the call returns. Returned packets hold
    copies of their payloads, so the target can be reused right away.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[Transport] = None,
        info_parser: Callable[[str], Any] = parse_media_info,
        events: Optional[FetchLogger] = None,
    ):
        """
        Args:
            base_url: URL of the stream, e.g. ``http://host:8080/stream/cam1``.
            transport: Blocking GET implementation; aiohttp-backed by default.
            info_parser: Turns the media info response text into an object.
            events: Structured event sink; plain debug logging by default.
        """
        self.base_url: str = base_url
        self._transport: Transport = transport or AiohttpTransport()
        self._info_parser = info_parser
        self._events = events or FetchLogger(
            StructuredLogger(__name__, enable_json=False)
        )
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls, config: ClientConfig, events: Optional[FetchLogger] = None
    ) -> "Downloader":
        """Builds a downloader and its aiohttp transport from a validated config."""
        transport = AiohttpTransport(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            total_timeout=config.total_timeout,
            user_agent=config.user_agent,
        )
        return cls(config.base_url, transport=transport, events=events)

    # Public API Methods
    def seek_frame(
        self, pts: int, target: Optional[bytearray] = None
    ) -> Optional[List[Packet]]:
        """Fetches the frame nearest to presentation timestamp `pts`."""
        with self._lock:
            return self._fetch_packets(
                "seek_frame", f"{self.base_url}?pts={pts}", target
            )

    def get_frame(
        self, frame_no: int, target: Optional[bytearray] = None
    ) -> Optional[List[Packet]]:
        """Fetches frame number `frame_no`."""
        with self._lock:
            return self._fetch_packets(
                "get_frame", f"{self.base_url}/{frame_no}", target
            )

    def get_frames(
        self, start: int, end: int, target: Optional[bytearray] = None
    ) -> Optional[List[Packet]]:
        """Fetches the frames from `start` to `end` as served by the range request."""
        with self._lock:
            return self._fetch_packets(
                "get_frames", f"{self.base_url}/{start}:{end}", target
            )

    def download_media_info(self) -> Optional[Any]:
        """Fetches and parses the stream description, or None on a non-200 status."""
        with self._lock:
            url = self.base_url
            response = self._execute("download_media_info", url)
            try:
                if response.status != 200:
                    self._discard(response, "download_media_info", url)
                    return None
                return self._info_parser(response.text())
            finally:
                response.close()

    def close(self) -> None:
        """Releases the transport."""
        self._transport.close()

    def __enter__(self) -> "Downloader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Request handling
    def _execute(self, operation: str, url: str) -> TransportResponse:
        self._events.fetch_started(operation, url)
        start_time = time.monotonic()
        try:
            return self._transport.get(url)
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            self._events.fetch_failed(operation, url, str(e), duration_ms)
            raise

    def _discard(self, response: TransportResponse, operation: str, url: str) -> None:
        # Drain so the connection can be reused; a non-200 answer is "no data".
        drained = response.drain()
        self._events.fetch_no_data(
            operation, url, response.status, f"HTTP {response.status}"
        )
        log.debug(f"Discarded {drained} byte(s) of HTTP {response.status} body.")

    def _fetch_packets(
        self, operation: str, url: str, target: Optional[bytearray]
    ) -> Optional[List[Packet]]:
        response = self._execute(operation, url)
        start_time = time.monotonic()
        try:
            if response.status != 200:
                self._discard(response, operation, url)
                return None

            buffer = self._to_buffer(response, target)
            size = buffer.remaining()
            content_type = response.headers.get("Content-Type")

            if is_multipart(content_type):
                packets = parse_multipart(buffer, content_type)
                if not packets:
                    self._events.fetch_no_data(
                        operation, url, response.status, "no parts in multipart body"
                    )
                    return None
            else:
                packets = [build_packet(response.headers, buffer)]

            self._events.fetch_completed(
                operation,
                url,
                packets=len(packets),
                size_bytes=size,
                multipart=is_multipart(content_type),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
            return packets
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            self._events.fetch_failed(operation, url, str(e), duration_ms)
            raise
        finally:
            response.close()

    @staticmethod
    def _to_buffer(
        response: TransportResponse, target: Optional[bytearray]
    ) -> ScratchBuffer:
        """Reads the whole body into a flipped scratch buffer."""
        if target is None:
            return ScratchBuffer.from_bytes(response.body.read())

        buffer = ScratchBuffer.wrap(target)
        shutil.copyfileobj(response.body, buffer.sink())
        return buffer.flip()
