"""
Frame Server API Layer.

This package handles all communication with the frame-serving endpoint.
"""

from .downloader import Downloader
from .transport import AiohttpTransport, Transport, TransportResponse

__all__ = ["AiohttpTransport", "Downloader", "Transport", "TransportResponse"]
