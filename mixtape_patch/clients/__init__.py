from __future__ import annotations

from typing import Protocol

from .file_client import FileClient
from .http_client import HttpClient


class ByteSource(Protocol):
    def read(self) -> bytes: ...


class ByteSink(Protocol):
    def write(self, data: bytes) -> None: ...


__all__ = [
    "ByteSink",
    "ByteSource",
    "FileClient",
    "HttpClient",
]
