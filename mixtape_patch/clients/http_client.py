from __future__ import annotations

import logging
import socket
import time
import urllib.error
import urllib.request
from typing import Callable, Optional

from .. import __version__
from ..config import HttpSettings
from ..errors import InputFetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class HttpClient:
    """Fetches a document with a single blocking GET."""

    def __init__(
        self,
        url: str,
        settings: Optional[HttpSettings] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.settings = settings or HttpSettings()
        self._clock = clock

    def read(self) -> bytes:
        req = urllib.request.Request(
            self.url,
            method="GET",
            headers={"User-Agent": f"mixtape-patch/{__version__}"},
        )
        deadline = self._clock() + self.settings.total_timeout_seconds
        try:
            # The socket timeout bounds the dial, the TLS handshake and every read.
            with urllib.request.urlopen(req, timeout=self.settings.timeout_seconds) as resp:
                status = getattr(resp, "status", 200)
                if status != 200:
                    raise InputFetchError(f"GET {self.url} returned HTTP {status}.")
                data = self._read_body(resp, deadline)
        except urllib.error.HTTPError as exc:
            raise InputFetchError(f"GET {self.url} returned HTTP {exc.code}.") from exc
        except urllib.error.URLError as exc:
            raise InputFetchError(f"GET {self.url} failed. {exc.reason}") from exc
        except (socket.timeout, TimeoutError) as exc:
            raise InputFetchError(f"GET {self.url} timed out.") from exc
        except OSError as exc:
            raise InputFetchError(f"GET {self.url} failed. {exc}") from exc
        logger.debug("Fetched %d bytes from %s", len(data), self.url)
        return data

    def _read_body(self, resp, deadline: float) -> bytes:
        chunks: list[bytes] = []
        while True:
            if self._clock() > deadline:
                raise InputFetchError(
                    f"GET {self.url} exceeded {self.settings.total_timeout_seconds:g}s."
                )
            chunk = resp.read(CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def __repr__(self) -> str:
        return f"HttpClient({self.url!r})"
