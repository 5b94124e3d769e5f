from __future__ import annotations

import logging
from pathlib import Path

from ..errors import InputFetchError, OutputWriteError

logger = logging.getLogger(__name__)


class FileClient:
    """Reads or writes a whole local file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> bytes:
        try:
            with self.path.open("rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise InputFetchError(f"Cannot read {self.path}. {exc}") from exc
        logger.debug("Read %d bytes from %s", len(data), self.path)
        return data

    def write(self, data: bytes) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise OutputWriteError(f"Cannot write {self.path}. {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(data), self.path)

    def __repr__(self) -> str:
        return f"FileClient({str(self.path)!r})"
