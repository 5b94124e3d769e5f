from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import InvalidIdError

MAX_ID = 2**32 - 1
MAX_PLAYLIST_SONGS = 512

_DIGITS = re.compile(r"[0-9]+")


def parse_id(raw: str, kind: str) -> int:
    """Return the numeric value of a catalog id, rejecting anything but plain uint32 decimals."""
    if not isinstance(raw, str) or not _DIGITS.fullmatch(raw):
        raise InvalidIdError(f"{kind} ID {raw} is invalid.")
    value = int(raw)
    if value > MAX_ID:
        raise InvalidIdError(f"{kind} ID {raw} is invalid.")
    return value


@dataclass(frozen=True, slots=True)
class User:
    id: str
    name: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "User":
        return cls(id=record["id"], name=record["name"])

    def to_record(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True, slots=True)
class Song:
    id: str
    artist: str
    title: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Song":
        return cls(id=record["id"], artist=record["artist"], title=record["title"])

    def to_record(self) -> Dict[str, object]:
        return {"id": self.id, "artist": self.artist, "title": self.title}


@dataclass(slots=True)
class Playlist:
    id: str
    user_id: str
    song_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Playlist":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            song_ids=list(record.get("song_ids") or []),
        )

    def to_record(self) -> Dict[str, object]:
        return {"id": self.id, "user_id": self.user_id, "song_ids": list(self.song_ids)}


@dataclass(frozen=True, slots=True)
class Patch:
    op: str
    path: str
    # JSON null and a missing "value" key both land here as None.
    value: Optional[Any] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Patch":
        return cls(op=record["op"], path=record["path"], value=record.get("value"))
