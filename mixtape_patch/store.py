from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .errors import (
    DanglingSongRefError,
    DanglingUserRefError,
    DuplicatePlaylistError,
    DuplicatePlaylistSongError,
    DuplicateSongError,
    DuplicateUserError,
    IdExhaustedError,
    InvalidInputError,
    PlaylistFullError,
    UnknownPlaylistError,
    UnknownSongError,
)
from .models import MAX_ID, MAX_PLAYLIST_SONGS, Playlist, Song, User, parse_id
from .schemas import INPUT_SCHEMA
from .validation import ensure_valid

logger = logging.getLogger(__name__)

# Lone surrogates decode from "\ud800"-style escapes but have no UTF-8 form.
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class CatalogStore:
    """
    In-memory mixtape catalog.

    Users and songs are immutable once loaded and keep their input order for
    output. Playlists live only in the id index; the output array is rebuilt
    from it on serialization, ordered by numeric id.

    New playlists get ids from a counter seeded with the largest playlist id
    seen on load. The counter is pre-incremented, so the first generated id
    is ``max + 1`` and ids are never reused within a run, even after removals.
    """

    def __init__(self) -> None:
        self._users: List[User] = []
        self._songs: List[Song] = []
        self._user_index: Dict[str, User] = {}
        self._song_index: Dict[str, Song] = {}
        self._playlist_index: Dict[str, Playlist] = {}
        self._playlist_auto_id = 0

    @classmethod
    def load(cls, data: bytes | str) -> "CatalogStore":
        document = ensure_valid(INPUT_SCHEMA, data, "input file", InvalidInputError)
        return cls.from_document(document)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "CatalogStore":
        store = cls()
        store._populate_users(document.get("users") or [])
        store._populate_songs(document.get("songs") or [])
        store._populate_playlists(document.get("playlists") or [])
        logger.debug(
            "Loaded %d users, %d songs, %d playlists (next playlist id %s)",
            len(store._users),
            len(store._songs),
            len(store._playlist_index),
            store.next_playlist_id,
        )
        return store

    def _populate_users(self, records: List[Dict[str, Any]]) -> None:
        for record in records:
            user = User.from_record(record)
            parse_id(user.id, "User")
            if user.id in self._user_index:
                raise DuplicateUserError(f"Duplicate user ID {user.id}.")
            self._user_index[user.id] = user
            self._users.append(user)

    def _populate_songs(self, records: List[Dict[str, Any]]) -> None:
        for record in records:
            song = Song.from_record(record)
            parse_id(song.id, "Song")
            if song.id in self._song_index:
                raise DuplicateSongError(f"Duplicate song ID {song.id}.")
            self._song_index[song.id] = song
            self._songs.append(song)

    def _populate_playlists(self, records: List[Dict[str, Any]]) -> None:
        max_id = 0
        for record in records:
            playlist = Playlist.from_record(record)
            numeric_id = parse_id(playlist.id, "Playlist")
            if playlist.id in self._playlist_index:
                raise DuplicatePlaylistError(f"Duplicate playlist ID {playlist.id}.")
            self._check_references(playlist)
            max_id = max(max_id, numeric_id)
            self._playlist_index[playlist.id] = playlist
        self._playlist_auto_id = max_id

    def _check_references(self, playlist: Playlist) -> None:
        if playlist.user_id not in self._user_index:
            raise DanglingUserRefError(f"User ID {playlist.user_id} does not exist.")
        for song_id in playlist.song_ids:
            if song_id not in self._song_index:
                raise DanglingSongRefError(f"Song ID {song_id} does not exist.")

    @property
    def users(self) -> List[User]:
        return list(self._users)

    @property
    def songs(self) -> List[Song]:
        return list(self._songs)

    @property
    def playlists(self) -> List[Playlist]:
        return sorted(self._playlist_index.values(), key=lambda p: (int(p.id), p.id))

    @property
    def next_playlist_id(self) -> Optional[int]:
        """Id the next added playlist would receive, or None once the id space is spent."""
        if self._playlist_auto_id >= MAX_ID:
            return None
        return self._playlist_auto_id + 1

    def get_user(self, user_id: str) -> Optional[User]:
        return self._user_index.get(user_id)

    def get_song(self, song_id: str) -> Optional[Song]:
        return self._song_index.get(song_id)

    def get_playlist(self, playlist_id: str) -> Optional[Playlist]:
        return self._playlist_index.get(playlist_id)

    def add_playlist(self, playlist: Playlist) -> Playlist:
        """Store a copy of ``playlist`` under a freshly generated id; the caller's id is ignored."""
        self._check_references(playlist)
        if self._playlist_auto_id >= MAX_ID:
            raise IdExhaustedError(f"Playlist ID {MAX_ID} exceeds maximum.")
        self._playlist_auto_id += 1
        stored = replace(
            playlist,
            id=str(self._playlist_auto_id),
            song_ids=list(playlist.song_ids),
        )
        self._playlist_index[stored.id] = stored
        logger.debug("Added playlist %s for user %s", stored.id, stored.user_id)
        return stored

    def remove_playlist(self, playlist_id: str) -> Playlist:
        try:
            removed = self._playlist_index.pop(playlist_id)
        except KeyError:
            raise UnknownPlaylistError(f"Playlist ID {playlist_id} does not exist.") from None
        logger.debug("Removed playlist %s", playlist_id)
        return removed

    def add_song_to_playlist(self, playlist_id: str, song_id: str) -> Playlist:
        playlist = self._playlist_index.get(playlist_id)
        if playlist is None:
            raise UnknownPlaylistError(f"Playlist ID {playlist_id} does not exist.")
        if song_id not in self._song_index:
            raise UnknownSongError(f"Song ID {song_id} does not exist.")
        if song_id in playlist.song_ids:
            raise DuplicatePlaylistSongError(
                f"Song ID {song_id} is already in playlist {playlist_id}."
            )
        if len(playlist.song_ids) >= MAX_PLAYLIST_SONGS:
            raise PlaylistFullError(
                f"Playlist ID {playlist_id} already holds {MAX_PLAYLIST_SONGS} songs."
            )
        playlist.song_ids.append(song_id)
        logger.debug("Appended song %s to playlist %s", song_id, playlist_id)
        return playlist

    def to_document(self) -> Dict[str, Any]:
        return {
            "users": [user.to_record() for user in self._users],
            "playlists": [playlist.to_record() for playlist in self.playlists],
            "songs": [song.to_record() for song in self._songs],
        }

    def serialize(self) -> bytes:
        text = json.dumps(self.to_document(), indent=2, ensure_ascii=False)
        text = _LONE_SURROGATE.sub("\ufffd", text)
        return (text + "\n").encode("utf-8")
