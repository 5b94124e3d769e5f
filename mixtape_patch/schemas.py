"""JSON schemas (draft-04) for the catalog, the patch list and added playlists."""

from __future__ import annotations

from typing import Any, Dict

_ID: Dict[str, Any] = {"type": "string", "minLength": 1, "maxLength": 10}
_TEXT: Dict[str, Any] = {"type": "string", "minLength": 1, "maxLength": 512}

PLAYLIST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": _ID,
        "user_id": _ID,
        "song_ids": {
            "type": "array",
            "items": _ID,
            "minItems": 1,
            "maxItems": 512,
            "uniqueItems": True,
            "default": [],
        },
    },
    "additionalProperties": False,
    "required": ["id", "user_id", "song_ids"],
}

INPUT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "definitions": {
        "user": {
            "type": "object",
            "properties": {"id": _ID, "name": _TEXT},
            "additionalProperties": False,
            "required": ["id", "name"],
        },
        "playlist": PLAYLIST_SCHEMA,
        "song": {
            "type": "object",
            "properties": {"id": _ID, "artist": _TEXT, "title": _TEXT},
            "additionalProperties": False,
            "required": ["id", "artist", "title"],
        },
    },
    "type": "object",
    "properties": {
        "users": {"type": "array", "items": {"$ref": "#/definitions/user"}, "default": []},
        "playlists": {"type": "array", "items": {"$ref": "#/definitions/playlist"}, "default": []},
        "songs": {"type": "array", "items": {"$ref": "#/definitions/song"}, "default": []},
    },
    "additionalProperties": False,
    "required": ["users", "playlists", "songs"],
}

PATCH_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "op": {"type": "string", "enum": ["add", "remove"]},
            "path": {
                "type": "string",
                "maxLength": 32,
                "pattern": "^(/playlists/-|/playlists/[0-9]+|/playlists/[0-9]+/song_ids/-)$",
            },
            "value": {},
        },
        "additionalProperties": False,
        "required": ["op", "path"],
    },
}

PATCH_PLAYLIST_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    **PLAYLIST_SCHEMA,
}
