from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Pattern

from .errors import CatalogError, InvalidPatchListError, PatchRejectedError
from .models import Patch, Playlist
from .schemas import PATCH_PLAYLIST_SCHEMA, PATCH_SCHEMA
from .store import CatalogStore
from .validation import ensure_valid, validate_instance

logger = logging.getLogger(__name__)


def load_patches(data: bytes | str) -> List[Patch]:
    document = ensure_valid(PATCH_SCHEMA, data, "changes file", InvalidPatchListError)
    return [Patch.from_record(record) for record in document]


@dataclass(frozen=True, slots=True)
class PatchRejection:
    index: int
    op: str
    path: str
    reason: str


@dataclass(slots=True)
class PatchReport:
    applied: int = 0
    ignored: int = 0
    rejected: List[PatchRejection] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.applied + self.ignored + len(self.rejected)

    def summary(self) -> str:
        return (
            f"{self.applied} applied, {len(self.rejected)} skipped, "
            f"{self.ignored} ignored of {self.total} patch(es)"
        )


Handler = Callable[[CatalogStore, Patch, re.Match[str]], None]


@dataclass(frozen=True)
class PatchRoute:
    op: str
    pattern: Pattern[str]
    action: str
    handler: Handler

    def match(self, patch: Patch) -> Optional[re.Match[str]]:
        if patch.op != self.op:
            return None
        return self.pattern.fullmatch(patch.path)


def _add_playlist(store: CatalogStore, patch: Patch, _match: re.Match[str]) -> None:
    if patch.value is None:
        raise PatchRejectedError("Missing playlist value.")
    violations = validate_instance(PATCH_PLAYLIST_SCHEMA, patch.value)
    if violations:
        raise PatchRejectedError(f"Invalid playlist value. {'; '.join(violations)}")
    playlist = store.add_playlist(Playlist.from_record(patch.value))
    logger.debug("Created playlist %s", playlist.id)


def _add_song_to_playlist(store: CatalogStore, patch: Patch, match: re.Match[str]) -> None:
    if patch.value is None:
        raise PatchRejectedError("Missing song ID value.")
    if not isinstance(patch.value, str):
        raise PatchRejectedError("Invalid song ID value.")
    store.add_song_to_playlist(match.group("playlist_id"), patch.value)


def _remove_playlist(store: CatalogStore, _patch: Patch, match: re.Match[str]) -> None:
    store.remove_playlist(match.group("playlist_id"))


DEFAULT_ROUTES: tuple[PatchRoute, ...] = (
    PatchRoute("add", re.compile(r"/playlists/-"), "add playlist", _add_playlist),
    PatchRoute(
        "add",
        re.compile(r"/playlists/(?P<playlist_id>[0-9]+)/song_ids/-"),
        "add song to playlist",
        _add_song_to_playlist,
    ),
    PatchRoute(
        "remove",
        re.compile(r"/playlists/(?P<playlist_id>[0-9]+)"),
        "remove playlist",
        _remove_playlist,
    ),
)


class PatchEngine:
    """
    Applies patches to a catalog store in list order.

    Each patch is matched against a closed set of (op, path) routes; anything
    else is ignored. A patch whose value or target is unusable is logged and
    skipped, and the run carries on with the next one. The engine holds no
    state of its own.
    """

    def __init__(self, routes: Iterable[PatchRoute] = DEFAULT_ROUTES) -> None:
        self.routes = tuple(routes)

    def apply(self, store: CatalogStore, patches: Iterable[Patch]) -> PatchReport:
        report = PatchReport()
        for index, patch in enumerate(patches, start=1):
            route, match = self._route(patch)
            if route is None or match is None:
                logger.info("Ignoring unsupported patch #%d: %s %s", index, patch.op, patch.path)
                report.ignored += 1
                continue
            try:
                route.handler(store, patch, match)
            except (PatchRejectedError, CatalogError) as exc:
                logger.warning("Skipping %s (patch #%d). %s", route.action, index, exc)
                report.rejected.append(PatchRejection(index, patch.op, patch.path, str(exc)))
                continue
            logger.debug("Applied %s (patch #%d)", route.action, index)
            report.applied += 1
        logger.info("Patches: %s", report.summary())
        return report

    def _route(self, patch: Patch) -> tuple[Optional[PatchRoute], Optional[re.Match[str]]]:
        for route in self.routes:
            match = route.match(patch)
            if match is not None:
                return route, match
        return None, None
