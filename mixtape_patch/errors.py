from __future__ import annotations

from typing import Iterable


class MixtapeError(Exception):
    """Base class for every error raised by the tool."""


class InputFetchError(MixtapeError):
    """Raised when a byte source cannot deliver its document."""


class OutputWriteError(MixtapeError):
    """Raised when a byte sink cannot store the output document."""


class SchemaValidationError(MixtapeError):
    def __init__(self, message: str, violations: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.violations = list(violations)


class InvalidInputError(SchemaValidationError):
    """The input catalog failed the schema or its cross-reference checks."""


class InvalidPatchListError(SchemaValidationError):
    """The patch file failed the patch list schema."""


class PatchRejectedError(MixtapeError):
    """A single patch carries a value the engine cannot apply; it is skipped."""


class CatalogError(MixtapeError):
    """Semantic failure reported by the catalog store."""


class InvalidIdError(CatalogError):
    pass


class DuplicateUserError(CatalogError):
    pass


class DuplicateSongError(CatalogError):
    pass


class DuplicatePlaylistError(CatalogError):
    pass


class DanglingUserRefError(CatalogError):
    pass


class DanglingSongRefError(CatalogError):
    pass


class IdExhaustedError(CatalogError):
    pass


class UnknownPlaylistError(CatalogError):
    pass


class UnknownSongError(CatalogError):
    pass


class DuplicatePlaylistSongError(CatalogError):
    pass


class PlaylistFullError(CatalogError):
    pass
