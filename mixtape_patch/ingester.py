from __future__ import annotations

import logging
from typing import List, Optional

from .clients import ByteSink, ByteSource
from .errors import CatalogError, InvalidInputError
from .models import Patch
from .patching import PatchEngine, PatchReport, load_patches
from .store import CatalogStore

logger = logging.getLogger(__name__)


class Ingester:
    """Runs one batch: load the catalog, load the patch list, apply it, write the result."""

    def __init__(
        self,
        input_reader: ByteSource,
        changes_reader: ByteSource,
        output_writer: ByteSink,
        engine: Optional[PatchEngine] = None,
    ) -> None:
        self.input_reader = input_reader
        self.changes_reader = changes_reader
        self.output_writer = output_writer
        self.engine = engine or PatchEngine()

    def execute(self) -> PatchReport:
        store = self.ingest_input()
        patches = self.ingest_changes()
        report = self.engine.apply(store, patches)
        self.produce_output(store)
        return report

    def ingest_input(self) -> CatalogStore:
        logger.info("Reading input from %r", self.input_reader)
        data = self.input_reader.read()
        try:
            return CatalogStore.load(data)
        except CatalogError as exc:
            raise InvalidInputError(f"Invalid input file. {exc}") from exc

    def ingest_changes(self) -> List[Patch]:
        logger.info("Reading changes from %r", self.changes_reader)
        patches = load_patches(self.changes_reader.read())
        logger.debug("Loaded %d patch(es)", len(patches))
        return patches

    def produce_output(self, store: CatalogStore) -> None:
        self.output_writer.write(store.serialize())
