"""In-memory catalog of daily logs with a linear content search."""

from __future__ import annotations

import logging

from .models import LogFile
from .store import NoteStore, StoreError

logger = logging.getLogger(__name__)


class NoteIndex:
    """Browsable, searchable view over a NoteStore.

    The catalog is derived state: it is rebuilt wholesale by reload()
    and never persisted.
    """

    def __init__(self, store: NoteStore):
        self.store = store
        self._catalog: list[LogFile] = []

    @property
    def catalog(self) -> list[LogFile]:
        return list(self._catalog)

    def reload(self) -> list[LogFile]:
        """Rebuild the catalog from the store, newest date first.

        Raises:
            StoreError: If the store cannot list its log directory.
        """
        self._catalog = sorted(self.store.list(), key=lambda log: log.date, reverse=True)
        return self.catalog

    def search(self, query: str) -> list[LogFile]:
        """Find catalog entries whose content contains `query`.

        Matching is case-insensitive. Files that cannot be read are
        skipped rather than failing the search. Catalog order is kept.
        """
        if not query:
            return self.catalog

        needle = query.casefold()
        results = []
        for log in self._catalog:
            try:
                content = self.store.read(log.path)
            except StoreError as e:
                logger.debug("Skipping %s during search: %s", log.path, e)
                continue
            if needle in content.decode("utf-8", errors="replace").casefold():
                results.append(log)
        return results
