"""Repository for warehouse-management system records."""

from __future__ import annotations

from sqlalchemy.orm import selectinload

from .models import Wms
from .repository import Repository, ids_of


class WmsRepo(Repository):
    """Create, read, update and delete WMS accounts."""

    def create(self, wmss, tx=None):
        """Insert WMS records and return them with their keys set."""
        return self._create(wmss, tx)

    def get_by_ids(self, wms_ids, tx=None):
        """Lock and return live WMS records by id, companies and users preloaded."""
        wms_ids = list(wms_ids)
        if not wms_ids:
            self.log.debug("no wms ids given")
            return []
        statement = (
            self._live(Wms)
            .options(selectinload(Wms.companies), selectinload(Wms.users))
            .where(Wms.id.in_(wms_ids))
            .with_for_update()
        )
        results = self._fetch(statement, tx)
        self.log.info("fetched and locked %d wms records by id", len(results))
        return results

    def update(self, wmss, tx=None):
        """Save every field of each WMS record and return the saved instances."""
        return self._save(wmss, tx)

    def soft_delete_by_wmss(self, wmss, tx=None):
        """Soft delete the given WMS records; return the number of rows marked."""
        return self.soft_delete_by_wms_ids(ids_of(wmss), tx)

    def soft_delete_by_wms_ids(self, wms_ids, tx=None):
        """Soft delete WMS records by id; return the number of rows marked."""
        wms_ids = list(wms_ids)
        if not wms_ids:
            self.log.debug("no wms ids given, skipping soft delete")
            return 0
        return self._soft_delete(Wms, Wms.id.in_(wms_ids), tx)

    def full_delete_by_wmss(self, wmss, tx=None):
        """Permanently delete the given WMS records; return the rows removed."""
        return self.full_delete_by_wms_ids(ids_of(wmss), tx)

    def full_delete_by_wms_ids(self, wms_ids, tx=None):
        """Permanently delete WMS records by id, soft-deleted ones included."""
        wms_ids = list(wms_ids)
        if not wms_ids:
            self.log.debug("no wms ids given, skipping full delete")
            return 0
        return self._hard_delete(Wms, Wms.id.in_(wms_ids), tx)