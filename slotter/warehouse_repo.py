"""Repository for warehouse records."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select

from .models import Warehouse
from .repository import Repository, ids_of

_NIL_UUID = uuid.UUID(int=0)


def _is_nil(value):
    return value is None or value == _NIL_UUID


class WarehouseRepo(Repository):
    """Create, read, update and delete warehouses."""

    def create(self, warehouses, tx=None):
        """Insert warehouses and return them with their keys set."""
        return self._create(warehouses, tx)

    def get_by_ids(self, warehouse_ids, tx=None):
        """Lock and return live warehouses with the given ids."""
        warehouse_ids = list(warehouse_ids)
        if not warehouse_ids:
            self.log.debug("no warehouse ids given")
            return []
        statement = (
            self._live(Warehouse)
            .where(Warehouse.id.in_(warehouse_ids))
            .with_for_update()
        )
        results = self._fetch(statement, tx)
        self.log.info("fetched %d warehouses by id", len(results))
        return results

    def get_by_company_id(self, company_id, tx=None):
        """Lock and return the live warehouses of one company."""
        if _is_nil(company_id):
            self.log.debug("company id is nil, returning no warehouses")
            return []
        statement = (
            self._live(Warehouse)
            .where(Warehouse.company_id == company_id)
            .with_for_update()
        )
        results = self._fetch(statement, tx)
        self.log.info("fetched and locked %d warehouses by company", len(results))
        return results

    def name_exists_for_company(self, company_id, warehouse_name, tx=None):
        """Tell whether the company already has a live warehouse of that name.

        The name is compared after trimming surrounding whitespace; a nil
        company id or a blank name gives False without querying.
        """
        if _is_nil(company_id):
            self.log.warning("company id is nil, returning False")
            return False
        name = (warehouse_name or "").strip()
        if not name:
            self.log.warning("warehouse name is empty, skipping check")
            return False
        statement = (
            select(func.count())
            .select_from(Warehouse)
            .where(
                Warehouse.company_id == company_id,
                Warehouse.name == name,
                Warehouse.deleted_at.is_(None),
            )
        )
        count = self._db(tx).scalar(statement) or 0
        self.log.debug("name check for %r found %d warehouses", name, count)
        return count > 0

    def update(self, warehouses, tx=None):
        """Save every field of each warehouse and return the saved instances."""
        return self._save(warehouses, tx)

    def soft_delete_by_warehouses(self, warehouses, tx=None):
        """Soft delete the given warehouses; return the number of rows marked."""
        return self.soft_delete_by_warehouse_ids(ids_of(warehouses), tx)

    def soft_delete_by_warehouse_ids(self, warehouse_ids, tx=None):
        """Soft delete warehouses by id; return the number of rows marked."""
        warehouse_ids = list(warehouse_ids)
        if not warehouse_ids:
            self.log.debug("no warehouse ids given, skipping soft delete")
            return 0
        return self._soft_delete(Warehouse, Warehouse.id.in_(warehouse_ids), tx)

    def full_delete_by_warehouses(self, warehouses, tx=None):
        """Permanently delete the given warehouses; return the rows removed."""
        return self.full_delete_by_warehouse_ids(ids_of(warehouses), tx)

    def full_delete_by_warehouse_ids(self, warehouse_ids, tx=None):
        """Permanently delete warehouses by id, soft-deleted ones included."""
        warehouse_ids = list(warehouse_ids)
        if not warehouse_ids:
            self.log.debug("no warehouse ids given, skipping full delete")
            return 0
        return self._hard_delete(Warehouse, Warehouse.id.in_(warehouse_ids), tx)