"""Repository for role records."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from .models import Role
from .repository import Repository, ids_of


class RoleRepo(Repository):
    """Create, read, update and delete roles."""

    def create(self, roles, tx=None):
        """Insert roles and return them with their keys set."""
        return self._create(roles, tx)

    def _get_where(self, criterion, tx):
        statement = (
            self._live(Role)
            .options(selectinload(Role.permissions))
            .where(criterion)
        )
        return self._fetch(statement, tx)

    def get_by_ids(self, role_ids, tx=None):
        """Return live roles with the given ids, permissions preloaded."""
        role_ids = list(role_ids)
        if not role_ids:
            self.log.debug("no role ids given")
            return []
        results = self._get_where(Role.id.in_(role_ids), tx)
        self.log.info("fetched %d roles by id", len(results))
        return results

    def get_by_wms_ids(self, wms_ids, tx=None):
        """Return live roles owned by the given WMS ids, permissions preloaded."""
        wms_ids = list(wms_ids)
        if not wms_ids:
            self.log.debug("no wms ids given")
            return []
        results = self._get_where(Role.wms_id.in_(wms_ids), tx)
        self.log.info("fetched %d roles by wms id", len(results))
        return results

    def get_by_company_ids(self, company_ids, tx=None):
        """Return live roles owned by the given company ids, permissions preloaded."""
        company_ids = list(company_ids)
        if not company_ids:
            self.log.debug("no company ids given")
            return []
        results = self._get_where(Role.company_id.in_(company_ids), tx)
        self.log.info("fetched %d roles by company id", len(results))
        return results

    def _name_exists(self, owner_column, owner_id, role_name, tx):
        statement = (
            select(func.count())
            .select_from(Role)
            .where(
                owner_column == owner_id,
                func.lower(Role.name) == func.lower(role_name),
                Role.deleted_at.is_(None),
            )
        )
        count = self._db(tx).scalar(statement) or 0
        self.log.debug("name check for %r found %d roles", role_name, count)
        return count > 0

    def name_exists_by_company_id(self, company_id, role_name, tx=None):
        """Tell whether the company has a live role of that name, ignoring case."""
        return self._name_exists(Role.company_id, company_id, role_name, tx)

    def name_exists_by_wms_id(self, wms_id, role_name, tx=None):
        """Tell whether the WMS has a live role of that name, ignoring case."""
        return self._name_exists(Role.wms_id, wms_id, role_name, tx)

    def update(self, roles, tx=None):
        """Save every field of each role and return the saved instances."""
        return self._save(roles, tx)

    def soft_delete_by_roles(self, roles, tx=None):
        """Soft delete the given roles; return the number of rows marked."""
        return self.soft_delete_by_role_ids(ids_of(roles), tx)

    def soft_delete_by_role_ids(self, role_ids, tx=None):
        """Soft delete roles by id; return the number of rows marked."""
        role_ids = list(role_ids)
        if not role_ids:
            self.log.debug("no role ids given, skipping soft delete")
            return 0
        return self._soft_delete(Role, Role.id.in_(role_ids), tx)

    def full_delete_by_roles(self, roles, tx=None):
        """Permanently delete the given roles; return the rows removed."""
        return self.full_delete_by_role_ids(ids_of(roles), tx)

    def full_delete_by_role_ids(self, role_ids, tx=None):
        """Permanently delete roles by id, soft-deleted ones included."""
        role_ids = list(role_ids)
        if not role_ids:
            self.log.debug("no role ids given, skipping full delete")
            return 0
        return self._hard_delete(Role, Role.id.in_(role_ids), tx)