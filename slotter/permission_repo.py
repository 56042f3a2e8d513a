"""Repository for permission records."""

from __future__ import annotations

from .models import Permission
from .repository import Repository, ids_of


class PermissionRepo(Repository):
    """Create, read, update and delete permissions."""

    def create(self, permissions, tx=None):
        """Insert permissions and return them with their keys set."""
        return self._create(permissions, tx)

    def get_all(self, tx=None):
        """Return every live permission."""
        results = self._fetch(self._live(Permission), tx)
        self.log.info("fetched all %d permissions", len(results))
        return results

    def get_by_ids(self, permission_ids, tx=None):
        """Return the live permissions with the given ids."""
        permission_ids = list(permission_ids)
        if not permission_ids:
            self.log.debug("no permission ids given")
            return []
        statement = self._live(Permission).where(Permission.id.in_(permission_ids))
        results = self._fetch(statement, tx)
        self.log.info("fetched %d permissions by id", len(results))
        return results

    def update(self, permissions, tx=None):
        """Save every field of each permission and return the saved instances."""
        return self._save(permissions, tx)

    def soft_delete_by_permissions(self, permissions, tx=None):
        """Soft delete the given permissions; return the number of rows marked."""
        return self.soft_delete_by_permission_ids(ids_of(permissions), tx)

    def soft_delete_by_permission_ids(self, permission_ids, tx=None):
        """Soft delete permissions by id; return the number of rows marked."""
        permission_ids = list(permission_ids)
        if not permission_ids:
            self.log.debug("no permission ids given, skipping soft delete")
            return 0
        return self._soft_delete(Permission, Permission.id.in_(permission_ids), tx)

    def full_delete_by_permissions(self, permissions, tx=None):
        """Permanently delete the given permissions; return the rows removed."""
        return self.full_delete_by_permission_ids(ids_of(permissions), tx)

    def full_delete_by_permission_ids(self, permission_ids, tx=None):
        """Permanently delete permissions by id, soft-deleted ones included."""
        permission_ids = list(permission_ids)
        if not permission_ids:
            self.log.debug("no permission ids given, skipping full delete")
            return 0
        return self._hard_delete(Permission, Permission.id.in_(permission_ids), tx)