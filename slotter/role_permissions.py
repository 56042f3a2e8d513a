"""Linking roles to the permissions they hold."""

from __future__ import annotations

from sqlalchemy import delete, insert, inspect, select

from .models import Permission, Role, permissions_roles
from .repository import ids_of
from .role_repo import RoleRepo


def _unique(values):
    return list(dict.fromkeys(values))


class RolePermissionRepo(RoleRepo):
    """Role repository that can also grant and revoke permissions."""

    def associate_permissions_by_ids(self, role_ids, permission_ids, tx=None):
        """Grant the permissions to the roles, looked up by id.

        Soft-deleted roles and permissions are skipped. Returns the number of
        new links made; links that already exist are left alone.
        """
        role_ids = list(role_ids)
        permission_ids = list(permission_ids)
        if not role_ids or not permission_ids:
            self.log.debug("no role ids or permission ids given, skipping association")
            return 0
        roles = self.get_by_ids(role_ids, tx)
        permissions = self._live_permissions(permission_ids, tx)
        return self._link(ids_of(roles), ids_of(permissions), tx)

    def unassociate_permissions_by_ids(self, role_ids, permission_ids, tx=None):
        """Revoke the permissions from the roles, looked up by id.

        Soft-deleted roles and permissions are skipped. Returns the number of
        links removed.
        """
        role_ids = list(role_ids)
        permission_ids = list(permission_ids)
        if not role_ids or not permission_ids:
            self.log.debug("no role ids or permission ids given, skipping unassociation")
            return 0
        roles = self.get_by_ids(role_ids, tx)
        permissions = self._live_permissions(permission_ids, tx)
        return self._unlink(ids_of(roles), ids_of(permissions), tx)

    def associate_permissions(self, roles, permissions, tx=None):
        """Grant every given permission to every given role; return links made."""
        roles = list(roles)
        permissions = list(permissions)
        if not roles or not permissions:
            self.log.debug("no roles or permissions given, skipping association")
            return 0
        return self._link(ids_of(roles), ids_of(permissions), tx)

    def unassociate_permissions(self, roles, permissions, tx=None):
        """Revoke every given permission from every given role; return links removed."""
        roles = list(roles)
        permissions = list(permissions)
        if not roles or not permissions:
            self.log.debug("no roles or permissions given, skipping unassociation")
            return 0
        return self._unlink(ids_of(roles), ids_of(permissions), tx)

    def _live_permissions(self, permission_ids, tx):
        statement = self._live(Permission).where(Permission.id.in_(permission_ids))
        return self._fetch(statement, tx)

    def _link(self, role_ids, permission_ids, tx):
        role_ids = _unique(role_ids)
        permission_ids = _unique(permission_ids)
        if not role_ids or not permission_ids:
            return 0
        table = permissions_roles
        with self._writing(tx) as session:
            existing = {
                tuple(row)
                for row in session.execute(
                    select(table.c.role_id, table.c.permission_id).where(
                        table.c.role_id.in_(role_ids),
                        table.c.permission_id.in_(permission_ids),
                    )
                )
            }
            missing = [
                {"role_id": role_id, "permission_id": permission_id}
                for role_id in role_ids
                for permission_id in permission_ids
                if (role_id, permission_id) not in existing
            ]
            if missing:
                session.execute(insert(table), missing)
            self._expire(session, role_ids, permission_ids)
        self.log.info("associated %d role permissions", len(missing))
        return len(missing)

    def _unlink(self, role_ids, permission_ids, tx):
        role_ids = _unique(role_ids)
        permission_ids = _unique(permission_ids)
        if not role_ids or not permission_ids:
            return 0
        table = permissions_roles
        statement = delete(table).where(
            table.c.role_id.in_(role_ids),
            table.c.permission_id.in_(permission_ids),
        )
        with self._writing(tx) as session:
            count = session.execute(statement).rowcount
            self._expire(session, role_ids, permission_ids)
        self.log.info("unassociated %d role permissions", count)
        return count

    @staticmethod
    def _expire(session, role_ids, permission_ids):
        """Make loaded instances reload their links after a raw change."""
        roles = set(role_ids)
        permissions = set(permission_ids)
        for instance in list(session):
            identity = inspect(instance).identity
            if not identity:
                continue
            if isinstance(instance, Role) and identity[0] in roles:
                session.expire(instance, ["permissions"])
            elif isinstance(instance, Permission) and identity[0] in permissions:
                session.expire(instance, ["roles"])