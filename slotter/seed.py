"""Seeding the permission table from a JSON file."""

from __future__ import annotations

import json
import os
from contextlib import contextmanager

from sqlalchemy import func, select

from .models import Role, permissions_roles, Permission
from .repository import ids_of

SEED_PATH_VARIABLE = "SEED_PERMISSION_JSON_PATH"


class SeedError(Exception):
    """Raised when seeding the database fails."""


@contextmanager
def _step(message):
    try:
        yield
    except SeedError:
        raise
    except Exception as exc:
        raise SeedError(f"{message}: {exc}") from exc


def _normalise_key(key):
    return str(key).lower().replace("_", "")


def _load_permissions(seed_path):
    with _step("failed reading permission seed file"):
        with open(seed_path, encoding="utf-8") as handle:
            text = handle.read()
    with _step("failed unmarshaling permissions"):
        data = json.loads(text)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError("expected a JSON array of permissions")
        permissions = []
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError("expected each permission to be a JSON object")
            fields = {_normalise_key(key): value for key, value in entry.items()}
            permissions.append(
                Permission(
                    name=str(fields.get("name") or ""),
                    permission_type=str(fields.get("permissiontype") or ""),
                )
            )
        return permissions


def _find_roles_with_all_permissions(session, permission_ids):
    """Return the live roles that hold every permission in permission_ids."""
    live_roles = select(Role).where(Role.deleted_at.is_(None))
    if not permission_ids:
        return list(session.scalars(live_roles).all())
    table = permissions_roles
    needed = len(permission_ids)
    counted = (
        select(table.c.role_id)
        .where(table.c.permission_id.in_(list(permission_ids)))
        .group_by(table.c.role_id)
        .having(func.count(table.c.permission_id.distinct()) == needed)
    )
    role_ids = list(session.scalars(counted).all())
    if not role_ids:
        return []
    return list(session.scalars(live_roles.where(Role.id.in_(role_ids))).all())


def sync_permissions(session, permission_repo, role_repo, seed_path):
    """Make the live permissions match the seed file, in one transaction.

    Permissions missing from the file are soft deleted, changed types are
    updated and new ones are created. Roles that held every permission that
    already existed are granted the new ones too.
    """
    file_permissions = _load_permissions(seed_path)
    try:
        _sync(session, permission_repo, role_repo, file_permissions)
        session.commit()
    except Exception:
        session.rollback()
        raise


def _sync(session, permission_repo, role_repo, file_permissions):
    with _step("failed fetching existing permissions"):
        existing = permission_repo.get_all(session)

    file_map = {permission.name: permission for permission in file_permissions}
    existing_map = {permission.name: permission for permission in existing}

    to_delete = [p for p in existing if p.name not in file_map]
    to_create = [p for p in file_permissions if p.name not in existing_map]
    to_update = []
    for file_permission in file_permissions:
        current = existing_map.get(file_permission.name)
        if current is not None and current.permission_type != file_permission.permission_type:
            current.permission_type = file_permission.permission_type
            to_update.append(current)

    if to_delete:
        with _step("failed deleting old permissions"):
            permission_repo.soft_delete_by_permission_ids(ids_of(to_delete), session)
    if to_update:
        with _step("failed updating changed permissions"):
            permission_repo.update(to_update, session)

    with _step("failed re-fetching updated existing permissions"):
        final_existing = permission_repo.get_all(session)
    new_names = {permission.name for permission in to_create}
    existing_ids = {p.id for p in final_existing if p.name not in new_names}

    with _step("failed finding roles that have all existing permissions"):
        roles = _find_roles_with_all_permissions(session, existing_ids)

    created = []
    if to_create:
        with _step("failed creating new permissions"):
            created = permission_repo.create(to_create, session)

    if roles and created:
        with _step("failed associating new perms with roles"):
            role_repo.associate_permissions_by_ids(ids_of(roles), ids_of(created), session)


def seed_all(session, permission_repo, role_repo):
    """Run every seeder; the permission file comes from SEED_PERMISSION_JSON_PATH."""
    seed_path = os.environ.get(SEED_PATH_VARIABLE, "")
    print("Running SeedAll... seeding permissions")
    try:
        sync_permissions(session, permission_repo, role_repo, seed_path)
    except SeedError as exc:
        raise SeedError(f"failed to sync permissions: {exc}") from exc
    print("SeedAll Complete!")