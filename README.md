# slotter

Repositories over SQLAlchemy 2.0 for the records of a warehouse management
service: companies, WMS tenants, warehouses, roles and permissions. Deletes
are soft by default (a `deleted_at` timestamp), with hard deletes available;
roles can be linked to permissions; and a seeder keeps the permission table
in step with a JSON file.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Models

`slotter.models` defines the declarative `Base` and the mapped classes
`Company`, `Wms`, `User`, `Role`, `Permission` and `Warehouse`, plus the
`permissions_roles` link table between roles and permissions. Every model
has a UUID `id` and carries `SoftDeleteMixin`, whose `is_deleted()` tells
whether the row's `deleted_at` is set. `create_schema(engine)` creates every
table that does not exist yet.

```python
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from slotter.models import Company, create_schema
from slotter.company_repo import CompanyRepo

engine = create_engine("sqlite://")
create_schema(engine)

with Session(engine) as session:
    companies = CompanyRepo(session)
    created = companies.create([Company(name="Acme")])
    found = companies.get_by_ids([c.id for c in created])
    companies.soft_delete_by_companies(found)
```

## Repositories

Each repository is built from a session. Every method takes an optional
`tx` session:

- with `tx`, the work runs in that session and the caller commits;
- without it, the repository's own session is used and writes are committed
  at once, or rolled back if they fail.

Reads return only live rows (soft-deleted rows are left out, also from
preloaded relationships). `create` returns the records with their keys set,
`update` saves every field and returns the saved instances, soft and full
deletes return the number of rows affected. Empty input does nothing:
reads, `create` and `update` return `[]`, deletes return `0`. Soft deletes
only mark rows not already marked; full deletes remove rows whether or not
they were soft deleted.

- `slotter.company_repo.CompanyRepo`: `create`, `get_by_ids`,
  `get_by_wms_ids` (both lock the rows with `FOR UPDATE` and preload
  users), `update`, `soft_delete_by_companies`,
  `soft_delete_by_company_ids`, `full_delete_by_companies`,
  `full_delete_by_company_ids`.
- `slotter.wms_repo.WmsRepo`: `create`, `get_by_ids` (locks, preloads
  companies and users), `update`, `soft_delete_by_wmss`,
  `soft_delete_by_wms_ids`, `full_delete_by_wmss`, `full_delete_by_wms_ids`.
- `slotter.warehouse_repo.WarehouseRepo`: `create`, `get_by_ids`,
  `get_by_company_id` (both lock), `name_exists_for_company` (trims the
  name; a nil company id or blank name gives `False` without a query),
  `update`, soft and full deletes by records or by ids.
- `slotter.permission_repo.PermissionRepo`: `create`, `get_all`,
  `get_by_ids`, `update`, soft and full deletes by records or by ids.
- `slotter.role_repo.RoleRepo`: `create`, `get_by_ids`, `get_by_wms_ids`,
  `get_by_company_ids` (permissions preloaded), case-insensitive
  `name_exists_by_company_id` and `name_exists_by_wms_id`, `update`, soft
  and full deletes by records or by ids.
- `slotter.role_permissions.RolePermissionRepo`: a `RoleRepo` that can also
  link permissions to roles. `associate_permissions` and
  `unassociate_permissions` take records; `associate_permissions_by_ids`
  and `unassociate_permissions_by_ids` take ids and skip soft-deleted roles
  and permissions. Each returns the number of links made or removed;
  links that already exist are left alone.

`slotter.repository` holds the shared `Repository` base class and
`ids_of(records)`, which returns the `id` of each record in order.

## Seeding permissions

`slotter.seed.sync_permissions(session, permission_repo, role_repo, seed_path)`
reads a JSON array of permission objects with `name` and `permission_type`
(`permissionType` and `PermissionType` are accepted too) and, in one
transaction on `session`:

1. soft deletes live permissions no longer listed;
2. updates the type of permissions whose type changed;
3. creates the permissions that are new;
4. grants the new permissions to every live role that held all of the
   permissions that already existed (every live role, if there were none).

`role_repo` must be a `RolePermissionRepo`. The session is committed on
success and rolled back on failure.

`slotter.seed.seed_all(session, permission_repo, role_repo)` does the same
with the path read from the `SEED_PERMISSION_JSON_PATH` environment
variable, printing a line before and after. Failures (an unreadable file,
bad JSON, a database error) are raised as `slotter.seed.SeedError`.

## What this package does not do

It is a data layer only. There is no web API or server, no command-line
program, and no login, token or invitation handling. The `User` model is
defined so the other models can refer to it, but there is no user
repository.