import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from slotter.models import Permission, Role, create_schema, permissions_roles
from slotter.permission_repo import PermissionRepo
from slotter.role_permissions import RolePermissionRepo


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as db:
        yield db


@pytest.fixture
def repo(session):
    return RolePermissionRepo(session)


@pytest.fixture
def perm_repo(session):
    return PermissionRepo(session)


def _links(session):
    table = permissions_roles
    return {
        tuple(row)
        for row in session.execute(select(table.c.role_id, table.c.permission_id))
    }


def _setup(repo, perm_repo):
    roles = repo.create([Role(name="admin"), Role(name="viewer")])
    perms = perm_repo.create(
        [Permission(name="create_roles"), Permission(name="update_roles")]
    )
    return roles, perms


def test_associate_by_ids_links_every_pair(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    added = repo.associate_permissions_by_ids(
        [r.id for r in roles], [p.id for p in perms]
    )
    expected = {(r.id, p.id) for r in roles for p in perms}
    assert added == len(expected)
    assert _links(session) == expected


def test_associate_twice_does_not_duplicate(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    role_ids = [r.id for r in roles]
    perm_ids = [p.id for p in perms]
    repo.associate_permissions_by_ids(role_ids, perm_ids)
    assert repo.associate_permissions_by_ids(role_ids, perm_ids) == 0
    assert len(_links(session)) == len(role_ids) * len(perm_ids)


def test_associate_with_empty_ids_does_nothing(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    assert repo.associate_permissions_by_ids([], [p.id for p in perms]) == 0
    assert repo.associate_permissions_by_ids([r.id for r in roles], []) == 0
    assert _links(session) == set()


def test_associate_skips_soft_deleted_permission(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    perm_repo.soft_delete_by_permissions([perms[1]])
    repo.associate_permissions_by_ids([roles[0].id], [p.id for p in perms])
    assert _links(session) == {(roles[0].id, perms[0].id)}


def test_associate_skips_soft_deleted_role(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    repo.soft_delete_by_roles([roles[0]])
    repo.associate_permissions_by_ids([r.id for r in roles], [perms[0].id])
    assert _links(session) == {(roles[1].id, perms[0].id)}


def test_unassociate_by_ids_removes_only_given(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    repo.associate_permissions_by_ids([r.id for r in roles], [p.id for p in perms])
    removed = repo.unassociate_permissions_by_ids([roles[0].id], [perms[0].id])
    assert removed == 1
    assert (roles[0].id, perms[0].id) not in _links(session)
    assert (roles[0].id, perms[1].id) in _links(session)
    assert (roles[1].id, perms[0].id) in _links(session)


def test_associate_objects_refreshes_role_permissions(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    role = roles[0]
    assert role.permissions == []
    repo.associate_permissions([role], perms)
    assert {p.name for p in role.permissions} == {"create_roles", "update_roles"}


def test_unassociate_objects(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    repo.associate_permissions(roles, perms)
    removed = repo.unassociate_permissions(roles, [perms[1]])
    assert removed == len(roles)
    assert _links(session) == {(r.id, perms[0].id) for r in roles}


def test_unassociate_objects_empty_returns_zero(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    repo.associate_permissions(roles, perms)
    assert repo.unassociate_permissions([], perms) == 0
    assert len(_links(session)) == len(roles) * len(perms)


def test_caller_transaction_can_roll_back(session, repo, perm_repo):
    roles, perms = _setup(repo, perm_repo)
    repo.associate_permissions_by_ids(
        [r.id for r in roles], [p.id for p in perms], tx=session
    )
    assert len(_links(session)) == len(roles) * len(perms)
    session.rollback()
    assert _links(session) == set()