import uuid

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from slotter.models import Company, Permission, Role, Wms, create_schema
from slotter.role_repo import RoleRepo


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as db:
        yield db
    engine.dispose()


@pytest.fixture
def repo(session):
    return RoleRepo(session)


@pytest.fixture
def company(session):
    record = Company(name="Acme")
    session.add(record)
    session.commit()
    return record


@pytest.fixture
def wms(session):
    record = Wms(name="Central")
    session.add(record)
    session.commit()
    return record


def test_create_empty_returns_empty_list(repo):
    assert repo.create([]) == []


def test_create_assigns_ids_and_round_trips(repo, company):
    created = repo.create([Role(name="admin", company_id=company.id)])
    assert len(created) == 1
    assert isinstance(created[0].id, uuid.UUID)
    fetched = repo.get_by_ids([created[0].id])
    assert [role.name for role in fetched] == ["admin"]


def test_get_by_ids_empty_input(repo):
    assert repo.get_by_ids([]) == []


def test_get_by_ids_preloads_permissions(repo, session, company):
    permission = Permission(name="create_roles", permission_type="roles")
    role = Role(name="admin", company_id=company.id, permissions=[permission])
    repo.create([role])
    role_id = role.id
    session.expunge_all()
    fetched = repo.get_by_ids([role_id])
    assert [p.name for p in fetched[0].permissions] == ["create_roles"]


def test_get_by_ids_skips_soft_deleted(repo, company):
    keep, drop = repo.create(
        [
            Role(name="keep", company_id=company.id),
            Role(name="drop", company_id=company.id),
        ]
    )
    assert repo.soft_delete_by_roles([drop]) == 1
    fetched = repo.get_by_ids([keep.id, drop.id])
    assert [role.id for role in fetched] == [keep.id]


def test_get_by_company_ids_filters_by_owner(repo, session, company):
    other = Company(name="Other")
    session.add(other)
    session.commit()
    repo.create(
        [
            Role(name="mine", company_id=company.id),
            Role(name="theirs", company_id=other.id),
        ]
    )
    assert [r.name for r in repo.get_by_company_ids([company.id])] == ["mine"]
    assert repo.get_by_company_ids([]) == []


def test_get_by_wms_ids_filters_by_owner(repo, wms, company):
    repo.create(
        [
            Role(name="wms role", wms_id=wms.id),
            Role(name="company role", company_id=company.id),
        ]
    )
    assert [r.name for r in repo.get_by_wms_ids([wms.id])] == ["wms role"]
    assert repo.get_by_wms_ids([]) == []


def test_name_exists_by_company_id_ignores_case(repo, company):
    repo.create([Role(name="Admin", company_id=company.id)])
    assert repo.name_exists_by_company_id(company.id, "admin") is True
    assert repo.name_exists_by_company_id(company.id, "ADMIN") is True
    assert repo.name_exists_by_company_id(company.id, "viewer") is False
    assert repo.name_exists_by_company_id(uuid.uuid4(), "Admin") is False


def test_name_exists_by_wms_id_ignores_case(repo, wms):
    repo.create([Role(name="Manager", wms_id=wms.id)])
    assert repo.name_exists_by_wms_id(wms.id, "manager") is True
    assert repo.name_exists_by_wms_id(wms.id, "clerk") is False


def test_name_exists_ignores_soft_deleted(repo, company):
    role = Role(name="Admin", company_id=company.id)
    repo.create([role])
    repo.soft_delete_by_role_ids([role.id])
    assert repo.name_exists_by_company_id(company.id, "Admin") is False


def test_update_persists_changes(repo, session, company):
    role = Role(name="old", description="first", company_id=company.id)
    repo.create([role])
    role.name = "new"
    saved = repo.update([role])
    assert [r.name for r in saved] == ["new"]
    session.expunge_all()
    assert [r.name for r in repo.get_by_ids([role.id])] == ["new"]


def test_update_empty_returns_empty_list(repo):
    assert repo.update([]) == []


def test_soft_delete_marks_rows(repo, session, company):
    roles = repo.create(
        [Role(name="a", company_id=company.id), Role(name="b", company_id=company.id)]
    )
    ids = [r.id for r in roles]
    assert repo.soft_delete_by_role_ids(ids) == 2
    session.expunge_all()
    stored = session.scalars(select(Role).where(Role.id.in_(ids))).all()
    assert len(stored) == 2
    assert all(role.is_deleted() for role in stored)


def test_soft_delete_twice_marks_nothing_new(repo, company):
    role = Role(name="a", company_id=company.id)
    repo.create([role])
    assert repo.soft_delete_by_roles([role]) == 1
    assert repo.soft_delete_by_roles([role]) == 0


def test_empty_deletes_do_nothing(repo):
    assert repo.soft_delete_by_roles([]) == 0
    assert repo.soft_delete_by_role_ids([]) == 0
    assert repo.full_delete_by_roles([]) == 0
    assert repo.full_delete_by_role_ids([]) == 0


def test_full_delete_removes_soft_deleted_rows(repo, session, company):
    live = Role(name="live", company_id=company.id)
    gone = Role(name="gone", company_id=company.id)
    repo.create([live, gone])
    repo.soft_delete_by_roles([gone])
    assert repo.full_delete_by_roles([live, gone]) == 2
    session.expunge_all()
    assert session.scalars(select(Role)).all() == []


def test_full_delete_by_ids_leaves_others(repo, session, company):
    first, second = repo.create(
        [Role(name="a", company_id=company.id), Role(name="b", company_id=company.id)]
    )
    assert repo.full_delete_by_role_ids([first.id]) == 1
    session.expunge_all()
    remaining = session.scalars(select(Role)).all()
    assert [r.id for r in remaining] == [second.id]


def test_caller_transaction_can_be_rolled_back(repo, session, company):
    role = Role(name="temp", company_id=company.id)
    repo.create([role], tx=session)
    role_id = role.id
    assert [r.id for r in repo.get_by_ids([role_id], tx=session)] == [role_id]
    session.rollback()
    assert repo.get_by_ids([role_id]) == []