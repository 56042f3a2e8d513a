"""ORM models for companies, warehouse-management systems, users, roles and permissions."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base shared by every table."""


class SoftDeleteMixin:
    """Adds a ``deleted_at`` marker; rows with it set count as deleted."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime, default=None, index=True
    )

    def is_deleted(self):
        """Return True once the row has been soft deleted."""
        return self.deleted_at is not None


class _Keyed:
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


permissions_roles = Table(
    "permissions_roles",
    Base.metadata,
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "permission_id",
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Wms(_Keyed, SoftDeleteMixin, Base):
    """A warehouse-management system account."""

    __tablename__ = "wms"

    name: Mapped[str] = mapped_column(String(255), default="")

    companies: Mapped[list[Company]] = relationship(back_populates="wms")
    users: Mapped[list[User]] = relationship(back_populates="wms")
    roles: Mapped[list[Role]] = relationship(back_populates="wms")


class Company(_Keyed, SoftDeleteMixin, Base):
    """A company, optionally served by a WMS."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), default="")
    wms_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wms.id"), default=None, index=True
    )

    wms: Mapped[Wms | None] = relationship(back_populates="companies")
    users: Mapped[list[User]] = relationship(back_populates="company")
    roles: Mapped[list[Role]] = relationship(back_populates="company")
    warehouses: Mapped[list[Warehouse]] = relationship(back_populates="company")


class Permission(_Keyed, SoftDeleteMixin, Base):
    """A named permission that roles may hold."""

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(255), default="", index=True)
    permission_type: Mapped[str] = mapped_column(String(255), default="")

    roles: Mapped[list[Role]] = relationship(
        secondary=permissions_roles, back_populates="permissions"
    )


class Role(_Keyed, SoftDeleteMixin, Base):
    """A role owned by a company or a WMS."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("companies.id"), default=None, index=True
    )
    wms_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wms.id"), default=None, index=True
    )

    company: Mapped[Company | None] = relationship(back_populates="roles")
    wms: Mapped[Wms | None] = relationship(back_populates="roles")
    permissions: Mapped[list[Permission]] = relationship(
        secondary=permissions_roles, back_populates="roles"
    )
    users: Mapped[list[User]] = relationship(back_populates="role")


class User(_Keyed, SoftDeleteMixin, Base):
    """A user belonging to a company or a WMS."""

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(255), default="")
    last_name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="", index=True)
    phone_number: Mapped[str | None] = mapped_column(String(64), default=None)
    user_type: Mapped[str] = mapped_column(String(64), default="")
    wms_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wms.id"), default=None, index=True
    )
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("companies.id"), default=None, index=True
    )
    role_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("roles.id"), default=None, index=True
    )

    wms: Mapped[Wms | None] = relationship(back_populates="users")
    company: Mapped[Company | None] = relationship(back_populates="users")
    role: Mapped[Role | None] = relationship(back_populates="users")


class Warehouse(_Keyed, SoftDeleteMixin, Base):
    """A physical warehouse owned by a company."""

    __tablename__ = "warehouses"

    name: Mapped[str] = mapped_column(String(255), default="")
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("companies.id"), default=None, index=True
    )

    company: Mapped[Company | None] = relationship(back_populates="warehouses")


def create_schema(engine):
    """Create every table that does not exist yet."""
    Base.metadata.create_all(engine)