"""Shared plumbing for the table repositories."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.orm import with_loader_criteria

from .models import SoftDeleteMixin


def ids_of(records):
    """Return the primary keys of records, in order."""
    return [record.id for record in records]


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Repository:
    """Base for repositories bound to a default session.

    Every operation takes an optional ``tx`` session. When given, the caller owns
    the transaction; otherwise the repository's own session is used and writes
    are committed immediately (and rolled back on failure).
    """

    def __init__(self, session):
        self.session = session
        self.log = logging.LoggerAdapter(
            logging.getLogger("slotter.repos"), {"repo": type(self).__name__}
        )

    def _db(self, tx):
        return self.session if tx is None else tx

    @contextmanager
    def _writing(self, tx):
        if tx is not None:
            yield tx
            return
        session = self.session
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise

    @staticmethod
    def _live(model):
        """A select of model that skips soft-deleted rows, also in eager loads."""
        return select(model).options(
            with_loader_criteria(
                SoftDeleteMixin,
                lambda cls: cls.deleted_at.is_(None),
                include_aliases=True,
            )
        )

    def _fetch(self, statement, tx):
        return list(self._db(tx).scalars(statement).all())

    def _create(self, records, tx):
        records = list(records)
        if not records:
            self.log.debug("nothing to create")
            return []
        with self._writing(tx) as session:
            session.add_all(records)
            session.flush()
        self.log.info("created %d records", len(records))
        return records

    def _save(self, records, tx):
        records = list(records)
        if not records:
            self.log.debug("nothing to update")
            return []
        with self._writing(tx) as session:
            saved = [session.merge(record) for record in records]
            session.flush()
        self.log.info("updated %d records", len(saved))
        return saved

    def _soft_delete(self, model, criterion, tx):
        statement = (
            update(model)
            .where(criterion, model.deleted_at.is_(None))
            .values(deleted_at=_utcnow())
            .execution_options(synchronize_session="fetch")
        )
        with self._writing(tx) as session:
            count = session.execute(statement).rowcount
        self.log.info("soft deleted %d rows", count)
        return count

    def _hard_delete(self, model, criterion, tx):
        statement = (
            delete(model)
            .where(criterion)
            .execution_options(synchronize_session="fetch")
        )
        with self._writing(tx) as session:
            count = session.execute(statement).rowcount
        self.log.info("fully deleted %d rows", count)
        return count