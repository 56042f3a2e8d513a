"""Repository for company records."""

from __future__ import annotations

from sqlalchemy.orm import selectinload

from .models import Company
from .repository import Repository, ids_of


class CompanyRepo(Repository):
    """Create, read, update and delete companies."""

    def create(self, companies, tx=None):
        """Insert companies and return them with their keys set."""
        return self._create(companies, tx)

    def get_by_ids(self, company_ids, tx=None):
        """Lock and return live companies with the given ids, users preloaded."""
        company_ids = list(company_ids)
        if not company_ids:
            return []
        statement = (
            self._live(Company)
            .options(selectinload(Company.users))
            .where(Company.id.in_(company_ids))
            .with_for_update()
        )
        results = self._fetch(statement, tx)
        self.log.info("fetched %d companies by id", len(results))
        return results

    def get_by_wms_ids(self, wms_ids, tx=None):
        """Lock and return live companies served by the given WMS ids."""
        wms_ids = list(wms_ids)
        if not wms_ids:
            return []
        statement = (
            self._live(Company)
            .options(selectinload(Company.users))
            .where(Company.wms_id.in_(wms_ids))
            .with_for_update()
        )
        results = self._fetch(statement, tx)
        self.log.info("fetched %d companies by wms id", len(results))
        return results

    def update(self, companies, tx=None):
        """Save every field of each company and return the saved instances."""
        return self._save(companies, tx)

    def soft_delete_by_companies(self, companies, tx=None):
        """Soft delete the given companies; return the number of rows marked."""
        return self.soft_delete_by_company_ids(ids_of(companies), tx)

    def soft_delete_by_company_ids(self, company_ids, tx=None):
        """Soft delete companies by id; return the number of rows marked."""
        company_ids = list(company_ids)
        if not company_ids:
            return 0
        return self._soft_delete(Company, Company.id.in_(company_ids), tx)

    def full_delete_by_companies(self, companies, tx=None):
        """Permanently delete the given companies; return the rows removed."""
        return self.full_delete_by_company_ids(ids_of(companies), tx)

    def full_delete_by_company_ids(self, company_ids, tx=None):
        """Permanently delete companies by id, soft-deleted ones included."""
        company_ids = list(company_ids)
        if not company_ids:
            return 0
        return self._hard_delete(Company, Company.id.in_(company_ids), tx)