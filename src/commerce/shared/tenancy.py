"""Tenant scoping for repositories.

Every read issued by the engine carries the tenant predicate. A record of
another tenant is reported exactly like a missing one.
"""

from contextlib import contextmanager

import structlog
from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError, ValidationError

from commerce.exceptions import NotFound, PersistenceError

logger = structlog.get_logger(__name__)


@contextmanager
def store_errors(operation: str, **context):
    """Raise failures of the underlying store as ``PersistenceError``.

    Domain errors (validation, not found) pass through unchanged.
    """
    try:
        yield
    except (ValidationError, ObjectNotFoundError):
        raise
    except Exception as exc:
        logger.error("store_operation_failed", operation=operation, error=str(exc), **context)
        raise PersistenceError(f"Could not {operation}: {exc}") from exc


class TenantScopedRepository(BaseRepository):
    """Base for repositories of tenant-owned aggregates."""

    entity_label = "Record"

    def get_for_tenant(self, tenant_id, identifier):
        records = self._dao.query.filter(id=str(identifier), tenant_id=str(tenant_id)).all().items
        if not records:
            raise NotFound(self.entity_label, identifier)
        return records[0]

    def list_for_tenant(self, tenant_id, **filters) -> list:
        return self._dao.query.filter(tenant_id=str(tenant_id), **filters).all().items

    def count_for_tenant(self, tenant_id, **filters) -> int:
        return len(self.list_for_tenant(tenant_id, **filters))

    def remove(self, record):
        self._dao.delete(record)
