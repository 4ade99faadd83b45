"""Tenant and soft-delete visibility for catalog queries.

Every read in the catalog starts from a :class:`VisibilityScope`. A viewer
that is not allowed to span tenants and has no tenant of its own resolves to
a scope that matches nothing, so an unresolved tenant never widens a query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, and_, false, true

from shared.models.user import Viewer


@dataclass(frozen=True)
class VisibilityScope:
    tenant_id: int | None
    cross_tenant: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.cross_tenant and self.tenant_id is None

    def tenant_clause(self, model: Any) -> ColumnElement[bool]:
        if self.cross_tenant:
            return true()
        if self.tenant_id is None:
            return false()
        return model.tenant_id == self.tenant_id

    def visible(self, model: Any) -> ColumnElement[bool]:
        """Rows of ``model`` in the viewer's tenant that are active and not deleted."""
        return and_(
            self.tenant_clause(model),
            model.is_active.is_(True),
            model.is_deleted.is_(False),
        )


def resolve_scope(viewer: Viewer) -> VisibilityScope:
    if viewer.cross_tenant:
        return VisibilityScope(tenant_id=None, cross_tenant=True)
    return VisibilityScope(tenant_id=viewer.tenant_id)
