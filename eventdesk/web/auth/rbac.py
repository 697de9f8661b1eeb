"""Role checks and tenant resolution dependencies for requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import Depends, HTTPException, Query

from eventdesk.exceptions import (
    AccessDeniedError,
    ResourceNotInTenantError,
    TenantNotFoundError,
)
from eventdesk.tenancy.gate import TenantGate
from eventdesk.tenancy.resolver import parse_event_id
from eventdesk.tenancy.scoping import TenantOf, direct_tenant, ensure_in_tenant
from eventdesk.types import ContextSource, Role
from eventdesk.web.auth.session import CurrentSession, require_auth
from eventdesk.web.dependencies import Repositories, get_gate, get_repos
from eventdesk.web.tenant_context import Principal, TenantContext

logger = structlog.get_logger(__name__)


async def get_principal(session: CurrentSession = Depends(require_auth)) -> Principal:
    return Principal.from_session(session.data)


async def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    """Require admin role."""
    if principal.role is not Role.ADMIN:
        logger.warning("admin_required", user_id=principal.user_id, role=principal.role.value)
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal


@dataclass(slots=True)
class RequestScope:
    """Everything a handler needs to resolve its event.

    Handlers pick the entry point matching how the event is named:
    :meth:`for_event` for an event id in the path, :meth:`for_resource` for a
    fetched resource, :meth:`from_context` for query or session context.
    """

    principal: Principal
    session: CurrentSession
    gate: TenantGate
    repos: Repositories
    query_event_id: str | None = None

    async def for_event(self, raw_event_id: object) -> TenantContext:
        """Resolve an event named in the path. Malformed ids are a 400."""
        return await self.gate.enter(
            self.principal,
            self.session,
            resource_event_id=parse_event_id(raw_event_id),
            source=ContextSource.EXPLICIT,
        )

    async def from_context(self, *, fallback: bool = False) -> TenantContext:
        return await self.gate.enter(
            self.principal,
            self.session,
            query_value=self.query_event_id,
            fallback=fallback,
        )

    async def for_resource(
        self,
        resource: Any,
        tenant_of: TenantOf = direct_tenant,
        *,
        label: str,
    ) -> TenantContext:
        """Resolve the event owning ``resource`` and check the principal may use it.

        A resource under an event the principal cannot see is reported exactly
        like a missing one.
        """
        if resource is None:
            raise ResourceNotInTenantError(label)
        owner = await tenant_of(resource)
        if owner is None:
            raise ResourceNotInTenantError(label)
        try:
            context = await self.gate.enter(self.principal, self.session, resource_event_id=owner)
        except (AccessDeniedError, TenantNotFoundError) as exc:
            raise ResourceNotInTenantError(label) from exc
        await ensure_in_tenant(resource, context.event_id, tenant_of, label=label)
        return context


async def get_scope(
    session: CurrentSession = Depends(require_auth),
    gate: TenantGate = Depends(get_gate),
    repos: Repositories = Depends(get_repos),
    query_event_id: str | None = Query(default=None, alias="eventId"),
) -> RequestScope:
    return RequestScope(
        principal=Principal.from_session(session.data),
        session=session,
        gate=gate,
        repos=repos,
        query_event_id=query_event_id,
    )


async def get_tenant(scope: RequestScope = Depends(get_scope)) -> TenantContext:
    """Resolve the tenant from the ``eventId`` query parameter or the session."""
    return await scope.from_context()
