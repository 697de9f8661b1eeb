"""WhatsApp message template routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import TemplateResponse, TemplateUpdate, template_columns
from eventdesk.models.database import WhatsappTemplate
from eventdesk.web.auth.rbac import RequestScope, get_scope

router = APIRouter(prefix="/api/whatsapp-templates", tags=["templates"])


async def _template_in_scope(template_id: int, scope: RequestScope) -> WhatsappTemplate:
    template = await scope.repos.templates.get(template_id)
    if template is None:
        raise ResourceNotInTenantError("Template")
    await scope.for_resource(template, label="Template")
    return template


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: int, scope: RequestScope = Depends(get_scope)
) -> TemplateResponse:
    return TemplateResponse.from_record(await _template_in_scope(template_id, scope))


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    body: TemplateUpdate,
    scope: RequestScope = Depends(get_scope),
) -> TemplateResponse:
    template = await _template_in_scope(template_id, scope)
    updated = await scope.repos.templates.update(
        template_id, template_columns(body.model_dump(exclude_unset=True))
    )
    return TemplateResponse.from_record(updated or template)


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: int, scope: RequestScope = Depends(get_scope)) -> Response:
    await _template_in_scope(template_id, scope)
    await scope.repos.templates.delete(template_id)
    return Response(status_code=204)


@router.post("/{template_id}/mark-used", response_model=TemplateResponse)
async def mark_template_used(
    template_id: int, scope: RequestScope = Depends(get_scope)
) -> TemplateResponse:
    template = await _template_in_scope(template_id, scope)
    used = await scope.repos.templates.mark_used(template_id)
    return TemplateResponse.from_record(used or template)
