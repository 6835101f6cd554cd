"""
credenciamento/api/empresas.py — Эндпоинты управления компаниями.

Тело запроса принимается как JSON-объект и проверяется в
``services.record_schema`` (ошибки полей → 422 с путями ``contatoRH.email``).
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from credenciamento.models.empresa import Empresa
from credenciamento.models.user import CurrentUser
from credenciamento.services import empresa_service
from credenciamento.services.rbac import require_permission

router = APIRouter(prefix="/empresas", tags=["empresas"])


@router.get("", response_model=list[Empresa], summary="Список компаний")
async def list_empresas(user: CurrentUser = Depends(require_permission("empresa.read"))):
    return await empresa_service.list_empresas(user)


@router.post(
    "",
    response_model=Empresa,
    status_code=status.HTTP_201_CREATED,
    summary="Создать компанию (и её учётную запись)",
)
async def create_empresa(
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("empresa.write")),
):
    return await empresa_service.create_empresa(body, user)


@router.get("/{empresa_id}", response_model=Empresa, summary="Компания по id")
async def get_empresa(
    empresa_id: str,
    user: CurrentUser = Depends(require_permission("empresa.read")),
):
    return await empresa_service.get_empresa(empresa_id, user)


@router.put("/{empresa_id}", response_model=Empresa, summary="Перезаписать компанию")
async def update_empresa(
    empresa_id: str,
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("empresa.write")),
):
    return await empresa_service.update_empresa(empresa_id, body, user)


@router.delete(
    "/{empresa_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить компанию",
)
async def delete_empresa(
    empresa_id: str,
    user: CurrentUser = Depends(require_permission("empresa.write")),
):
    await empresa_service.delete_empresa(empresa_id, user)
