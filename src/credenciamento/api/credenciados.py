"""
credenciamento/api/credenciados.py — Эндпоинты управления credenciados.

Логотип передаётся в JSON как ``imagem: {"contentType": ..., "data": <base64>}``.
Ответ — один из вариантов ``Credenciado`` (по ``tipoPessoa``/``documentoTipo``).
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from credenciamento.models.credenciado import Credenciado
from credenciamento.models.user import CurrentUser
from credenciamento.services import credenciado_service
from credenciamento.services.rbac import require_permission

router = APIRouter(prefix="/credenciados", tags=["credenciados"])


@router.get("", response_model=list[Credenciado], summary="Список credenciados")
async def list_credenciados(
    user: CurrentUser = Depends(require_permission("credenciado.read")),
):
    return await credenciado_service.list_credenciados(user)


@router.post(
    "",
    response_model=Credenciado,
    status_code=status.HTTP_201_CREATED,
    summary="Зарегистрировать credenciado",
)
async def create_credenciado(
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("credenciado.write")),
):
    return await credenciado_service.create_credenciado(body, user)


@router.get("/{credenciado_id}", response_model=Credenciado, summary="Credenciado по id")
async def get_credenciado(
    credenciado_id: str,
    user: CurrentUser = Depends(require_permission("credenciado.read")),
):
    return await credenciado_service.get_credenciado(credenciado_id, user)


@router.put("/{credenciado_id}", response_model=Credenciado, summary="Перезаписать credenciado")
async def update_credenciado(
    credenciado_id: str,
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("credenciado.write")),
):
    return await credenciado_service.update_credenciado(credenciado_id, body, user)


@router.delete(
    "/{credenciado_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить credenciado",
)
async def delete_credenciado(
    credenciado_id: str,
    user: CurrentUser = Depends(require_permission("credenciado.write")),
):
    await credenciado_service.delete_credenciado(credenciado_id, user)
