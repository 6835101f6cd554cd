"""
credenciamento/api/validate.py — Проверка записи без сохранения.

POST /validate/{entity} (entity: empresas | funcionarios | credenciados)
→ ``{"valid": bool, "errors": [{"path", "message"}]}``. Всегда 200:
ошибки полей — это нормальный ответ, а не сбой запроса.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from credenciamento.dependencies import get_current_user
from credenciamento.models.user import CurrentUser
from credenciamento.services.record_schema import VALIDATORS, validate_fields

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("/{entity}", summary="Проверить поля записи")
async def validate_record(
    entity: str,
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(get_current_user),
):
    if entity not in VALIDATORS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown entity '{entity}'",
        )
    errors = validate_fields(entity, body)
    return {"valid": not errors, "errors": [e.model_dump() for e in errors]}
