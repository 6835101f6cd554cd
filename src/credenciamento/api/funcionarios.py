"""
credenciamento/api/funcionarios.py — Эндпоинты управления сотрудниками.

Помимо CRUD:
    POST /funcionarios/import           — CSV в теле запроса (text/csv)
    GET  /funcionarios/import/template  — шаблон CSV (только заголовки)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import Response

from credenciamento.exceptions import ValidationError
from credenciamento.models.funcionario import Funcionario, FuncionarioView
from credenciamento.models.user import CurrentUser
from credenciamento.services import funcionario_service
from credenciamento.services.employee_import import (
    TEMPLATE_FILENAME,
    ImportReport,
    csv_template,
    import_employees,
)
from credenciamento.services.rbac import require_permission

router = APIRouter(prefix="/funcionarios", tags=["funcionarios"])


@router.get("", response_model=list[FuncionarioView], summary="Список сотрудников")
async def list_funcionarios(
    user: CurrentUser = Depends(require_permission("funcionario.read")),
):
    """Сотрудники, видимые пользователю (без удалённых), с названием компании."""
    return await funcionario_service.list_funcionarios(user)


@router.post(
    "",
    response_model=Funcionario,
    status_code=status.HTTP_201_CREATED,
    summary="Создать сотрудника",
)
async def create_funcionario(
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("funcionario.write")),
):
    return await funcionario_service.create_funcionario(body, user)


@router.post("/import", response_model=ImportReport, summary="Импорт сотрудников из CSV")
async def import_funcionarios(
    request: Request,
    user: CurrentUser = Depends(require_permission("funcionario.import")),
):
    """Строки импортируются по одной; ошибки строк возвращаются в ``failures``."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError(
            "Unreadable CSV file",
            errors=[{"path": "file", "message": "File must be UTF-8 encoded"}],
        ) from exc
    return await import_employees(text, user)


@router.get("/import/template", summary="Шаблон CSV для импорта")
async def import_template(
    user: CurrentUser = Depends(require_permission("funcionario.import")),
):
    return Response(
        content=csv_template(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )


@router.get("/{funcionario_id}", response_model=FuncionarioView, summary="Сотрудник по id")
async def get_funcionario(
    funcionario_id: str,
    user: CurrentUser = Depends(require_permission("funcionario.read")),
):
    return await funcionario_service.get_funcionario(funcionario_id, user)


@router.put("/{funcionario_id}", response_model=Funcionario, summary="Перезаписать сотрудника")
async def update_funcionario(
    funcionario_id: str,
    body: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_permission("funcionario.write")),
):
    return await funcionario_service.update_funcionario(funcionario_id, body, user)


@router.delete(
    "/{funcionario_id}",
    response_model=Funcionario,
    summary="Пометить сотрудника удалённым",
)
async def delete_funcionario(
    funcionario_id: str,
    user: CurrentUser = Depends(require_permission("funcionario.write")),
):
    """Мягкое удаление: запись остаётся с ``isDeleted=true`` и ``deletedAt``."""
    return await funcionario_service.delete_funcionario(funcionario_id, user)
