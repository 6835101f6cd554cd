"""
credenciamento/api/planos.py — Планы для выбора в формах.
"""

from fastapi import APIRouter, Depends, Query

from credenciamento.models.plano import Plano
from credenciamento.models.user import CurrentUser
from credenciamento.services import plano_service
from credenciamento.services.rbac import require_permission

router = APIRouter(prefix="/planos", tags=["planos"])


@router.get("", response_model=list[Plano], summary="Список планов")
async def list_planos(
    accreditor_id: str | None = Query(None, alias="accreditorId"),
    user: CurrentUser = Depends(require_permission("plano.read")),
):
    """Credenciadora видит свои планы; остальные — планы выбранной credenciadora."""
    return await plano_service.list_planos(user, accreditor_id)
