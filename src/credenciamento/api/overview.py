"""
credenciamento/api/overview.py — Панель управления и выгрузка в XLSX.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from credenciamento.config import get_settings
from credenciamento.models.user import CurrentUser
from credenciamento.services import overview_service
from credenciamento.services.export import XLSX_MEDIA_TYPE
from credenciamento.services.overview_service import Overview
from credenciamento.services.rbac import require_permission

router = APIRouter(prefix="/overview", tags=["overview"])


@router.get("", response_model=Overview, summary="Счётчики и рейтинги")
async def get_overview(user: CurrentUser = Depends(require_permission("overview.read"))):
    return await overview_service.get_overview()


@router.get("/export", summary="Выгрузка панели (XLSX)")
async def export_overview(
    user: CurrentUser = Depends(require_permission("overview.export")),
):
    content = await overview_service.export_overview()
    filename = get_settings().export_filename
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
