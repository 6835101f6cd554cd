"""
credenciamento/services/plano_service.py — Планы для выбора в формах.
"""

from __future__ import annotations

import logging

from credenciamento.db.repositories import document_repo
from credenciamento.models.plano import Plano
from credenciamento.models.user import CurrentUser
from credenciamento.services.reporting import filter_plans

logger = logging.getLogger(__name__)

COLLECTION = "planos"


async def load_planos() -> list[Plano]:
    docs = await document_repo.fetch_all(COLLECTION)
    return [Plano.model_validate(d) for d in docs]


async def list_planos(actor: CurrentUser, accreditor_id: str | None = None) -> list[Plano]:
    """Планы, доступные пользователю (или выбранной credenciadora)."""
    plans = await load_planos()
    return filter_plans(plans, actor.role, actor.uid, accreditor_id)
