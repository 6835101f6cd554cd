"""
credenciamento/services/overview_service.py — Панель управления.

Загружает все коллекции (без фильтрации по роли: панель видят только
admin и credenciadoras) и передаёт их в чистые функции ``reporting``.
Удалённые сотрудники в счётчики не входят.
"""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple


from credenciamento.config import get_settings
from credenciamento.db.repositories import document_repo
from credenciamento.models.common import DocumentBase
from credenciamento.models.credenciado import CredenciadoBase
from credenciamento.models.empresa import Empresa
from credenciamento.models.funcionario import Funcionario
from credenciamento.models.plano import Plano, Solicitacao
from credenciamento.services import reporting
from credenciamento.services.credenciado_service import load_credenciados
from credenciamento.services.export import write_xlsx
from credenciamento.services.funcionario_service import active_funcionarios, load_companies
from credenciamento.services.plano_service import load_planos

logger = logging.getLogger(__name__)

REQUESTS_COLLECTION = "solicitacoes"


class Overview(DocumentBase):
    """Ответ панели: счётчики и два рейтинга."""
    counts: reporting.OverviewCounts
    top_empresas: list[Empresa]
    top_credenciados: list[reporting.ProviderRevenue]


class _Collections(NamedTuple):
    companies: list[Empresa]
    providers: list[CredenciadoBase]
    employees: list[Funcionario]
    plans: list[Plano]
    requests: list[Solicitacao]


async def load_solicitacoes() -> list[Solicitacao]:
    docs = await document_repo.fetch_all(REQUESTS_COLLECTION)
    return [Solicitacao.model_validate(d) for d in docs]


async def _load_collections() -> _Collections:
    companies, providers, employees, plans, requests = await asyncio.gather(
        load_companies(),
        load_credenciados(),
        active_funcionarios(),
        load_planos(),
        load_solicitacoes(),
    )
    return _Collections(
        companies=companies,
        providers=providers,
        employees=employees,
        plans=plans,
        requests=requests,
    )


async def get_overview() -> Overview:
    data = await _load_collections()
    size = get_settings().ranking_size
    return Overview(
        counts=reporting.overview_counts(
            data.companies, data.providers, data.employees, data.plans, data.requests,
        ),
        top_empresas=reporting.top_companies_by_headcount(data.companies, size),
        top_credenciados=reporting.top_providers_by_confirmed_revenue(
            data.requests, data.providers, size,
        ),
    )


async def export_overview() -> bytes:
    """Выгрузка панели в XLSX (листы Resumo, Empresas, Faturamento)."""
    data = await _load_collections()
    workbook = reporting.build_export_workbook(
        data.companies, data.providers, data.employees, data.plans, data.requests,
    )
    logger.info(
        "Overview export built: %d companies, %d providers",
        len(data.companies), len(data.providers),
    )
    return write_xlsx(workbook)
