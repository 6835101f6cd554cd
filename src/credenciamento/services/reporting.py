"""
credenciamento/services/reporting.py — Агрегаты и рейтинги для панели управления.

Чистые функции над уже загруженными коллекциями: без I/O, без контекста
текущего пользователя (роль и id передаются явно).

Сортировки стабильны: при равных значениях сохраняется исходный порядок
(для выручки — порядок первого появления credenciado среди заявок).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from pydantic import BaseModel, Field

from credenciamento.models.common import DocumentBase
from credenciamento.models.credenciado import Credenciado, CredenciadoBase
from credenciamento.models.empresa import Empresa
from credenciamento.models.enums import UserRole
from credenciamento.models.funcionario import Funcionario, FuncionarioView
from credenciamento.models.plano import Plano, Solicitacao

UNKNOWN_COMPANY = "Empresa desconhecida"

SHEET_SUMMARY = "Resumo"
SHEET_COMPANIES = "Empresas"
SHEET_REVENUE = "Faturamento"


class ProviderRevenue(DocumentBase):
    """Credenciado и сумма подтверждённых заявок."""
    credenciado: Credenciado
    valor_total: Decimal


class OverviewCounts(DocumentBase):
    """Пять счётчиков панели."""
    empresas: int
    credenciados: int
    funcionarios: int
    planos: int
    solicitacoes: int


class ExportWorkbook(BaseModel):
    """Табличная выгрузка: имя листа → строки (порядок листов сохраняется)."""
    sheets: dict[str, list[dict]] = Field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════════════════
# ФИЛЬТРАЦИЯ ПО РОЛИ И JOIN
# ═══════════════════════════════════════════════════════════════════════════


def scope_by_role(
    employees: Sequence[Funcionario],
    companies: Sequence[Empresa],
    role: UserRole | str,
    current_user_id: str,
) -> list[Funcionario]:
    """
    Сотрудники, видимые пользователю.

    business    → сотрудники своей компании (empresaId == uid);
    accrediting → сотрудники компаний, где accrediting_Id == uid;
    остальные   → все.
    """
    if role == UserRole.BUSINESS:
        return [e for e in employees if e.empresa_id == current_user_id]
    if role == UserRole.ACCREDITING:
        company_ids = {c.id for c in companies if c.accrediting_id == current_user_id}
        return [e for e in employees if e.empresa_id in company_ids]
    return list(employees)


def join_company_name(employee: Funcionario, companies: Sequence[Empresa]) -> FuncionarioView:
    """Добавляет к сотруднику razaoSocial его компании."""
    company = next((c for c in companies if c.id == employee.empresa_id), None)
    name = company.razao_social if company else UNKNOWN_COMPANY
    return FuncionarioView(**employee.model_dump(), company_name=name)


def scope_companies(
    companies: Sequence[Empresa], role: UserRole | str, current_user_id: str,
) -> list[Empresa]:
    """Компании, видимые пользователю (accrediting → свои, business → своя)."""
    if role == UserRole.ACCREDITING:
        return [c for c in companies if c.accrediting_id == current_user_id]
    if role == UserRole.BUSINESS:
        return [c for c in companies if c.id == current_user_id]
    return list(companies)


def scope_credenciados(
    providers: Sequence[CredenciadoBase], role: UserRole | str, current_user_id: str,
) -> list[CredenciadoBase]:
    """Credenciados, видимые пользователю (accrediting → свои, accredited → себя)."""
    if role == UserRole.ACCREDITING:
        return [p for p in providers if p.accrediting_id == current_user_id]
    if role == UserRole.ACCREDITED:
        return [p for p in providers if p.id == current_user_id]
    return list(providers)


def filter_plans(
    plans: Sequence[Plano],
    role: UserRole | str,
    current_user_id: str,
    accreditor_id: str | None = None,
) -> list[Plano]:
    """
    Планы для выбора в форме.

    accrediting → только свои; иначе — планы выбранной credenciadora,
    а без выбора — все. Отдача всех планов без выбора соответствует форме
    компании; в форме credenciado список планов пуст, пока credenciadora
    не выбрана, и эту развилку делает вызывающая сторона.
    """
    if role == UserRole.ACCREDITING:
        return [p for p in plans if p.accrediting_id == current_user_id]
    if accreditor_id:
        return [p for p in plans if p.accrediting_id == accreditor_id]
    return list(plans)


# ═══════════════════════════════════════════════════════════════════════════
# РЕЙТИНГИ
# ═══════════════════════════════════════════════════════════════════════════


def top_companies_by_headcount(companies: Sequence[Empresa], n: int = 5) -> list[Empresa]:
    """Top-N компаний по numeroFuncionarios (стабильно, по убыванию)."""
    return sorted(companies, key=lambda c: c.numero_funcionarios, reverse=True)[:n]


def confirmed_requests(requests: Iterable[Solicitacao]) -> list[Solicitacao]:
    return [r for r in requests if r.is_confirmed]


def top_providers_by_confirmed_revenue(
    requests: Sequence[Solicitacao],
    providers: Sequence[CredenciadoBase],
    n: int = 5,
) -> list[ProviderRevenue]:
    """
    Top-N credenciados по сумме подтверждённых заявок.

    Группировка по donoId в порядке первого появления; группы без
    соответствующего credenciado отбрасываются.
    """
    totals: dict[str, Decimal] = {}
    for request in confirmed_requests(requests):
        totals[request.dono_id] = totals.get(request.dono_id, Decimal("0")) + request.preco

    by_id = {p.id: p for p in providers}
    ranked = [
        ProviderRevenue(credenciado=by_id[owner], valor_total=total)
        for owner, total in totals.items()
        if owner in by_id
    ]
    ranked.sort(key=lambda item: item.valor_total, reverse=True)
    return ranked[:n]


# ═══════════════════════════════════════════════════════════════════════════
# СВОДКА И ВЫГРУЗКА
# ═══════════════════════════════════════════════════════════════════════════


def overview_counts(
    companies: Sequence[Empresa],
    providers: Sequence[CredenciadoBase],
    employees: Sequence[Funcionario],
    plans: Sequence[Plano],
    requests: Sequence[Solicitacao],
) -> OverviewCounts:
    return OverviewCounts(
        empresas=len(companies),
        credenciados=len(providers),
        funcionarios=len(employees),
        planos=len(plans),
        solicitacoes=len(requests),
    )


def build_export_workbook(
    companies: Sequence[Empresa],
    providers: Sequence[CredenciadoBase],
    employees: Sequence[Funcionario],
    plans: Sequence[Plano],
    requests: Sequence[Solicitacao],
) -> ExportWorkbook:
    """
    Три листа выгрузки:

        Resumo      — одна строка с пятью счётчиками;
        Empresas    — компания и число её сотрудников (по empresaId);
        Faturamento — credenciado и сумма подтверждённых заявок, где он
                      donoId либо credenciado_id.
    """
    counts = overview_counts(companies, providers, employees, plans, requests)
    summary = [{
        "Empresas Ativas": counts.empresas,
        "Credenciados Ativos": counts.credenciados,
        "Funcionários Ativos": counts.funcionarios,
        "Planos Ativos": counts.planos,
        "Serviços Totais": counts.solicitacoes,
    }]

    company_rows = [
        {
            "Empresa": company.nome_fantasia,
            "Funcionários": sum(1 for e in employees if e.empresa_id == company.id),
        }
        for company in companies
    ]

    confirmed = confirmed_requests(requests)
    revenue_rows = [
        {
            "Credenciado": provider.nome_fantasia,
            "Faturamento Total": sum(
                (
                    r.preco for r in confirmed
                    if provider.id in (r.dono_id, r.credenciado_id)
                ),
                Decimal("0"),
            ),
        }
        for provider in providers
    ]

    return ExportWorkbook(sheets={
        SHEET_SUMMARY: summary,
        SHEET_COMPANIES: company_rows,
        SHEET_REVENUE: revenue_rows,
    })


__all__ = [
    "UNKNOWN_COMPANY",
    "ProviderRevenue",
    "OverviewCounts",
    "ExportWorkbook",
    "scope_by_role",
    "join_company_name",
    "scope_companies",
    "scope_credenciados",
    "filter_plans",
    "top_companies_by_headcount",
    "top_providers_by_confirmed_revenue",
    "overview_counts",
    "build_export_workbook",
]
