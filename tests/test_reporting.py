"""
Tests for the pure reporting functions: role scoping, rankings, counts and
the export workbook layout.
"""
from decimal import Decimal

import pytest

from conftest import credenciado_payload, empresa_payload, funcionario_payload
from credenciamento.models.empresa import Empresa
from credenciamento.models.enums import UserRole
from credenciamento.models.funcionario import Funcionario
from credenciamento.models.plano import Plano, Solicitacao
from credenciamento.services import reporting
from credenciamento.services.record_schema import validate_credenciado


def _empresa(empresa_id, headcount=10, owner=None, name=None):
    return Empresa.model_validate({
        **empresa_payload(numeroFuncionarios=headcount, accrediting_Id=owner),
        "razaoSocial": name or f"Empresa {empresa_id}",
        "nomeFantasia": name or f"Empresa {empresa_id}",
        "id": empresa_id,
    })


def _funcionario(funcionario_id, empresa_id):
    return Funcionario.model_validate({
        **funcionario_payload(empresaId=empresa_id, cpf=""),
        "id": funcionario_id,
    })


def _credenciado(credenciado_id, name=None):
    return validate_credenciado(
        credenciado_payload(nomeFantasia=name or f"Credenciado {credenciado_id}"),
        id=credenciado_id,
    )


def _request(request_id, owner, price, status, credenciado_id=None):
    return Solicitacao.model_validate({
        "id": request_id,
        "donoId": owner,
        "credenciado_id": credenciado_id,
        "preco": price,
        "status": status,
    })


class TestScopeByRole:
    def setup_method(self):
        self.companies = [_empresa("E1", owner="ACC1"), _empresa("E2", owner="ACC2")]
        self.employees = [
            _funcionario("F1", "E1"),
            _funcionario("F2", "E2"),
            _funcionario("F3", None),
        ]

    def test_business_sees_own_employees(self):
        visible = reporting.scope_by_role(self.employees, self.companies, UserRole.BUSINESS, "E1")
        assert [e.id for e in visible] == ["F1"]

    def test_accrediting_sees_employees_of_own_companies(self):
        visible = reporting.scope_by_role(
            self.employees, self.companies, UserRole.ACCREDITING, "ACC2",
        )
        assert [e.id for e in visible] == ["F2"]

    @pytest.mark.parametrize("role", [UserRole.ADMIN, "admin"])
    def test_admin_sees_everyone(self, role):
        visible = reporting.scope_by_role(self.employees, self.companies, role, "X")
        assert [e.id for e in visible] == ["F1", "F2", "F3"]

    def test_join_company_name(self):
        view = reporting.join_company_name(self.employees[0], self.companies)
        assert view.company_name == "Empresa E1"

    def test_join_unknown_company(self):
        view = reporting.join_company_name(self.employees[2], self.companies)
        assert view.company_name == reporting.UNKNOWN_COMPANY


class TestTopCompanies:
    def test_ties_keep_original_order(self):
        companies = [_empresa("A", 10), _empresa("B", 30), _empresa("C", 30)]
        top = reporting.top_companies_by_headcount(companies, 2)
        assert [c.id for c in top] == ["B", "C"]

    def test_default_size_is_five(self):
        companies = [_empresa(str(i), i + 1) for i in range(8)]
        top = reporting.top_companies_by_headcount(companies)
        assert [c.id for c in top] == ["7", "6", "5", "4", "3"]


class TestTopProviders:
    def test_confirmed_revenue_only(self):
        providers = [_credenciado("P1"), _credenciado("P2")]
        requests = [
            _request("S1", "P1", 100, "confirmado"),
            _request("S2", "P1", 50, "pendente"),
            _request("S3", "P2", 80, "confirmada"),
        ]
        ranked = reporting.top_providers_by_confirmed_revenue(requests, providers)
        assert [(r.credenciado.id, r.valor_total) for r in ranked] == [
            ("P1", Decimal("100")),
            ("P2", Decimal("80")),
        ]

    def test_unknown_owner_dropped(self):
        ranked = reporting.top_providers_by_confirmed_revenue(
            [_request("S1", "GHOST", 500, "confirmado")], [_credenciado("P1")],
        )
        assert ranked == []

    def test_ties_keep_first_appearance(self):
        providers = [_credenciado("P1"), _credenciado("P2")]
        requests = [
            _request("S1", "P2", 40, "confirmado"),
            _request("S2", "P1", 40, "confirmado"),
        ]
        ranked = reporting.top_providers_by_confirmed_revenue(requests, providers)
        assert [r.credenciado.id for r in ranked] == ["P2", "P1"]


class TestFilterPlans:
    def setup_method(self):
        self.plans = [
            Plano(id="1", nome="Ouro", accrediting_Id="ACC1"),
            Plano(id="2", nome="Prata", accrediting_Id="ACC2"),
        ]

    def test_accrediting_sees_own(self):
        assert [p.id for p in reporting.filter_plans(self.plans, UserRole.ACCREDITING, "ACC2")] == ["2"]

    def test_selected_accreditor(self):
        plans = reporting.filter_plans(self.plans, UserRole.ADMIN, "X", accreditor_id="ACC1")
        assert [p.id for p in plans] == ["1"]

    def test_no_selection_returns_all(self):
        assert len(reporting.filter_plans(self.plans, UserRole.ADMIN, "X")) == 2


class TestExportWorkbook:
    def test_sheets_and_rows(self):
        companies = [_empresa("E1", name="Alfa"), _empresa("E2", name="Beta")]
        employees = [_funcionario("F1", "E1"), _funcionario("F2", "E1")]
        providers = [_credenciado("P1", name="Clínica")]
        requests = [
            _request("S1", "P1", 100, "confirmado"),
            _request("S2", "X", 30, "confirmada", credenciado_id="P1"),
            _request("S3", "P1", 999, "pendente"),
        ]
        plans = [Plano(id="1")]

        workbook = reporting.build_export_workbook(
            companies, providers, employees, plans, requests,
        )

        assert list(workbook.sheets) == ["Resumo", "Empresas", "Faturamento"]
        assert workbook.sheets["Resumo"] == [{
            "Empresas Ativas": 2,
            "Credenciados Ativos": 1,
            "Funcionários Ativos": 2,
            "Planos Ativos": 1,
            "Serviços Totais": 3,
        }]
        assert workbook.sheets["Empresas"] == [
            {"Empresa": "Alfa", "Funcionários": 2},
            {"Empresa": "Beta", "Funcionários": 0},
        ]
        assert workbook.sheets["Faturamento"] == [
            {"Credenciado": "Clínica", "Faturamento Total": Decimal("130")},
        ]
