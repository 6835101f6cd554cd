"""
Tests for CSV employee import: company resolution, per-row failures and
the header template.
"""
import asyncio

import asyncpg
import pytest

from conftest import VALID_CPF, empresa_payload
from credenciamento.db.repositories import document_repo, identity_repo
from credenciamento.exceptions import ValidationError
from credenciamento.models.enums import UserRole
from credenciamento.services import empresa_service
from credenciamento.services.employee_import import CSV_COLUMNS, csv_template, import_employees

HEADER = ",".join(CSV_COLUMNS)


def _csv(*rows) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


class TestTemplate:
    def test_header_only(self):
        assert csv_template() == (
            "nome,dataNascimento,endereco,cpf,email,telefone,pessoasNaCasa,empresa\n"
        )


class TestImportEmployees:
    def test_rows_resolve_company_by_trade_name(self, admin):
        company = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        text = _csv(
            f'Ana Souza,31/12/1990,"Av. Paulista, 1000",{VALID_CPF},ana@example.com,(11) 98765-4321,3,Alfa',
            "Bruno Lima,01/02/1985,Rua Azul 55,,bruno@example.com,(11) 3456-7890,,Desconhecida",
        )

        report = asyncio.run(import_employees(text, admin))

        assert len(report.imported) == 2
        assert report.failures == []
        ana = asyncio.run(document_repo.fetch_by_id("funcionarios", report.imported[0]))
        bruno = asyncio.run(document_repo.fetch_by_id("funcionarios", report.imported[1]))
        assert ana["empresaId"] == company.id
        assert ana["cpf"] == VALID_CPF
        assert bruno["empresaId"] is None

    def test_business_actor_owns_every_row(self, make_user):
        business = make_user(UserRole.BUSINESS, "Beta")
        text = _csv("Carla Dias,10/10/2000,Rua Sol 123,,carla@example.com,(21) 99876-5432,2,Outra")

        report = asyncio.run(import_employees(text, business))

        doc = asyncio.run(document_repo.fetch_by_id("funcionarios", report.imported[0]))
        assert doc["empresaId"] == business.uid

    def test_failed_row_does_not_stop_import(self, admin):
        text = _csv(
            "Ana Souza,31/12/1990,Rua Sol 123,,ana@example.com,(11) 98765-4321,,",
            "Invalido,1990-12-31,Rua Sol 123,,inv@example.com,(11) 98765-4321,,",
            "Ana Dupla,01/01/1991,Rua Sol 123,,ana@example.com,(11) 98765-4321,,",
            "Davi Reis,02/02/1992,Rua Sol 123,,davi@example.com,(11) 98765-4321,,",
        )

        report = asyncio.run(import_employees(text, admin))

        assert len(report.imported) == 2
        assert [(f.row, f.nome) for f in report.failures] == [(2, "Invalido"), (3, "Ana Dupla")]
        assert report.failures[1].details == {"field": "email"}

    def test_blank_lines_are_skipped(self, admin):
        text = HEADER + "\n\nEva Luz,05/05/1995,Rua Sol 123,,eva@example.com,(11) 98765-4321,,\n\n"
        report = asyncio.run(import_employees(text, admin))
        assert len(report.imported) == 1

    def test_missing_columns_abort(self, admin):
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(import_employees("nome,email\nAna,ana@example.com\n", admin))
        assert {e["path"] for e in exc_info.value.errors} == {
            "dataNascimento", "endereco", "cpf", "telefone", "pessoasNaCasa", "empresa",
        }

    def test_empty_file_is_rejected(self, admin):
        with pytest.raises(ValidationError):
            asyncio.run(import_employees("", admin))

    @pytest.mark.parametrize("error", [
        asyncpg.UniqueViolationError("duplicate key value violates unique constraint"),
        RuntimeError("connection dropped"),
    ])
    def test_unexpected_store_error_fails_only_that_row(self, admin, monkeypatch, error):
        real_create = identity_repo.create_identity
        calls = {"n": 0}

        async def flaky_create(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise error
            return await real_create(*args, **kwargs)

        monkeypatch.setattr(identity_repo, "create_identity", flaky_create)
        text = _csv(
            "Ana Souza,31/12/1990,Rua Sol 123,,ana@example.com,(11) 98765-4321,,",
            "Bia Rocha,01/01/1991,Rua Sol 123,,bia@example.com,(11) 98765-4321,,",
        )

        report = asyncio.run(import_employees(text, admin))

        assert [(f.row, f.nome) for f in report.failures] == [(1, "Ana Souza")]
        assert len(report.imported) == 1
        doc = asyncio.run(document_repo.fetch_by_id("funcionarios", report.imported[0]))
        assert doc["nome"] == "Bia Rocha"
