"""
Tests for the entity services against the in-memory store.
"""
import asyncio
import base64

import pytest

from conftest import VALID_CNPJ, VALID_CPF, credenciado_payload, empresa_payload, funcionario_payload
from credenciamento import memory_store
from credenciamento.adapters import storage_client
from credenciamento.db.repositories import document_repo, identity_repo
from credenciamento.exceptions import ConflictError, NotFoundError, UploadError, ValidationError
from credenciamento.models.credenciado import CredenciadoCPF, CredenciadoPJ
from credenciamento.models.enums import UserRole
from credenciamento.models.user import CurrentUser
from credenciamento.services import (
    credenciado_service,
    empresa_service,
    funcionario_service,
    overview_service,
    plano_service,
)
from credenciamento.services.record_schema import validate_empresa


class TestEmpresaService:
    def test_create_then_fetch_round_trip(self, admin):
        payload = empresa_payload()
        expected = validate_empresa(payload)

        created = asyncio.run(empresa_service.create_empresa(payload, admin))
        fetched = asyncio.run(empresa_service.get_empresa(created.id))

        for field in type(expected).model_fields:
            assert getattr(fetched, field) == getattr(expected, field), field

    def test_create_provisions_identity_and_profile(self, admin):
        created = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))

        identity = asyncio.run(identity_repo.get_identity_by_id(created.id))
        profiles = asyncio.run(document_repo.fetch_all("users"))
        assert identity["role"] == "business"
        assert [p["uid"] for p in profiles if p["role"] == "business"] == [created.id]

    def test_duplicate_access_email_writes_nothing(self, admin):
        asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        with pytest.raises(ConflictError):
            asyncio.run(empresa_service.create_empresa(
                empresa_payload(nomeFantasia="Outra"), admin,
            ))
        assert len(asyncio.run(document_repo.fetch_all("empresas"))) == 1

    def test_accrediting_actor_owns_company(self, accrediting):
        created = asyncio.run(empresa_service.create_empresa(
            empresa_payload(accrediting_Id="someone-else"), accrediting,
        ))
        assert created.accrediting_id == accrediting.uid
        assert created.accrediting_name == "Credenciadora Alfa"

    def test_listing_is_scoped(self, admin, make_user):
        mine = make_user(UserRole.ACCREDITING, "Mine")
        other = make_user(UserRole.ACCREDITING, "Other")
        asyncio.run(empresa_service.create_empresa(empresa_payload(), mine))
        asyncio.run(empresa_service.create_empresa(
            empresa_payload(emailAcess="rh@beta.com.br", nomeFantasia="Beta"), other,
        ))

        assert [c.nome_fantasia for c in asyncio.run(empresa_service.list_empresas(mine))] == ["Alfa"]
        assert len(asyncio.run(empresa_service.list_empresas(admin))) == 2
        foreign = asyncio.run(empresa_service.list_empresas(other))[0]
        with pytest.raises(NotFoundError):
            asyncio.run(empresa_service.get_empresa(foreign.id, mine))

    def test_update_overwrites_and_keeps_created_at(self, admin):
        created = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        updated = asyncio.run(empresa_service.update_empresa(
            created.id, empresa_payload(numeroFuncionarios=99), admin,
        ))
        assert updated.numero_funcionarios == 99
        assert updated.created_at == created.created_at

    def test_delete(self, admin):
        created = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        asyncio.run(empresa_service.delete_empresa(created.id, admin))
        with pytest.raises(NotFoundError):
            asyncio.run(empresa_service.get_empresa(created.id))


class TestFuncionarioService:
    def test_business_actor_forces_company(self, make_user):
        business = make_user(UserRole.BUSINESS, "Beta")
        employee = asyncio.run(funcionario_service.create_funcionario(
            funcionario_payload(empresaId="another-company"), business,
        ))
        assert employee.empresa_id == business.uid

    def test_list_joins_company_name(self, admin):
        company = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        asyncio.run(funcionario_service.create_funcionario(
            funcionario_payload(empresaId=company.id), admin,
        ))
        asyncio.run(funcionario_service.create_funcionario(
            funcionario_payload(email="sem@example.com", cpf=""), admin,
        ))

        views = asyncio.run(funcionario_service.list_funcionarios(admin))

        assert [v.company_name for v in views] == ["Alfa Serviços Ltda", "Empresa desconhecida"]

    def test_soft_delete_hides_from_listing(self, admin):
        employee = asyncio.run(funcionario_service.create_funcionario(funcionario_payload(), admin))

        deleted = asyncio.run(funcionario_service.delete_funcionario(employee.id, admin))

        assert deleted.is_deleted is True
        assert deleted.deleted_at is not None
        stored = asyncio.run(document_repo.fetch_by_id("funcionarios", employee.id))
        assert stored["isDeleted"] is True
        assert stored["cpf"] == VALID_CPF
        assert asyncio.run(funcionario_service.list_funcionarios(admin)) == []

    def test_deleted_employee_cannot_be_updated(self, admin):
        employee = asyncio.run(funcionario_service.create_funcionario(funcionario_payload(), admin))
        asyncio.run(funcionario_service.delete_funcionario(employee.id, admin))

        with pytest.raises(NotFoundError):
            asyncio.run(funcionario_service.update_funcionario(
                employee.id, funcionario_payload(nome="Ana Maria"), admin,
            ))
        stored = asyncio.run(document_repo.fetch_by_id("funcionarios", employee.id))
        assert stored["nome"] == "Ana Souza"

    def test_second_delete_keeps_first_timestamp(self, admin):
        employee = asyncio.run(funcionario_service.create_funcionario(funcionario_payload(), admin))
        asyncio.run(funcionario_service.delete_funcionario(employee.id, admin))
        first = asyncio.run(document_repo.fetch_by_id("funcionarios", employee.id))["deletedAt"]

        with pytest.raises(NotFoundError):
            asyncio.run(funcionario_service.delete_funcionario(employee.id, admin))
        stored = asyncio.run(document_repo.fetch_by_id("funcionarios", employee.id))
        assert stored["deletedAt"] == first

    def test_invalid_record_provisions_nothing(self, admin):
        with pytest.raises(ValidationError):
            asyncio.run(funcionario_service.create_funcionario(
                funcionario_payload(telefone="123"), admin,
            ))
        assert asyncio.run(identity_repo.get_identity_by_email("ana@example.com")) is None


class TestCredenciadoService:
    def test_create_pj_with_logo(self, accrediting):
        logo = base64.b64encode(b"\x89PNG fake").decode()
        provider = asyncio.run(credenciado_service.create_credenciado(
            credenciado_payload(imagem={"contentType": "image/png", "data": logo}), accrediting,
        ))

        assert isinstance(provider, CredenciadoPJ)
        assert provider.imagem_url == "memory://credenciados/11222333000181"
        assert memory_store._blobs["credenciados/11222333000181"] == b"\x89PNG fake"
        assert provider.accrediting_id == accrediting.uid

        stored = asyncio.run(document_repo.fetch_by_id("credenciados", provider.id))
        assert stored["cnpj"] == VALID_CNPJ
        assert stored["imagemUrl"] == provider.imagem_url
        profile = next(
            p for p in asyncio.run(document_repo.fetch_all("users")) if p["uid"] == provider.id
        )
        assert profile["avatar"] == provider.imagem_url

    def test_pf_variant_round_trip(self, admin):
        provider = asyncio.run(credenciado_service.create_credenciado(
            credenciado_payload(tipoPessoa="PF", cnpj="", documentoTipo="CPF", cpf=VALID_CPF),
            admin,
        ))
        fetched = asyncio.run(credenciado_service.get_credenciado(provider.id, admin))
        assert isinstance(fetched, CredenciadoCPF)
        assert fetched.cpf == VALID_CPF

    def test_upload_failure_leaves_orphan_identity(self, admin, monkeypatch):
        async def failing_upload(blob, folder, key, content_type="application/octet-stream"):
            raise UploadError(details={"folder": folder, "key": key})

        monkeypatch.setattr(storage_client, "upload_binary", failing_upload)
        logo = base64.b64encode(b"img").decode()

        with pytest.raises(UploadError):
            asyncio.run(credenciado_service.create_credenciado(
                credenciado_payload(imagem={"contentType": "image/png", "data": logo}), admin,
            ))

        assert asyncio.run(identity_repo.get_identity_by_email("contato@beta.com.br")) is not None
        assert asyncio.run(document_repo.fetch_all("credenciados")) == []

    def test_accredited_sees_only_itself(self, admin):
        provider = asyncio.run(credenciado_service.create_credenciado(credenciado_payload(), admin))
        asyncio.run(credenciado_service.create_credenciado(
            credenciado_payload(emailAcess="outro@gama.com.br", nomeFantasia="Gama"), admin,
        ))
        identity = asyncio.run(identity_repo.get_identity_by_id(provider.id))
        accredited = CurrentUser(uid=identity["uid"], role=UserRole.ACCREDITED)

        visible = asyncio.run(credenciado_service.list_credenciados(accredited))

        assert [p.id for p in visible] == [provider.id]

    def test_update_can_switch_variant_and_keeps_logo(self, admin):
        logo = base64.b64encode(b"img").decode()
        provider = asyncio.run(credenciado_service.create_credenciado(
            credenciado_payload(imagem={"contentType": "image/png", "data": logo}), admin,
        ))

        updated = asyncio.run(credenciado_service.update_credenciado(
            provider.id,
            credenciado_payload(tipoPessoa="PF", cnpj="", documentoTipo="CEI", cei="12.345.67890/12"),
            admin,
        ))

        assert updated.documento_tipo == "CEI"
        assert updated.imagem_url == provider.imagem_url
        stored = asyncio.run(document_repo.fetch_by_id("credenciados", provider.id))
        assert "cnpj" not in stored


class TestOverviewService:
    def test_counts_and_rankings(self, admin):
        company = asyncio.run(empresa_service.create_empresa(empresa_payload(), admin))
        provider = asyncio.run(credenciado_service.create_credenciado(credenciado_payload(), admin))
        asyncio.run(funcionario_service.create_funcionario(
            funcionario_payload(empresaId=company.id), admin,
        ))
        gone = asyncio.run(funcionario_service.create_funcionario(
            funcionario_payload(email="gone@example.com", cpf=""), admin,
        ))
        asyncio.run(funcionario_service.delete_funcionario(gone.id, admin))
        asyncio.run(document_repo.create("planos", {"nome": "Ouro", "accrediting_Id": admin.uid}))
        asyncio.run(document_repo.create(
            "solicitacoes", {"donoId": provider.id, "preco": 120, "status": "confirmado"},
        ))

        overview = asyncio.run(overview_service.get_overview())

        assert overview.counts.model_dump() == {
            "empresas": 1, "credenciados": 1, "funcionarios": 1, "planos": 1, "solicitacoes": 1,
        }
        assert [c.id for c in overview.top_empresas] == [company.id]
        assert overview.top_credenciados[0].credenciado.id == provider.id

    def test_export_is_xlsx(self, admin):
        content = asyncio.run(overview_service.export_overview())
        assert content[:2] == b"PK"

    def test_plans_for_accrediting_user(self, accrediting, admin):
        asyncio.run(document_repo.create("planos", {"nome": "Ouro", "accrediting_Id": accrediting.uid}))
        asyncio.run(document_repo.create("planos", {"nome": "Prata", "accrediting_Id": "other"}))

        plans = asyncio.run(plano_service.list_planos(accrediting))
        selected = asyncio.run(plano_service.list_planos(admin, accreditor_id="other"))

        assert [p.nome for p in plans] == ["Ouro"]
        assert [p.nome for p in selected] == ["Prata"]
