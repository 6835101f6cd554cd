"""
Общие фикстуры тестов.

Все тесты работают на in-memory хранилище; публикация NATS-событий
отключена пустым ``NATS_URL`` (выставляется до импорта настроек).
"""

import asyncio
import os

os.environ["NATS_URL"] = ""
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402

from credenciamento.db.repositories import identity_repo  # noqa: E402
from credenciamento.memory_store import activate_memory_store, reset_memory_store  # noqa: E402
from credenciamento.models.enums import UserRole  # noqa: E402
from credenciamento.models.user import CurrentUser  # noqa: E402
from credenciamento.services import identity_service  # noqa: E402

# PostgreSQL-backed functions, kept before the memory store replaces them.
POSTGRES_IDENTITY_REPO = {
    name: getattr(identity_repo, name)
    for name in ("create_identity", "get_identity_by_id", "get_identity_by_email")
}

activate_memory_store()

VALID_CNPJ = "11.222.333/0001-81"
VALID_CPF = "529.982.247-25"
OTHER_CPF = "111.444.777-35"


@pytest.fixture(autouse=True)
def memory_store():
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def make_user():
    """Создаёт учётную запись в memory store и возвращает CurrentUser."""
    counter = {"n": 0}

    def _make(role: UserRole, display_name: str = "Tester") -> CurrentUser:
        counter["n"] += 1
        email = f"{role.value}{counter['n']}@example.com"
        uid = asyncio.run(identity_service.create_identity(email, role, display_name))
        return CurrentUser(uid=uid, role=role, display_name=display_name, email=email)

    return _make


@pytest.fixture
def admin(make_user) -> CurrentUser:
    return make_user(UserRole.ADMIN, "Admin")


@pytest.fixture
def accrediting(make_user) -> CurrentUser:
    return make_user(UserRole.ACCREDITING, "Credenciadora Alfa")


def auth_headers(user: CurrentUser) -> dict:
    token = identity_service.create_access_token(user.uid, user.role)
    return {"Authorization": f"Bearer {token}"}


def empresa_payload(**overrides) -> dict:
    payload = {
        "razaoSocial": "Alfa Serviços Ltda",
        "nomeFantasia": "Alfa",
        "emailAcess": "rh@alfa.com.br",
        "cnpjCaepf": VALID_CNPJ,
        "endereco": "Rua das Flores, 100",
        "cep": "01234-567",
        "numeroFuncionarios": 25,
        "contatoRH": {"nome": "Maria", "email": "maria@alfa.com.br", "telefone": "(11) 98765-4321"},
        "contatoFinanceiro": {"nome": "João", "email": "joao@alfa.com.br", "telefone": "(11) 3456-7890"},
        "accrediting_Id": None,
        "accrediting_name": None,
        "planos": "Plano Ouro",
    }
    payload.update(overrides)
    return payload


def funcionario_payload(**overrides) -> dict:
    payload = {
        "nome": "Ana Souza",
        "dataNascimento": "31/12/1990",
        "endereco": "Av. Paulista, 1000",
        "cpf": VALID_CPF,
        "email": "ana@example.com",
        "telefone": "(11) 98765-4321",
        "pessoasNaCasa": "3",
        "empresaId": None,
    }
    payload.update(overrides)
    return payload


def credenciado_payload(**overrides) -> dict:
    payload = {
        "tipoPessoa": "PJ",
        "razaoSocial": "Clínica Beta Ltda",
        "nomeFantasia": "Clínica Beta",
        "emailAcess": "contato@beta.com.br",
        "cnpj": VALID_CNPJ,
        "cpf": "",
        "cei": "",
        "caepf": "",
        "documentoTipo": None,
        "endereco": "Rua Verde, 42",
        "cep": "04567-890",
        "telefone": "(11) 91234-5678",
        "contatoRH": {"nome": "", "email": "", "telefone": ""},
        "segmento": "Saúde",
        "planos": "Plano Prata",
    }
    payload.update(overrides)
    return payload
