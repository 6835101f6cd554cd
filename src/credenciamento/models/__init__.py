"""
credenciamento.models — Модели данных домена.

Реэкспорт основных классов для удобства:
    from credenciamento.models import Empresa, FuncionarioCreate
"""

from credenciamento.models.enums import (  # noqa: F401
    DocumentType,
    PersonType,
    RequestStatus,
    UserRole,
)
from credenciamento.models.empresa import Contato, Empresa, EmpresaCreate  # noqa: F401
from credenciamento.models.funcionario import (  # noqa: F401
    Funcionario,
    FuncionarioCreate,
    FuncionarioView,
)
from credenciamento.models.credenciado import (  # noqa: F401
    CREDENCIADO_ADAPTER,
    Credenciado,
    CredenciadoCAEPF,
    CredenciadoCEI,
    CredenciadoCPF,
    CredenciadoForm,
    CredenciadoPJ,
)
from credenciamento.models.plano import Plano, Solicitacao  # noqa: F401
from credenciamento.models.user import CurrentUser, UserProfile  # noqa: F401
