"""
credenciamento/services/employee_import.py — Массовый импорт сотрудников из CSV.

Строки обрабатываются строго последовательно, каждая — как отдельное
создание сотрудника (учётная запись → профиль → документ). Ошибка в строке
не прерывает импорт: строка попадает в ``failures``, уже созданные
записи не откатываются.
"""

from __future__ import annotations

import io
import logging

import pandas as pd
from pydantic import BaseModel, Field

from credenciamento.exceptions import CredenciamentoError, ValidationError
from credenciamento.models.empresa import Empresa
from credenciamento.models.enums import UserRole
from credenciamento.models.user import CurrentUser
from credenciamento.services.funcionario_service import load_companies, store_funcionario
from credenciamento.services.record_schema import validate_funcionario

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "nome",
    "dataNascimento",
    "endereco",
    "cpf",
    "email",
    "telefone",
    "pessoasNaCasa",
    "empresa",
)
TEMPLATE_FILENAME = "template_funcionarios.csv"


class RowFailure(BaseModel):
    """Строка CSV, которую не удалось импортировать."""
    row: int
    nome: str
    reason: str
    details: dict = Field(default_factory=dict)


class ImportReport(BaseModel):
    imported: list[str] = Field(default_factory=list)
    failures: list[RowFailure] = Field(default_factory=list)


def csv_template() -> str:
    """Шаблон для загрузки: только строка заголовков."""
    return ",".join(CSV_COLUMNS) + "\n"


def _read_rows(csv_text: str) -> list[dict[str, str]]:
    """Парсит CSV; все значения — строки, пустые ячейки — ``""``."""
    try:
        frame = pd.read_csv(
            io.StringIO(csv_text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise ValidationError(
            f"Unreadable CSV file: {exc}",
            errors=[{"path": "file", "message": str(exc)}],
        ) from exc

    missing = [column for column in CSV_COLUMNS if column not in frame.columns]
    if missing:
        raise ValidationError(
            "CSV file is missing required columns",
            errors=[{"path": column, "message": "Missing column"} for column in missing],
        )
    return frame[list(CSV_COLUMNS)].to_dict(orient="records")


def _resolve_company(name: str, companies: list[Empresa], actor: CurrentUser) -> str | None:
    """Компания строки: своя для business, иначе точное совпадение nomeFantasia."""
    if actor.role is UserRole.BUSINESS:
        return actor.uid
    company = next((c for c in companies if c.nome_fantasia == name), None)
    return company.id if company else None


async def import_employees(csv_text: str, actor: CurrentUser) -> ImportReport:
    """Импортирует сотрудников из текста CSV."""
    rows = _read_rows(csv_text)
    companies = await load_companies()
    report = ImportReport()

    for index, row in enumerate(rows, start=1):
        data = {column: row[column] for column in CSV_COLUMNS if column != "empresa"}
        data["empresaId"] = _resolve_company(row["empresa"], companies, actor)
        try:
            record = validate_funcionario(data)
            employee = await store_funcionario(record)
        except CredenciamentoError as exc:
            logger.warning("CSV row %d (%s) not imported: %s", index, row["nome"], exc.message)
            report.failures.append(RowFailure(
                row=index, nome=row["nome"], reason=exc.message, details=exc.details,
            ))
            continue
        except Exception as exc:
            logger.exception("CSV row %d (%s) failed unexpectedly", index, row["nome"])
            report.failures.append(RowFailure(row=index, nome=row["nome"], reason=str(exc)))
            continue
        report.imported.append(employee.id)

    logger.info(
        "CSV import by %s: %d imported, %d failed",
        actor.uid, len(report.imported), len(report.failures),
    )
    return report
