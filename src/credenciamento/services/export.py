"""
credenciamento/services/export.py — Запись выгрузки панели в XLSX.

Каждый лист ``ExportWorkbook`` → DataFrame → лист книги (openpyxl engine).
Порядок листов совпадает с порядком в ``ExportWorkbook.sheets``.
"""

from __future__ import annotations

import io
import logging

import pandas as pd

from credenciamento.services.reporting import ExportWorkbook

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def write_xlsx(workbook: ExportWorkbook) -> bytes:
    """Сериализует книгу в байты XLSX."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, rows in workbook.sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
    data = buffer.getvalue()
    logger.info(
        "Export workbook written: %d sheet(s), %d bytes",
        len(workbook.sheets), len(data),
    )
    return data


__all__ = ["XLSX_MEDIA_TYPE", "write_xlsx"]
