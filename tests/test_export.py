"""
Tests for the XLSX writer.
"""
import io

import openpyxl

from credenciamento.services.export import write_xlsx
from credenciamento.services.reporting import ExportWorkbook


class TestWriteXlsx:
    def test_sheet_order_and_content(self):
        workbook = ExportWorkbook(sheets={
            "Resumo": [{"Empresas Ativas": 2, "Planos Ativos": 1}],
            "Empresas": [{"Empresa": "Alfa", "Funcionários": 3}],
            "Faturamento": [{"Credenciado": "Clínica", "Faturamento Total": 130.5}],
        })

        book = openpyxl.load_workbook(io.BytesIO(write_xlsx(workbook)))

        assert book.sheetnames == ["Resumo", "Empresas", "Faturamento"]
        rows = list(book["Empresas"].iter_rows(values_only=True))
        assert rows == [("Empresa", "Funcionários"), ("Alfa", 3)]
        assert book["Faturamento"]["B2"].value == 130.5

    def test_empty_sheet_is_still_written(self):
        book = openpyxl.load_workbook(io.BytesIO(write_xlsx(ExportWorkbook(sheets={"Resumo": []}))))
        assert book.sheetnames == ["Resumo"]
