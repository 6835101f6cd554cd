"""
credenciamento/services/masks.py — Маски ввода (Field Formatter).

Приводит «сырой» ввод к каноническому отображаемому виду по мере набора:

    CEP       12345-678               (макс. 9 символов)
    CNPJ      12.345.678/0001-95      (макс. 18)
    CPF       123.456.789-09          (макс. 14)
    CEI       12.345.67890/12         (макс. 15)
    CAEPF     123.456.789-01          (макс. 14)
    Telefone  (11) 98765-4321         (макс. 15)

Алгоритм одинаков для всех масок: убрать нецифровые символы, ограничить
число цифр, последовательно применить подстановки (каждая — только первое
вхождение), обрезать до максимальной длины. Результат зависит только от
набора цифр, поэтому ``mask(mask(x)) == mask(x)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from credenciamento.services.documents import only_digits


@dataclass(frozen=True)
class Mask:
    """Описание маски: лимит цифр, подстановки, максимальная длина."""

    max_digits: int
    max_length: int
    substitutions: tuple[tuple[str, str], ...]

    def apply(self, value: str | None) -> str:
        result = only_digits(value)[: self.max_digits]
        for pattern, replacement in self.substitutions:
            result = re.sub(pattern, replacement, result, count=1)
        return result[: self.max_length]


CEP = Mask(8, 9, ((r"(\d{5})(\d)", r"\1-\2"),))

CNPJ = Mask(14, 18, (
    (r"(\d{2})(\d)", r"\1.\2"),
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{3})(\d)", r"\1/\2"),
    (r"(\d{4})(\d{2})$", r"\1-\2"),
))

CPF = Mask(11, 14, (
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{3})(\d{2})$", r"\1-\2"),
))

CEI = Mask(12, 15, (
    (r"(\d{2})(\d)", r"\1.\2"),
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{5})(\d{2})$", r"\1/\2"),
))

# 14 символов вмещают только 11 цифр: дефис ставится уже перед
# неполной последней группой, полный CAEPF (15 символов) маской не набирается,
# и замаскированное значение is_valid_caepf не проходит.
CAEPF = Mask(11, 14, (
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{3})(\d)", r"\1.\2"),
    (r"(\d{3})(\d{1,3})$", r"\1-\2"),
))

PHONE = Mask(11, 15, (
    (r"(\d{2})(\d)", r"(\1) \2"),
    (r"(\d{4,5})(\d{4})$", r"\1-\2"),
))

MASKS: dict[str, Mask] = {
    "cep": CEP,
    "cnpj": CNPJ,
    "cpf": CPF,
    "cei": CEI,
    "caepf": CAEPF,
    "telefone": PHONE,
}


def mask_cep(value: str | None) -> str:
    return CEP.apply(value)


def mask_cnpj(value: str | None) -> str:
    return CNPJ.apply(value)


def mask_cpf(value: str | None) -> str:
    return CPF.apply(value)


def mask_cei(value: str | None) -> str:
    return CEI.apply(value)


def mask_caepf(value: str | None) -> str:
    return CAEPF.apply(value)


def mask_phone(value: str | None) -> str:
    return PHONE.apply(value)


def apply_mask(field: str, value: str | None) -> str:
    """Применяет маску по имени поля. Неизвестное поле → KeyError."""
    return MASKS[field].apply(value)


__all__ = [
    "Mask",
    "MASKS",
    "apply_mask",
    "mask_cep",
    "mask_cnpj",
    "mask_cpf",
    "mask_cei",
    "mask_caepf",
    "mask_phone",
]
