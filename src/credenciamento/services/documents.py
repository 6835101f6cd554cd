"""
credenciamento/services/documents.py — Проверка налоговых идентификаторов.

Чистые функции без I/O. Принимают строку в любом форматировании
(маска, пробелы, «сырые» цифры) и решают, валиден ли идентификатор:

    • CNPJ  — 14 цифр, две контрольные цифры (mod 11, веса 2..9 по кругу)
    • CPF   — 11 цифр, две контрольные цифры (mod 11, веса 10..2 / 11..2)
    • CEI   — только структура ``NN.NNN.NNNNN/NN``
    • CAEPF — только структура ``NNN.NNN.NNN-NNN``

Пустая строка здесь всегда невалидна: «не заполнено» решает слой схем.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")
_REPEATED = re.compile(r"^(\d)\1+$")

CEI_PATTERN = re.compile(r"^\d{2}\.\d{3}\.\d{5}/\d{2}$")
CAEPF_PATTERN = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{3}$")


def only_digits(value: str | None) -> str:
    """Удаляет все нецифровые символы."""
    return _NON_DIGITS.sub("", value or "")


def _cnpj_check_digit(numbers: str) -> int:
    """Контрольная цифра CNPJ для префикса длины 12 или 13."""
    total = 0
    weight = len(numbers) - 7
    for ch in numbers:
        total += int(ch) * weight
        weight -= 1
        if weight < 2:
            weight = 9
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _cpf_check_digit(numbers: str) -> int:
    """Контрольная цифра CPF для префикса длины 9 или 10."""
    start = len(numbers) + 1
    total = sum(int(ch) * (start - i) for i, ch in enumerate(numbers))
    remainder = (total * 10) % 11
    return 0 if remainder in (10, 11) else remainder


def is_valid_cnpj(value: str | None) -> bool:
    """Проверяет CNPJ (идентификатор организации) по контрольным цифрам."""
    cnpj = only_digits(value)
    if len(cnpj) != 14 or _REPEATED.match(cnpj):
        return False

    base, digits = cnpj[:12], cnpj[12:]
    first = _cnpj_check_digit(base)
    if first != int(digits[0]):
        return False
    second = _cnpj_check_digit(base + str(first))
    return second == int(digits[1])


def is_valid_cpf(value: str | None) -> bool:
    """Проверяет CPF (идентификатор физического лица) по контрольным цифрам."""
    cpf = only_digits(value)
    if len(cpf) != 11 or _REPEATED.match(cpf):
        return False

    if _cpf_check_digit(cpf[:9]) != int(cpf[9]):
        return False
    return _cpf_check_digit(cpf[:10]) == int(cpf[10])


def is_valid_cei(value: str | None) -> bool:
    """CEI в формате XX.XXX.XXXXX/XX (без контрольной суммы)."""
    return bool(value) and CEI_PATTERN.match(value) is not None


def is_valid_caepf(value: str | None) -> bool:
    """CAEPF в формате XXX.XXX.XXX-XXX (без контрольной суммы)."""
    return bool(value) and CAEPF_PATTERN.match(value) is not None


__all__ = [
    "only_digits",
    "is_valid_cnpj",
    "is_valid_cpf",
    "is_valid_cei",
    "is_valid_caepf",
]
