"""
credenciamento/events.py — NATS Event Publisher.

Публикует доменные события в NATS:
    • ``credenciamento.empresa.created``
    • ``credenciamento.credenciado.created``
    • ``credenciamento.funcionario.created``
    • ``credenciamento.funcionario.deleted``

Graceful degradation: если NATS недоступен (или ``NATS_URL`` пуст) —
событие пропускается с записью в лог (не ломает основной процесс).
"""

from __future__ import annotations

import json
import logging
from typing import Any

import nats
from nats.aio.client import Client as NATSClient

from credenciamento.config import get_settings

logger = logging.getLogger(__name__)

# ── Singleton NATS connection ─────────────────────────────────────────────

_nc: NATSClient | None = None


async def connect() -> NATSClient | None:
    """Подключается к NATS (если ещё не подключён)."""
    global _nc
    if _nc is not None and _nc.is_connected:
        return _nc
    settings = get_settings()
    if not settings.nats_url:
        return None
    try:
        _nc = await nats.connect(settings.nats_url)
        logger.info("NATS publisher connected: %s", settings.nats_url)
        return _nc
    except Exception as exc:
        logger.warning("NATS connect failed (events will be skipped): %s", exc)
        _nc = None
        return None


async def disconnect() -> None:
    """Закрывает соединение с NATS."""
    global _nc
    if _nc and _nc.is_connected:
        await _nc.drain()
        logger.info("NATS publisher disconnected")
    _nc = None


# ── Публикация событий ───────────────────────────────────────────────────

async def publish(subject: str, data: dict[str, Any]) -> None:
    """
    Публикует JSON-событие в NATS.

    Args:
        subject: Тема сообщения (e.g. ``credenciamento.empresa.created``).
        data: Payload (сериализуется в JSON).
    """
    nc = await connect()
    if nc is None:
        logger.debug("NATS unavailable — skipping event %s", subject)
        return
    try:
        payload = json.dumps(data, default=str).encode("utf-8")
        await nc.publish(subject, payload)
        logger.info("NATS event published: %s", subject)
    except Exception as exc:
        logger.warning("NATS publish failed for %s: %s", subject, exc)


# ── Удобные функции домена ───────────────────────────────────────────────

async def emit_empresa_created(empresa_id: str, cnpj_caepf: str, name: str) -> None:
    """Событие: компания создана."""
    await publish("credenciamento.empresa.created", {
        "event": "empresa.created",
        "empresa_id": empresa_id,
        "cnpj_caepf": cnpj_caepf,
        "name": name,
    })


async def emit_credenciado_created(credenciado_id: str, tipo_pessoa: str, name: str) -> None:
    """Событие: credenciado создан."""
    await publish("credenciamento.credenciado.created", {
        "event": "credenciado.created",
        "credenciado_id": credenciado_id,
        "tipo_pessoa": tipo_pessoa,
        "name": name,
    })


async def emit_funcionario_created(funcionario_id: str, empresa_id: str | None) -> None:
    """Событие: сотрудник создан (вручную или импортом)."""
    await publish("credenciamento.funcionario.created", {
        "event": "funcionario.created",
        "funcionario_id": funcionario_id,
        "empresa_id": empresa_id,
    })


async def emit_funcionario_deleted(funcionario_id: str, deleted_at: str) -> None:
    """Событие: сотрудник помечен удалённым."""
    await publish("credenciamento.funcionario.deleted", {
        "event": "funcionario.deleted",
        "funcionario_id": funcionario_id,
        "deleted_at": deleted_at,
    })
