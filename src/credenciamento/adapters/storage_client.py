"""
credenciamento/adapters/storage_client.py — Клиент хранилища бинарных файлов.

Загружает файл методом ``PUT {storage_base_url}/{folder}/{key}`` и
возвращает публичный URL объекта. Любая ошибка HTTP → ``UploadError``.
"""

from __future__ import annotations

import logging

import httpx

from credenciamento.config import get_settings
from credenciamento.exceptions import UploadError

logger = logging.getLogger(__name__)


async def upload_binary(
    blob: bytes, folder: str, key: str, content_type: str = "application/octet-stream",
) -> str:
    """Загружает ``blob`` в ``folder/key`` и возвращает URL."""
    settings = get_settings()
    url = f"{settings.storage_base_url.rstrip('/')}/{folder}/{key}"
    try:
        async with httpx.AsyncClient(timeout=settings.storage_timeout_seconds) as client:
            response = await client.put(
                url, content=blob, headers={"Content-Type": content_type},
            )
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("Upload to %s failed: %s", url, exc)
        raise UploadError(details={"folder": folder, "key": key}) from exc

    logger.info("Uploaded %d bytes to %s", len(blob), url)
    return url
