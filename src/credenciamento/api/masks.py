"""
credenciamento/api/masks.py — Маска поля «на лету» (для UI без своей логики масок).

GET /masks/{field}?value=... → ``{"field": ..., "value": <маскированное>}``
"""

from fastapi import APIRouter, HTTPException, Query, status

from credenciamento.services.masks import MASKS, apply_mask

router = APIRouter(prefix="/masks", tags=["masks"])


@router.get("/{field}", summary="Применить маску к значению")
async def mask_value(field: str, value: str = Query("")):
    """
    Маскирует значение поля.

    Маска CAEPF даёт не больше 14 символов (``123.456.789-01``), а
    ``is_valid_caepf`` принимает только полную форму из 15 символов
    (``123.456.789-012``): полный CAEPF вводится в обход маски.
    """
    if field not in MASKS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown mask '{field}'. Available: {', '.join(sorted(MASKS))}",
        )
    return {"field": field, "value": apply_mask(field, value)}
