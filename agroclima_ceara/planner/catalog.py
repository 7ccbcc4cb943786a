# agroclima_ceara/planner/catalog.py
from __future__ import annotations

import json
from pathlib import Path
from typing import List

from ..config import CROPS_JSON
from ..errors import DataQualityError, InputFileNotFoundError
from ..schemas.records import CropProfile, measurement

_REQUIRED = ["cultura", "temp_min_ideal", "temp_max_ideal", "precip_min_mensal", "precip_max_mensal"]


def load_crop_profiles(path: Path = CROPS_JSON) -> List[CropProfile]:
    """
    Carrega os requisitos climáticos das culturas (JSON com a chave 'culturas').

    Cada perfil é validado: limites de chuva precisam ser > 0.
    """
    path = Path(path)
    if not path.exists():
        raise InputFileNotFoundError(f"Catálogo de culturas não encontrado: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict) or "culturas" not in raw:
        raise DataQualityError("JSON inválido: esperado um objeto com a chave 'culturas'.")

    crops: List[CropProfile] = []
    for item in raw["culturas"]:
        missing = [k for k in _REQUIRED if k not in item]
        if missing:
            raise DataQualityError(f"Cultura incompleta em {path}: faltam {missing} ({item!r})")

        nome = str(item["cultura"]).strip()
        where = f"(cultura {nome})"
        crop = CropProfile(
            crop_name=nome,
            temp_min_ideal=measurement(item["temp_min_ideal"], "temp_min_ideal", where),
            temp_max_ideal=measurement(item["temp_max_ideal"], "temp_max_ideal", where),
            precip_min_monthly=measurement(item["precip_min_mensal"], "precip_min_mensal", where),
            precip_max_monthly=measurement(item["precip_max_mensal"], "precip_max_mensal", where),
            recommendations=tuple(str(r) for r in item.get("recomendacoes", []) or []),
        )
        crop.validate()
        crops.append(crop)

    if not crops:
        raise DataQualityError(f"Catálogo carregado, mas sem culturas em: {path}")

    return crops
