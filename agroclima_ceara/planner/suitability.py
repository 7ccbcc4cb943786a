# agroclima_ceara/planner/suitability.py
from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from ..config import PRECIP_WEIGHT, TEMP_TOLERANCE_C, TEMP_WEIGHT
from ..schemas.records import (
    CropProfile,
    MonthlyRegionalStat,
    SuitabilityRow,
    SuitabilitySummary,
)
from ..climate.aggregation import NanMean


def _nan_min(a: float, b: float) -> float:
    # min()/max() do Python não propagam NaN de forma simétrica
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return min(a, b)


def _floor_zero(x: float) -> float:
    return x if math.isnan(x) else max(0.0, x)


def temperature_score(stat: MonthlyRegionalStat, crop: CropProfile) -> float:
    """
    Adequação de temperatura em [0, 1]: cai 0.1 por °C de distância do ideal
    (máxima e mínima), vale o pior dos dois lados.
    """
    s_max = _floor_zero(1.0 - abs(stat.temp_max_mean - crop.temp_max_ideal) / TEMP_TOLERANCE_C)
    s_min = _floor_zero(1.0 - abs(stat.temp_min_mean - crop.temp_min_ideal) / TEMP_TOLERANCE_C)
    return _nan_min(s_max, s_min)


def precipitation_score(stat: MonthlyRegionalStat, crop: CropProfile) -> float:
    """
    Adequação de precipitação: menor entre a folga acima do mínimo e a folga
    abaixo do máximo, relativas a cada limite. Só há piso em 0; o lado do
    mínimo não é limitado a 1.
    """
    above_min = _floor_zero((stat.precip_mean - crop.precip_min_monthly) / crop.precip_min_monthly)
    below_max = _floor_zero((crop.precip_max_monthly - stat.precip_mean) / crop.precip_max_monthly)
    return _nan_min(above_min, below_max)


def score_suitability(
    monthly: Sequence[MonthlyRegionalStat],
    crops: Sequence[CropProfile],
) -> List[SuitabilityRow]:
    """
    Produto cartesiano (região-mês x cultura) com o índice de adequabilidade:

        indice = 0.5 * adequacao_temp + 0.5 * adequacao_precip

    Perfis inválidos (limite de chuva <= 0) levantam DataQualityError antes de
    qualquer linha ser gerada.
    """
    for crop in crops:
        crop.validate()

    rows: List[SuitabilityRow] = []
    for stat in monthly:
        for crop in crops:
            t = temperature_score(stat, crop)
            p = precipitation_score(stat, crop)
            rows.append(
                SuitabilityRow(
                    region=stat.region,
                    month=stat.month,
                    crop_name=crop.crop_name,
                    temp_score=t,
                    precip_score=p,
                    suitability_index=TEMP_WEIGHT * t + PRECIP_WEIGHT * p,
                )
            )
    return rows


def summarize_suitability(rows: Sequence[SuitabilityRow]) -> List[SuitabilitySummary]:
    """Índice médio por (região, cultura), ignorando meses sem índice."""
    groups: Dict[Tuple[str, str], NanMean] = {}
    for row in rows:
        groups.setdefault((row.region, row.crop_name), NanMean()).add(row.suitability_index)

    return [
        SuitabilitySummary(region=region, crop_name=crop, mean_index=acc.value)
        for (region, crop), acc in sorted(groups.items())
    ]
