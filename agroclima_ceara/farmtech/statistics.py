# agroclima_ceara/farmtech/statistics.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ..climate.aggregation import NanMean
from ..errors import DataQualityError
from ..schemas.farm import (
    CropCatalogStats,
    FieldStats,
    InputGroupSummary,
    InputRecord,
    InputStats,
)
from ..schemas.records import measurement

MERGE_KEYS = ["nome_produtor", "cultura_plantada", "area_hectare"]


# =============================================================================
# Helpers
# =============================================================================

def numeric_column(df: pd.DataFrame, col: str, table: str = "") -> pd.Series:
    """Coluna como float; valores não numéricos (não vazios) levantam DataQualityError."""
    raw = df[col]
    num = pd.to_numeric(raw, errors="coerce")
    bad = num.isna() & raw.notna()
    if bad.any():
        idx = bad[bad].index[0]
        where = f" {table}" if table else ""
        raise DataQualityError(f"Coluna '{col}'{where} com valor não numérico {raw[idx]!r} (linha {idx})")
    return num.astype(float)


def per_hectare(quantity: float, area: float, where: str = "") -> float:
    if math.isnan(quantity) or math.isnan(area):
        return math.nan
    if area == 0:
        raise DataQualityError(f"Área zero com insumo informado {where}".strip())
    return quantity / area


def ratio_mean(quantity: pd.Series, area: pd.Series, label: str = "") -> float:
    """Média das razões por registro (não é total/total)."""
    acc = NanMean()
    for i, (q, a) in enumerate(zip(quantity, area)):
        acc.add(per_hectare(float(q), float(a), f"({label} linha {i})"))
    return acc.value


def _mean(s: pd.Series) -> float:
    return float(s.mean()) if s.notna().any() else math.nan


def _sd(s: pd.Series) -> float:
    return float(s.std()) if s.notna().sum() > 1 else math.nan


# =============================================================================
# Estatísticas descritivas
# =============================================================================

def describe_crops(culturas: pd.DataFrame) -> CropCatalogStats:
    def col(name: str) -> pd.Series:
        return numeric_column(culturas, name, "de culturas")

    return CropCatalogStats(
        count=int(len(culturas)),
        cycle_min_mean=_mean(col("ciclo_minimo")),
        cycle_max_mean=_mean(col("ciclo_maximo")),
        temp_min_mean=_mean(col("temperatura_min")),
        temp_max_mean=_mean(col("temperatura_max")),
        precip_min_mean=_mean(col("precipitacao_min")),
        precip_max_mean=_mean(col("precipitacao_max")),
    )


def describe_fields(campos: pd.DataFrame) -> FieldStats:
    area_m2 = numeric_column(campos, "area_m2", "de campos")
    area_ha = numeric_column(campos, "area_hectare", "de campos")
    geometry = campos["tipo_geometria"].dropna().astype(str).value_counts().sort_index()
    return FieldStats(
        count=int(len(campos)),
        area_m2_mean=_mean(area_m2),
        area_m2_sd=_sd(area_m2),
        area_ha_mean=_mean(area_ha),
        area_ha_sd=_sd(area_ha),
        area_ha_total=float(area_ha.sum(min_count=1)),
        geometry_counts={str(k): int(v) for k, v in geometry.items()},
    )


def describe_inputs(insumos: pd.DataFrame) -> InputStats:
    area = numeric_column(insumos, "area_hectare", "de insumos")
    fert = numeric_column(insumos, "fertilizante_total_kg", "de insumos")
    irrig = numeric_column(insumos, "irrigacao_volume_total", "de insumos")
    return InputStats(
        fertilizer_mean=_mean(fert),
        fertilizer_sd=_sd(fert),
        fertilizer_per_ha_mean=ratio_mean(fert, area, "fertilizante"),
        irrigation_mean=_mean(irrig),
        irrigation_sd=_sd(irrig),
        irrigation_per_ha_mean=ratio_mean(irrig, area, "irrigação"),
    )


# =============================================================================
# Agrupamentos (por cultura / por região)
# =============================================================================

def merge_fields_inputs(campos: pd.DataFrame, insumos: pd.DataFrame) -> pd.DataFrame:
    """Junta campos e insumos pelo produtor, cultura e área (para análise por região)."""
    return pd.merge(campos, insumos, on=MERGE_KEYS, suffixes=("_campo", "_insumo"))


def input_records_from_frame(df: pd.DataFrame) -> List[InputRecord]:
    """Linhas de insumos -> InputRecord (região vem da coluna 'regiao', se existir)."""
    has_region = "regiao" in df.columns
    out: List[InputRecord] = []
    for i, row in enumerate(df.to_dict("records")):
        where = f"(insumos linha {i})"
        region = row.get("regiao") if has_region else None
        out.append(
            InputRecord(
                producer=str(row["nome_produtor"]),
                crop=str(row["cultura_plantada"]),
                area_hectare=measurement(row["area_hectare"], "area_hectare", where),
                fertilizer_kg=measurement(row["fertilizante_total_kg"], "fertilizante_total_kg", where),
                irrigation_l=measurement(row["irrigacao_volume_total"], "irrigacao_volume_total", where),
                region=None if region is None or pd.isna(region) else str(region),
            )
        )
    return out


@dataclass
class _GroupAccumulator:
    num_fields: int = 0
    area: NanMean = field(default_factory=NanMean)
    fertilizer: NanMean = field(default_factory=NanMean)
    irrigation: NanMean = field(default_factory=NanMean)
    fertilizer_per_ha: NanMean = field(default_factory=NanMean)
    irrigation_per_ha: NanMean = field(default_factory=NanMean)


def summarize_inputs(records: Iterable[InputRecord], by: str = "crop") -> List[InputGroupSummary]:
    """
    Resumo por cultura (by="crop") ou por região (by="region"):
    número de campos, área total, médias de fertilizante e irrigação e médias
    por hectare (média das razões de cada registro).
    """
    if by not in ("crop", "region"):
        raise ValueError("by deve ser 'crop' ou 'region'")

    groups: Dict[str, _GroupAccumulator] = {}
    for rec in records:
        key: Optional[str] = rec.crop if by == "crop" else rec.region
        if key is None:
            raise DataQualityError(f"Registro sem região para agrupar: {rec.producer} / {rec.crop}")
        where = f"({rec.producer}, {rec.crop})"
        acc = groups.setdefault(key, _GroupAccumulator())
        acc.num_fields += 1
        acc.area.add(rec.area_hectare)
        acc.fertilizer.add(rec.fertilizer_kg)
        acc.irrigation.add(rec.irrigation_l)
        acc.fertilizer_per_ha.add(per_hectare(rec.fertilizer_kg, rec.area_hectare, where))
        acc.irrigation_per_ha.add(per_hectare(rec.irrigation_l, rec.area_hectare, where))

    return [
        InputGroupSummary(
            group=key,
            num_fields=acc.num_fields,
            area_total=acc.area.sum,
            fertilizer_mean=acc.fertilizer.value,
            irrigation_mean=acc.irrigation.value,
            fertilizer_per_ha_mean=acc.fertilizer_per_ha.value,
            irrigation_per_ha_mean=acc.irrigation_per_ha.value,
        )
        for key, acc in sorted(groups.items())
    ]
