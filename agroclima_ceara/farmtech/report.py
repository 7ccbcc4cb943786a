# agroclima_ceara/farmtech/report.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..explain.report_generator import fmt, now_str
from ..schemas.farm import CropCatalogStats, FieldStats, InputGroupSummary, InputStats
from .loader import FarmTables
from .statistics import (
    describe_crops,
    describe_fields,
    describe_inputs,
    input_records_from_frame,
    merge_fields_inputs,
    summarize_inputs,
)

SUMMARY_COLUMNS = [
    "group",
    "num_fields",
    "area_total",
    "fertilizer_mean",
    "irrigation_mean",
    "fertilizer_per_ha_mean",
    "irrigation_per_ha_mean",
]


@dataclass(frozen=True)
class FarmAnalysis:
    """Resultado completo da análise dos CSVs do FarmTech."""
    tables: FarmTables
    crops: CropCatalogStats
    fields: FieldStats
    inputs: InputStats
    by_crop: List[InputGroupSummary]
    by_region: List[InputGroupSummary]


def analyze_farm_tables(tables: FarmTables) -> FarmAnalysis:
    """Estatísticas descritivas + resumos por cultura (insumos) e por região (campos x insumos)."""
    by_crop = summarize_inputs(input_records_from_frame(tables.insumos), by="crop")
    merged = merge_fields_inputs(tables.campos, tables.insumos)
    by_region = summarize_inputs(input_records_from_frame(merged), by="region")
    return FarmAnalysis(
        tables=tables,
        crops=describe_crops(tables.culturas),
        fields=describe_fields(tables.campos),
        inputs=describe_inputs(tables.insumos),
        by_crop=by_crop,
        by_region=by_region,
    )


def summaries_to_frame(summaries: Sequence[InputGroupSummary], group_label: str = "grupo") -> pd.DataFrame:
    df = pd.DataFrame([asdict(s) for s in summaries], columns=SUMMARY_COLUMNS)
    return df.rename(columns={"group": group_label})


def export_summaries(analysis: FarmAnalysis, output_dir: Path | str, timestamp: str) -> Dict[str, Path]:
    """resumo_por_cultura_<ts>.csv e resumo_por_regiao_<ts>.csv"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "por_cultura": output_dir / f"resumo_por_cultura_{timestamp}.csv",
        "por_regiao": output_dir / f"resumo_por_regiao_{timestamp}.csv",
    }
    summaries_to_frame(analysis.by_crop, "cultura_plantada").to_csv(paths["por_cultura"], index=False)
    summaries_to_frame(analysis.by_region, "regiao").to_csv(paths["por_regiao"], index=False)
    return paths


# =============================================================================
# Relatório texto
# =============================================================================

def _summary_table(summaries: Sequence[InputGroupSummary], per_hectare: bool) -> List[str]:
    if not summaries:
        return ["Sem registros."]

    header = f"{'Grupo':<20}{'Campos':>8}{'Área (ha)':>12}{'Fert. (kg)':>12}{'Irrig. (L)':>14}"
    if per_hectare:
        header += f"{'Fert./ha':>12}{'Irrig./ha':>14}"
    lines = [header]
    for s in summaries:
        line = (
            f"{s.group:<20}{s.num_fields:>8}{fmt(s.area_total, 2):>12}"
            f"{fmt(s.fertilizer_mean, 2):>12}{fmt(s.irrigation_mean, 2):>14}"
        )
        if per_hectare:
            line += f"{fmt(s.fertilizer_per_ha_mean, 2):>12}{fmt(s.irrigation_per_ha_mean, 2):>14}"
        lines.append(line)
    return lines


def render_farm_report(analysis: FarmAnalysis, generated_at: Optional[datetime] = None) -> str:
    t = analysis.tables
    lines: List[str] = [
        "=== RELATÓRIO DE ANÁLISE FARMTECH ===",
        f"Data de geração: {now_str(generated_at)}",
        "",
        "Arquivos analisados:",
        f"-  {t.culturas_path.name}",
        f"-  {t.campos_path.name}",
        f"-  {t.insumos_path.name}",
        "",
        "RESUMO GERAL",
        f"Número de culturas cadastradas: {analysis.crops.count}",
        f"Número de campos cadastrados: {analysis.fields.count}",
        f"Área total cultivada: {fmt(analysis.fields.area_ha_total, 2)} hectares",
        "",
        "ESTATÍSTICAS DESCRITIVAS",
        f"Média de ciclo mínimo (dias): {fmt(analysis.crops.cycle_min_mean)}",
        f"Média de ciclo máximo (dias): {fmt(analysis.crops.cycle_max_mean)}",
        f"Média de temperatura mínima (°C): {fmt(analysis.crops.temp_min_mean)}",
        f"Média de temperatura máxima (°C): {fmt(analysis.crops.temp_max_mean)}",
        f"Média de precipitação mínima (mm): {fmt(analysis.crops.precip_min_mean)}",
        f"Média de precipitação máxima (mm): {fmt(analysis.crops.precip_max_mean)}",
        f"Média de área (m²): {fmt(analysis.fields.area_m2_mean, 2)} (dp {fmt(analysis.fields.area_m2_sd, 2)})",
        f"Média de área (hectares): {fmt(analysis.fields.area_ha_mean, 2)} (dp {fmt(analysis.fields.area_ha_sd, 2)})",
        "Distribuição de tipos de geometria:",
    ]
    for geom, n in analysis.fields.geometry_counts.items():
        lines.append(f"  {geom}: {n}")

    lines += ["", "ANÁLISE POR CULTURA"]
    lines += _summary_table(analysis.by_crop, per_hectare=True)
    lines += ["", "ANÁLISE POR REGIÃO"]
    lines += _summary_table(analysis.by_region, per_hectare=False)

    lines += [
        "",
        "EFICIÊNCIA DE INSUMOS",
        f"Média geral de fertilizante por hectare: {fmt(analysis.inputs.fertilizer_per_ha_mean, 2)} kg/ha",
        f"Média geral de irrigação por hectare: {fmt(analysis.inputs.irrigation_per_ha_mean, 2)} L/ha",
        "",
    ]
    return "\n".join(lines)
