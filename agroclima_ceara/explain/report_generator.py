# agroclima_ceara/explain/report_generator.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from ..climate.forecast import first_days
from ..config import FORECAST_DAYS, FORECAST_PREVIEW_DAYS
from ..pipeline import ClimateAnalysis
from ..planner.windows import window_for

RULE = "=" * 64


# =============================================================================
# Helpers
# =============================================================================

def now_str(moment: Optional[datetime] = None) -> str:
    return (moment or datetime.now()).strftime("%d/%m/%Y %H:%M:%S")


def fmt(v: Any, digits: int = 1) -> str:
    try:
        x = float(v)
        if x != x:
            return "N/D"
        return f"{x:.{digits}f}"
    except (TypeError, ValueError):
        return "N/D"


def pct(v: Any) -> str:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return "N/D"
    if x != x:
        return "N/D"
    return f"{x * 100:.0f}%"


def unique(values) -> List[Any]:
    seen: List[Any] = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


# =============================================================================
# Seções
# =============================================================================

def _regional_section(analysis: ClimateAnalysis) -> List[str]:
    lines = ["ESTATÍSTICAS CLIMÁTICAS POR REGIÃO:"]
    if not analysis.regional:
        lines.append("Sem dados climáticos disponíveis.")
        return lines
    for st in analysis.regional:
        lines.append(f"\n* {st.region}:")
        lines.append(f"  - Temperatura média máxima: {fmt(st.temp_max_mean)}°C")
        lines.append(f"  - Temperatura média mínima: {fmt(st.temp_min_mean)}°C")
        lines.append(f"  - Amplitude térmica média: {fmt(st.thermal_amplitude_mean)}°C")
        lines.append(f"  - Precipitação anual média: {fmt(st.annual_precip_total, 0)} mm")
        lines.append(f"  - Dias chuvosos (média): {fmt(st.rainy_days_mean, 0)} dias")
    return lines


def _suitability_section(analysis: ClimateAnalysis) -> List[str]:
    lines = ["ÍNDICE DE ADEQUABILIDADE POR CULTURA E REGIÃO:"]
    if not analysis.suitability_summary:
        lines.append("Sem dados climáticos disponíveis.")
        return lines
    for region in unique(s.region for s in analysis.suitability_summary):
        lines.append(f"\n* {region}:")
        for s in analysis.suitability_summary:
            if s.region == region:
                lines.append(f"  - {s.crop_name}: {pct(s.mean_index)}")
    return lines


def _windows_section(analysis: ClimateAnalysis) -> List[str]:
    lines = ["MELHORES PERÍODOS DE PLANTIO:"]
    if not analysis.has_data:
        lines.append("Sem dados climáticos disponíveis.")
        return lines
    if not analysis.windows:
        lines.append("Não foram identificados períodos adequados com base nos critérios definidos.")
        return lines

    crops = [c.crop_name for c in analysis.crops]
    for region in unique(w.region for w in analysis.windows):
        lines.append(f"\n* {region}:")
        for crop in crops:
            w = window_for(analysis.windows, region, crop)
            if w is None:
                lines.append(f"  - {crop}: Sem períodos adequados identificados")
            else:
                lines.append(
                    f"  - {crop}: {w.months_label} (adequabilidade média: {pct(w.mean_index)})"
                )
    return lines


def _recommendations_section(analysis: ClimateAnalysis) -> List[str]:
    lines = ["RECOMENDAÇÕES ESPECÍFICAS:"]
    for crop in analysis.crops:
        if not crop.recommendations:
            continue
        lines.append(f"\n* {crop.crop_name}:")
        lines.extend(f"  - {r}" for r in crop.recommendations)
    return lines


def _forecast_section(analysis: ClimateAnalysis, preview_days: int, horizon_days: int) -> List[str]:
    lines = [f"PREVISÃO PARA OS PRÓXIMOS {horizon_days} DIAS:"]
    if not analysis.forecast:
        lines.append("Previsão indisponível.")
        return lines
    for region in unique(r.region for r in analysis.forecast):
        lines.append(f"\n* {region}:")
        for r in first_days(analysis.forecast, preview_days, region=region):
            lines.append(
                f"  - {r.date.strftime('%d/%m')}: {fmt(r.temp_min)}°C a {fmt(r.temp_max)}°C, "
                f"precipitação: {fmt(r.precipitation)} mm"
            )
    return lines


def _coverage_section(analysis: ClimateAnalysis) -> List[str]:
    if not analysis.results:
        return []
    n_ok = sum(1 for r in analysis.results if r.ok)
    lines = [f"COBERTURA DOS DADOS: {n_ok} de {len(analysis.results)} locais"]
    for r in analysis.failed_locations:
        lines.append(f"  - {r.location.name} ({r.location.region}): sem dados ({r.error})")
    for r in analysis.forecast_failures:
        lines.append(f"  - {r.location.name} ({r.location.region}): sem previsão ({r.forecast_error})")
    return lines


# =============================================================================
# Relatório
# =============================================================================

def generate_report(
    analysis: ClimateAnalysis,
    generated_at: Optional[datetime] = None,
    preview_days: int = FORECAST_PREVIEW_DAYS,
    horizon_days: int = FORECAST_DAYS,
) -> str:
    """Relatório de texto da análise climática (uma seção por tabela)."""
    lines: List[str] = [
        RULE,
        "           ANÁLISE CLIMÁTICA PARA CULTURAS DO CEARÁ             ",
        RULE,
        "",
        f"Data de geração: {now_str(generated_at)}",
        "",
    ]

    coverage = _coverage_section(analysis)
    if coverage:
        lines.extend(coverage)
        lines.append("")

    for section in (
        _regional_section(analysis),
        _suitability_section(analysis),
        _windows_section(analysis),
        _recommendations_section(analysis),
        _forecast_section(analysis, preview_days, horizon_days),
    ):
        lines.extend(section)
        lines.append("\n")

    lines.append(RULE)
    lines.append("                        FIM DO RELATÓRIO                         ")
    lines.append(RULE)
    return "\n".join(lines) + "\n"
