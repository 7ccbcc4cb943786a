# agroclima_ceara/explain/dashboard.py
from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Dict, List, Optional, Sequence

from ..climate.forecast import first_days
from ..config import FORECAST_PREVIEW_DAYS
from ..pipeline import ClimateAnalysis
from .report_generator import fmt, now_str, pct, unique

# (arquivo, título, texto alternativo)
DEFAULT_CHARTS = [
    ("temperatura_mensal.png", "Temperatura Máxima Média Mensal", "Temperatura por região"),
    ("precipitacao_mensal.png", "Precipitação Média Mensal", "Precipitação por região"),
    ("adequabilidade_culturas.png", "Índice de Adequabilidade por Cultura", "Adequabilidade das culturas"),
]

_STYLE = """
        body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background-color: #f5f5f5; }
        .container { max-width: 900px; margin: 0 auto; }
        .header { text-align: center; margin-bottom: 30px; color: #2c5e1a; }
        .card { background: white; border-radius: 8px; padding: 15px; margin-bottom: 20px; box-shadow: 0 2px 5px rgba(0,0,0,0.1); }
        .card-title { margin-top: 0; color: #2c5e1a; border-bottom: 1px solid #eee; padding-bottom: 10px; }
        .table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        .table th, .table td { padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }
        .table th { background-color: #f2f2f2; }
        .warning { color: #8a5a00; }
        .footer { text-align: center; margin-top: 30px; color: #666; font-size: 12px; }
        img { max-width: 100%; height: auto; border-radius: 4px; margin-top: 10px; }
"""


def _row(cells: Sequence[str], tag: str = "td") -> str:
    inner = "".join(f"<{tag}>{escape(str(c))}</{tag}>" for c in cells)
    return f"<tr>{inner}</tr>"


def _empty_row(text: str, colspan: int) -> str:
    return f'<tr><td colspan="{colspan}">{escape(text)}</td></tr>'


def _table(header: Sequence[str], rows: List[str]) -> str:
    return '<table class="table">' + _row(header, "th") + "".join(rows) + "</table>"


def _card(title: str, body: str) -> str:
    return f'<div class="card"><h2 class="card-title">{escape(title)}</h2>{body}</div>'


def _regional_table(analysis: ClimateAnalysis) -> str:
    header = ["Região", "Temp. Máx. Média", "Temp. Mín. Média", "Precipitação Anual", "Dias Chuvosos"]
    rows = [
        _row([
            st.region,
            f"{fmt(st.temp_max_mean)}°C",
            f"{fmt(st.temp_min_mean)}°C",
            f"{fmt(st.annual_precip_total, 0)} mm",
            f"{fmt(st.rainy_days_mean, 0)} dias",
        ])
        for st in analysis.regional
    ]
    if not rows:
        rows = [_empty_row("Sem dados climáticos disponíveis.", len(header))]
    return _table(header, rows)


def _suitability_table(analysis: ClimateAnalysis) -> str:
    crops = sorted(c.crop_name for c in analysis.crops)
    by_key: Dict[tuple, float] = {(s.region, s.crop_name): s.mean_index for s in analysis.suitability_summary}
    header = ["Região"] + crops
    rows = []
    for region in unique(s.region for s in analysis.suitability_summary):
        cells = [region] + [pct(by_key[(region, c)]) if (region, c) in by_key else "N/D" for c in crops]
        rows.append(_row(cells))
    if not rows:
        rows = [_empty_row("Sem dados climáticos disponíveis.", len(header))]
    return _table(header, rows)


def _charts_block(charts: Sequence[tuple]) -> str:
    if not charts:
        return "<p>Gráficos não gerados nesta execução.</p>"
    parts = []
    for src, title, alt in charts:
        parts.append(
            f'<div style="margin-bottom: 20px;"><h3>{escape(title)}</h3>'
            f'<img src="{escape(src)}" alt="{escape(alt)}"></div>'
        )
    return "".join(parts)


def _windows_table(analysis: ClimateAnalysis) -> str:
    header = ["Região", "Cultura", "Meses Recomendados", "Adequabilidade Média"]
    rows = [
        _row([w.region, w.crop_name, w.months_label, pct(w.mean_index)])
        for w in analysis.windows
    ]
    if not rows:
        msg = (
            "Não foram identificados períodos adequados com os critérios definidos."
            if analysis.has_data
            else "Sem dados climáticos disponíveis."
        )
        rows = [_empty_row(msg, len(header))]
    return _table(header, rows)


def _forecast_table(analysis: ClimateAnalysis, preview_days: int) -> str:
    header = ["Região", "Data", "Temperatura Mín.", "Temperatura Máx.", "Precipitação"]
    preview = sorted(first_days(analysis.forecast, preview_days), key=lambda r: (r.region, r.date))
    rows = [
        _row([
            r.region,
            r.date.strftime("%d/%m/%Y"),
            f"{fmt(r.temp_min)}°C",
            f"{fmt(r.temp_max)}°C",
            f"{fmt(r.precipitation)} mm",
        ])
        for r in preview
    ]
    if not rows:
        rows = [_empty_row("Previsão indisponível.", len(header))]
    return _table(header, rows)


def _coverage_note(analysis: ClimateAnalysis) -> str:
    if not analysis.failed_locations:
        return ""
    names = ", ".join(r.location.name for r in analysis.failed_locations)
    n_ok = len(analysis.results) - len(analysis.failed_locations)
    return (
        f'<p class="warning">Dados parciais: {n_ok} de {len(analysis.results)} locais. '
        f"Sem dados para: {escape(names)}.</p>"
    )


def render_dashboard(
    analysis: ClimateAnalysis,
    charts: Sequence[tuple] = tuple(DEFAULT_CHARTS),
    generated_at: Optional[datetime] = None,
    preview_days: int = FORECAST_PREVIEW_DAYS,
) -> str:
    """Dashboard HTML com as mesmas tabelas do relatório e os gráficos."""
    crops_line = ", ".join(c.crop_name for c in analysis.crops)

    body = "".join([
        '<div class="header">',
        "<h1>Análise Climática para Culturas do Ceará</h1>",
        f"<p>{escape(crops_line)}</p>",
        f"<p>Data de geração: {now_str(generated_at)}</p>",
        _coverage_note(analysis),
        "</div>",
        _card("Estatísticas Climáticas", _regional_table(analysis)),
        _card("Adequabilidade das Culturas", _suitability_table(analysis)),
        _card("Gráficos", _charts_block(charts)),
        _card("Melhores Períodos de Plantio", _windows_table(analysis)),
        _card("Previsão para os Próximos Dias", _forecast_table(analysis, preview_days)),
        '<div class="footer">',
        "<p>Análise gerada automaticamente com base em dados climáticos da API Open-Meteo.</p>",
        "<p>Desenvolvido para o monitoramento de culturas adaptadas ao Ceará.</p>",
        "</div>",
    ])

    return (
        "<!DOCTYPE html>\n"
        '<html lang="pt-br">\n<head>\n'
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        "    <title>Análise Climática Agrícola do Ceará</title>\n"
        f"    <style>{_STYLE}    </style>\n"
        "</head>\n<body>\n"
        f'    <div class="container">{body}</div>\n'
        "</body>\n</html>\n"
    )
