# agroclima_ceara/main.py
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .climate.ingestion import ClimateSource
from .climate.openmeteo import CsvClimateSource, OpenMeteoSource
from .config import (
    CROPS_JSON,
    FORECAST_DAYS,
    HISTORY_DAYS,
    LOCATIONS_JSON,
    MAX_FORECAST_DAYS,
    OUTPUT_DIR,
    PLANTING_THRESHOLD,
    REQUEST_PAUSE_S,
    load_locations,
)
from .errors import AgroClimaError
from .explain.dashboard import DEFAULT_CHARTS, render_dashboard
from .explain.report_generator import generate_report
from .exports import export_climate_csvs
from .pipeline import ClimateAnalysis, run_climate_analysis
from .planner.catalog import load_crop_profiles
from .utils.logger import setup_logging
from .visualization import (
    plot_monthly_precipitation,
    plot_monthly_temperature,
    plot_suitability_heatmap,
)

REPORT_FILE = "relatorio_agricola_ceara.txt"
DASHBOARD_FILE = "dashboard_ceara.html"


def _print_header(title: str) -> None:
    print()
    print("=" * 40)
    print(title)
    print("=" * 40)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Análise climática e adequabilidade de culturas para o Ceará (Open-Meteo)."
    )
    ap.add_argument("--saida", type=Path, default=OUTPUT_DIR, help="Diretório de resultados.")
    ap.add_argument("--limiar", type=float, default=PLANTING_THRESHOLD,
                    help="Índice mínimo para recomendar um mês de plantio.")
    ap.add_argument("--dias-historico", type=int, default=HISTORY_DAYS)
    ap.add_argument("--dias-previsao", type=int, default=FORECAST_DAYS)
    ap.add_argument("--locais", type=Path, default=LOCATIONS_JSON, help="JSON com os municípios.")
    ap.add_argument("--culturas", type=Path, default=CROPS_JSON, help="JSON com os requisitos das culturas.")
    ap.add_argument("--entrada-csv", type=Path, default=None,
                    help="Histórico diário em CSV (modo offline, sem Open-Meteo).")
    ap.add_argument("--previsao-csv", type=Path, default=None,
                    help="Previsão diária em CSV (usado junto com --entrada-csv).")
    ap.add_argument("--sem-graficos", action="store_true", help="Não gerar os gráficos PNG.")
    return ap


def write_charts(analysis: ClimateAnalysis, output_dir: Path) -> List[tuple]:
    """Gera os PNGs; sem dados, nenhum gráfico é produzido."""
    if not analysis.has_data:
        return []
    plot_monthly_temperature(analysis.monthly, save_path=output_dir / "temperatura_mensal.png")
    plot_monthly_precipitation(analysis.monthly, save_path=output_dir / "precipitacao_mensal.png")
    plot_suitability_heatmap(analysis.suitability_summary, save_path=output_dir / "adequabilidade_culturas.png")
    return list(DEFAULT_CHARTS)


def write_outputs(
    analysis: ClimateAnalysis,
    output_dir: Path,
    charts: bool = True,
    generated_at: Optional[datetime] = None,
    horizon_days: int = FORECAST_DAYS,
) -> List[Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    generated_at = generated_at or datetime.now()

    chart_list = write_charts(analysis, output_dir) if charts else []

    report_path = output_dir / REPORT_FILE
    report_path.write_text(
        generate_report(analysis, generated_at=generated_at, horizon_days=horizon_days),
        encoding="utf-8",
    )

    html_path = output_dir / DASHBOARD_FILE
    html_path.write_text(render_dashboard(analysis, charts=chart_list, generated_at=generated_at), encoding="utf-8")

    csvs = export_climate_csvs(analysis, output_dir)
    return [html_path, report_path] + [output_dir / c[0] for c in chart_list] + list(csvs.values())


def run(argv: Optional[Sequence[str]] = None, source: Optional[ClimateSource] = None) -> ClimateAnalysis:
    """
    Fluxo completo: catálogos -> coleta (melhor esforço por local) -> análise -> saídas.

    Erros de configuração e de qualidade de dado abortam antes de gravar qualquer arquivo.
    """
    args = build_parser().parse_args(argv)

    _print_header("ANÁLISE CLIMÁTICA PARA CULTURAS DO CEARÁ")

    print("[1/4] Carregando locais e requisitos das culturas...")
    locations = load_locations(args.locais)
    crops = load_crop_profiles(args.culturas)

    forecast_days = min(args.dias_previsao, MAX_FORECAST_DAYS)
    if forecast_days < args.dias_previsao:
        print(f"Horizonte de previsão limitado a {MAX_FORECAST_DAYS} dias.")

    pause_s = 0.0
    if source is None:
        if args.entrada_csv is not None:
            source = CsvClimateSource(args.entrada_csv, args.previsao_csv)
        else:
            source = OpenMeteoSource()
            pause_s = REQUEST_PAUSE_S

    print(f"[2/4] Obtendo dados climáticos de {len(locations)} locais...")
    analysis = run_climate_analysis(
        locations,
        crops,
        source,
        history_days=args.dias_historico,
        forecast_days=forecast_days,
        threshold=args.limiar,
        pause_s=pause_s,
    )

    n_ok = len(analysis.results) - len(analysis.failed_locations)
    if not analysis.has_data:
        print("⚠️ Nenhum local retornou dados. Os resultados serão gerados sem dados climáticos.")
    elif analysis.is_partial:
        print(f"⚠️ Dados parciais: {n_ok} de {len(analysis.results)} locais.")

    print("[3/4] Calculando adequabilidade e períodos de plantio...")
    if analysis.has_data and not analysis.windows:
        print("Não foram identificados períodos adequados com base nos critérios definidos.")

    print("[4/4] Gerando relatório, dashboard, gráficos e CSVs...")
    files = write_outputs(
        analysis,
        args.saida,
        charts=not args.sem_graficos,
        horizon_days=forecast_days,
    )

    print("\n=== ANÁLISE CLIMÁTICA PARA CULTURAS DO CEARÁ CONCLUÍDA ===\n")
    print(f"Todos os resultados foram salvos no diretório '{args.saida}'.")
    print("Arquivos gerados:")
    for i, path in enumerate(files, start=1):
        print(f"{i}. {path.name}")
    return analysis


def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging()
    try:
        run(argv)
    except AgroClimaError as exc:
        print(f"\n❌ ERRO: {exc}\nA análise foi abortada; nenhum arquivo foi gerado.\n")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
