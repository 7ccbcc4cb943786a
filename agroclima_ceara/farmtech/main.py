# agroclima_ceara/farmtech/main.py
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import AgroClimaError
from ..utils.logger import setup_logging
from .loader import extract_timestamp, load_farm_tables
from .report import FarmAnalysis, analyze_farm_tables, export_summaries, render_farm_report
from .visualization import write_farm_charts


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Análise estatística dos CSVs do FarmTech (culturas, campos, insumos).")
    ap.add_argument("--diretorio", type=Path, default=Path("."), help="Onde procurar os CSVs de entrada.")
    ap.add_argument("--saida", type=Path, default=Path("."), help="Diretório dos arquivos gerados.")
    ap.add_argument("--sem-graficos", action="store_true", help="Não gerar os gráficos PNG.")
    return ap


def write_farm_outputs(
    analysis: FarmAnalysis,
    output_dir: Path,
    timestamp: str,
    charts: bool = True,
    generated_at: Optional[datetime] = None,
) -> List[Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / f"analise_farmtech_{timestamp}.txt"
    report_path.write_text(render_farm_report(analysis, generated_at=generated_at), encoding="utf-8")

    files = [report_path]
    if charts:
        files += list(write_farm_charts(analysis.tables.insumos, output_dir, timestamp).values())
    files += list(export_summaries(analysis, output_dir, timestamp).values())
    return files


def run(argv: Optional[Sequence[str]] = None) -> FarmAnalysis:
    args = build_parser().parse_args(argv)

    tables = load_farm_tables(args.diretorio)
    print("Arquivos encontrados para análise:")
    print(f"Culturas: {tables.culturas_path.name}")
    print(f"Campos: {tables.campos_path.name}")
    print(f"Insumos: {tables.insumos_path.name}\n")

    analysis = analyze_farm_tables(tables)
    timestamp = extract_timestamp(tables.culturas_path)

    print("Gerando relatório de análise...")
    files = write_farm_outputs(analysis, args.saida, timestamp, charts=not args.sem_graficos)

    print("\nAnálise concluída! Arquivos gerados:")
    for path in files:
        print(f"-  {path.name}")
    return analysis


def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging()
    try:
        run(argv)
    except AgroClimaError as exc:
        print(f"\n❌ ERRO: {exc}\n")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
