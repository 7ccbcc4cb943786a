# agroclima_ceara/exports.py
from __future__ import annotations

from dataclasses import asdict, fields
from pathlib import Path
from typing import Dict, Sequence, Type

import pandas as pd

from .pipeline import ClimateAnalysis
from .schemas.records import (
    ForecastRow,
    MonthlyLocationPrecip,
    MonthlyRegionalStat,
    PlantingWindow,
    SuitabilityRow,
)
from .utils.logger import get_logger

logger = get_logger(__name__)


def records_to_frame(records: Sequence, record_type: Type) -> pd.DataFrame:
    """Lista de dataclasses -> DataFrame (mantém as colunas mesmo se vazia)."""
    columns = [f.name for f in fields(record_type)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


def windows_to_frame(windows: Sequence[PlantingWindow]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "region": w.region,
                "crop_name": w.crop_name,
                "recommended_months": w.months_label,
                "mean_index": w.mean_index,
            }
            for w in windows
        ],
        columns=["region", "crop_name", "recommended_months", "mean_index"],
    )


def export_climate_csvs(analysis: ClimateAnalysis, output_dir: Path | str) -> Dict[str, Path]:
    """
    Grava as tabelas da análise climática:
      dados_mensais.csv, adequabilidade_detalhada.csv,
      periodos_recomendados.csv, previsao_proximos_dias.csv,
      balanco_hidrico.csv (chuva total por local e mês)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    frames = {
        "dados_mensais.csv": records_to_frame(analysis.monthly, MonthlyRegionalStat),
        "adequabilidade_detalhada.csv": records_to_frame(analysis.suitability, SuitabilityRow),
        "periodos_recomendados.csv": windows_to_frame(analysis.windows),
        "previsao_proximos_dias.csv": records_to_frame(analysis.forecast, ForecastRow),
        "balanco_hidrico.csv": records_to_frame(analysis.water_balance, MonthlyLocationPrecip),
    }

    written: Dict[str, Path] = {}
    for name, df in frames.items():
        path = output_dir / name
        df.to_csv(path, index=False)
        written[name] = path
        logger.info("CSV salvo em %s (%d linhas)", path, len(df))
    return written
