# agroclima_ceara/farmtech/loader.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from ..config import FARMTECH_SUFFIXES, FARMTECH_TIMESTAMP_PATTERN
from ..errors import DataQualityError, InputFileNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS: Dict[str, List[str]] = {
    "culturas": [
        "ciclo_minimo",
        "ciclo_maximo",
        "temperatura_min",
        "temperatura_max",
        "precipitacao_min",
        "precipitacao_max",
    ],
    "campos": [
        "nome_produtor",
        "cultura_plantada",
        "area_m2",
        "area_hectare",
        "tipo_geometria",
        "regiao",
    ],
    "insumos": [
        "nome_produtor",
        "cultura_plantada",
        "area_hectare",
        "fertilizante_total_kg",
        "irrigacao_volume_total",
    ],
}


@dataclass(frozen=True)
class FarmTables:
    culturas_path: Path
    campos_path: Path
    insumos_path: Path
    culturas: pd.DataFrame
    campos: pd.DataFrame
    insumos: pd.DataFrame


def find_latest_file(suffix: str, directory: Path | str = ".") -> Path:
    """
    Arquivo mais recente (por data de modificação) cujo nome termina com `suffix`.
    """
    directory = Path(directory)
    candidates: List[Path] = []
    if directory.is_dir():
        candidates = [p for p in directory.iterdir() if p.is_file() and p.name.endswith(suffix)]
    if not candidates:
        raise InputFileNotFoundError(f"Nenhum arquivo encontrado com o sufixo: {suffix} (em {directory})")
    return max(candidates, key=lambda p: p.stat().st_mtime)


def _check_columns(df: pd.DataFrame, kind: str, path: Path) -> None:
    missing = [c for c in REQUIRED_COLUMNS[kind] if c not in df.columns]
    if missing:
        raise DataQualityError(
            f"Arquivo {path} precisa ter colunas {REQUIRED_COLUMNS[kind]}. "
            f"Colunas faltando: {missing}"
        )


def load_farm_tables(directory: Path | str = ".") -> FarmTables:
    """
    Localiza e lê os três CSVs do FarmTech (culturas, campos, insumos).

    Todos os arquivos são localizados antes de qualquer leitura: se faltar
    algum, nada é carregado.
    """
    paths = {kind: find_latest_file(suffix, directory) for kind, suffix in FARMTECH_SUFFIXES.items()}

    for kind, path in paths.items():
        logger.info("%s: %s", kind.capitalize(), path.name)

    frames = {}
    for kind, path in paths.items():
        df = pd.read_csv(path)
        _check_columns(df, kind, path)
        frames[kind] = df

    return FarmTables(
        culturas_path=paths["culturas"],
        campos_path=paths["campos"],
        insumos_path=paths["insumos"],
        culturas=frames["culturas"],
        campos=frames["campos"],
        insumos=frames["insumos"],
    )


def extract_timestamp(path: Path | str, now: Optional[datetime] = None) -> str:
    """Timestamp YYYYMMDD_HHMMSS do nome do arquivo; se não houver, usa o horário atual."""
    m = re.search(FARMTECH_TIMESTAMP_PATTERN, Path(path).name)
    if m:
        return m.group(0)
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
