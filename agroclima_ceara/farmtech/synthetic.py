# agroclima_ceara/farmtech/synthetic.py
"""
Gera CSVs sintéticos no formato do FarmTech (culturas, campos, insumos)
para demonstração e testes da análise estatística.

    python -m agroclima_ceara.farmtech.synthetic --diretorio dados_farmtech
"""
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..config import FARMTECH_SUFFIXES

# cultura: ciclo_min, ciclo_max, temp_min, temp_max, precip_min, precip_max,
# fertilizante (kg/ha) e irrigação (L/ha) típicos
CROP_TABLE = {
    "Mandioca": (240, 540, 20, 30, 1000, 1500, 80.0, 15000.0),
    "Feijão Caupi": (60, 90, 18, 34, 300, 450, 40.0, 20000.0),
    "Milho": (90, 140, 20, 32, 500, 800, 120.0, 30000.0),
    "Caju": (365, 730, 22, 36, 800, 1500, 60.0, 10000.0),
}

REGIONS = ["Litoral", "Sertão", "Cariri"]
GEOMETRIES = ["retangulo", "triangulo", "circulo"]


def generate_farm_frames(n_fields: int = 30, seed: int = 42) -> Dict[str, pd.DataFrame]:
    rng = np.random.default_rng(seed=seed)

    culturas = pd.DataFrame(
        [
            {
                "nome": nome,
                "ciclo_minimo": c[0],
                "ciclo_maximo": c[1],
                "temperatura_min": c[2],
                "temperatura_max": c[3],
                "precipitacao_min": c[4],
                "precipitacao_max": c[5],
            }
            for nome, c in CROP_TABLE.items()
        ]
    )

    names = list(CROP_TABLE)
    crop = rng.choice(names, size=n_fields)
    area_m2 = rng.uniform(2_000, 80_000, size=n_fields).round(1)
    area_ha = (area_m2 / 10_000).round(4)

    campos = pd.DataFrame(
        {
            "nome_produtor": [f"Produtor {i + 1:02d}" for i in range(n_fields)],
            "cultura_plantada": crop,
            "area_m2": area_m2,
            "area_hectare": area_ha,
            "tipo_geometria": rng.choice(GEOMETRIES, size=n_fields),
            "regiao": rng.choice(REGIONS, size=n_fields),
        }
    )

    fert_rate = np.array([CROP_TABLE[c][6] for c in crop])
    irrig_rate = np.array([CROP_TABLE[c][7] for c in crop])
    # ruído multiplicativo em torno da dose típica
    fert = area_ha * fert_rate * np.clip(rng.normal(1.0, 0.15, size=n_fields), 0.5, 1.5)
    irrig = area_ha * irrig_rate * np.clip(rng.normal(1.0, 0.2, size=n_fields), 0.4, 1.6)

    insumos = pd.DataFrame(
        {
            "nome_produtor": campos["nome_produtor"],
            "cultura_plantada": crop,
            "area_hectare": area_ha,
            "fertilizante_total_kg": fert.round(2),
            "irrigacao_volume_total": irrig.round(1),
        }
    )

    return {"culturas": culturas, "campos": campos, "insumos": insumos}


def generate_farm_tables(
    directory: Path | str,
    n_fields: int = 30,
    seed: int = 42,
    timestamp: Optional[str] = None,
) -> Dict[str, Path]:
    """Grava <ts>_culturas.csv, <ts>_campos.csv e <ts>_insumos.csv em `directory`."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = timestamp or datetime.now().strftime("%Y%m%d_%H%M%S")

    paths: Dict[str, Path] = {}
    for kind, df in generate_farm_frames(n_fields=n_fields, seed=seed).items():
        path = directory / f"farmtech_{timestamp}{FARMTECH_SUFFIXES[kind]}"
        df.to_csv(path, index=False)
        paths[kind] = path
    return paths


def main() -> None:
    ap = argparse.ArgumentParser(description="Gera CSVs sintéticos do FarmTech.")
    ap.add_argument("--diretorio", type=Path, default=Path("."))
    ap.add_argument("--campos", type=int, default=30, help="Número de campos.")
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args()

    paths = generate_farm_tables(args.diretorio, n_fields=args.campos, seed=args.seed)
    for kind, path in paths.items():
        print(f"{kind}: {path}")


if __name__ == "__main__":
    main()
