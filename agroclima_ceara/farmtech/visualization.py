# agroclima_ceara/farmtech/visualization.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..visualization import save_figure
from .statistics import numeric_column


def _trend_line(ax, x: np.ndarray, y: np.ndarray) -> None:
    """Reta de mínimos quadrados (precisa de 2+ pontos com x distintos)."""
    mask = ~(np.isnan(x) | np.isnan(y))
    x, y = x[mask], y[mask]
    if len(x) < 2 or np.unique(x).size < 2:
        return
    slope, intercept = np.polyfit(x, y, 1)
    xs = np.linspace(x.min(), x.max(), 50)
    ax.plot(xs, slope * xs + intercept, color="darkgrey", linewidth=1.5)


def plot_total_by_crop(
    insumos: pd.DataFrame,
    column: str,
    title: str,
    ylabel: str,
    save_path: Optional[str | Path] = None,
    show: bool = False,
) -> None:
    """Barras com a soma de `column` por cultura."""
    values = numeric_column(insumos, column, "de insumos")
    totals = values.groupby(insumos["cultura_plantada"].astype(str)).sum().sort_index()

    fig, ax = plt.subplots(figsize=(8, 6))
    colors = plt.cm.tab10(np.arange(len(totals)) % 10)
    ax.bar(totals.index, totals.values, color=colors)
    ax.set_title(title)
    ax.set_xlabel("Cultura")
    ax.set_ylabel(ylabel)
    plt.setp(ax.get_xticklabels(), rotation=45, ha="right")

    save_figure(fig, save_path, show)


def plot_area_relation(
    insumos: pd.DataFrame,
    column: str,
    title: str,
    ylabel: str,
    save_path: Optional[str | Path] = None,
    show: bool = False,
) -> None:
    """Dispersão área x `column`, colorida por cultura, com reta de tendência."""
    area = numeric_column(insumos, "area_hectare", "de insumos").to_numpy()
    values = numeric_column(insumos, column, "de insumos").to_numpy()
    crops = insumos["cultura_plantada"].astype(str).to_numpy()

    fig, ax = plt.subplots(figsize=(8, 6))
    for crop in sorted(set(crops)):
        sel = crops == crop
        ax.scatter(area[sel], values[sel], s=40, alpha=0.7, label=crop)
    _trend_line(ax, area, values)

    ax.set_title(title)
    ax.set_xlabel("Área (hectares)")
    ax.set_ylabel(ylabel)
    if len(crops):
        ax.legend(title="Cultura")
    ax.grid(alpha=0.3)

    save_figure(fig, save_path, show)


def write_farm_charts(insumos: pd.DataFrame, output_dir: Path | str, timestamp: str) -> Dict[str, Path]:
    """Gera os quatro PNGs do FarmTech com o timestamp dos arquivos de entrada."""
    output_dir = Path(output_dir)
    paths = {
        "area_por_cultura": output_dir / f"area_por_cultura_{timestamp}.png",
        "area_vs_fertilizantes": output_dir / f"area_vs_fertilizantes_{timestamp}.png",
        "irrigacao_por_cultura": output_dir / f"irrigacao_por_cultura_{timestamp}.png",
        "area_vs_irrigacao": output_dir / f"area_vs_irrigacao_{timestamp}.png",
    }
    plot_total_by_crop(
        insumos, "area_hectare", "Área Cultivada por Cultura", "Área (hectares)",
        save_path=paths["area_por_cultura"],
    )
    plot_area_relation(
        insumos, "fertilizante_total_kg", "Relação entre Área e Uso de Fertilizantes", "Fertilizante (kg)",
        save_path=paths["area_vs_fertilizantes"],
    )
    plot_total_by_crop(
        insumos, "irrigacao_volume_total", "Volume de Irrigação por Cultura", "Volume de Irrigação (L)",
        save_path=paths["irrigacao_por_cultura"],
    )
    plot_area_relation(
        insumos, "irrigacao_volume_total", "Relação entre Área e Volume de Irrigação", "Volume de Irrigação (L)",
        save_path=paths["area_vs_irrigacao"],
    )
    return paths
