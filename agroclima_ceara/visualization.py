# agroclima_ceara/visualization.py

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .schemas.records import MONTH_LABELS, MonthlyRegionalStat, SuitabilitySummary, month_label


def save_figure(fig, save_path: Optional[str | Path], show: bool) -> None:
    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    # fecha para liberar memória em execuções em lote
    plt.close("all")


def plot_monthly_temperature(
    monthly: Sequence[MonthlyRegionalStat],
    save_path: Optional[str | Path] = None,
    show: bool = False,
) -> None:
    """Linha da temperatura máxima média mensal, uma série por região."""
    fig, ax = plt.subplots(figsize=(8, 5))

    for region in dict.fromkeys(s.region for s in monthly):
        pts = sorted((s.month, s.temp_max_mean) for s in monthly if s.region == region)
        ax.plot([m for m, _ in pts], [v for _, v in pts], marker="o", linewidth=1.5, label=region)

    ax.set_title("Temperatura Máxima Média Mensal por Região")
    ax.set_xlabel("Mês")
    ax.set_ylabel("Temperatura (°C)")
    ax.set_xticks(range(1, 13))
    ax.set_xticklabels(MONTH_LABELS, rotation=45, ha="right")
    ax.legend(title="Região")
    ax.grid(alpha=0.3)

    save_figure(fig, save_path, show)


def plot_monthly_precipitation(
    monthly: Sequence[MonthlyRegionalStat],
    save_path: Optional[str | Path] = None,
    show: bool = False,
) -> None:
    """Barras agrupadas (mês x região) da precipitação média diária."""
    fig, ax = plt.subplots(figsize=(8, 5))

    regions = list(dict.fromkeys(s.region for s in monthly))
    months = sorted({s.month for s in monthly})
    x = np.arange(len(months))
    width = 0.8 / max(1, len(regions))

    for i, region in enumerate(regions):
        values = {s.month: s.precip_mean for s in monthly if s.region == region}
        heights = [values.get(m, np.nan) for m in months]
        ax.bar(x + i * width - 0.4 + width / 2, heights, width=width, label=region)

    ax.set_title("Precipitação Média Mensal por Região")
    ax.set_xlabel("Mês")
    ax.set_ylabel("Precipitação (mm)")
    ax.set_xticks(x)
    ax.set_xticklabels([month_label(m) for m in months], rotation=45, ha="right")
    ax.legend(title="Região")

    save_figure(fig, save_path, show)


def plot_suitability_heatmap(
    summary: Sequence[SuitabilitySummary],
    save_path: Optional[str | Path] = None,
    show: bool = False,
) -> None:
    """Mapa de calor cultura x região com o índice médio em %."""
    crops = sorted({s.crop_name for s in summary})
    regions = sorted({s.region for s in summary})
    grid = np.full((len(regions), len(crops)), np.nan)
    for s in summary:
        grid[regions.index(s.region), crops.index(s.crop_name)] = s.mean_index

    fig, ax = plt.subplots(figsize=(8, 5))
    im = ax.imshow(grid, cmap="Greens", vmin=0.0, vmax=1.0, aspect="auto")

    for r in range(len(regions)):
        for c in range(len(crops)):
            v = grid[r, c]
            if not np.isnan(v):
                ax.text(c, r, f"{v * 100:.0f}%", ha="center", va="center", color="black")

    ax.set_xticks(range(len(crops)))
    ax.set_xticklabels(crops)
    ax.set_yticks(range(len(regions)))
    ax.set_yticklabels(regions)
    ax.set_title("Índice de Adequabilidade por Cultura e Região")
    ax.set_xlabel("Cultura")
    ax.set_ylabel("Região")
    fig.colorbar(im, ax=ax, label="Adequabilidade")

    save_figure(fig, save_path, show)
