# agroclima_ceara/planner/windows.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import PLANTING_THRESHOLD
from ..schemas.records import PlantingWindow, SuitabilityRow


@dataclass
class _WindowAccumulator:
    months: List[int] = field(default_factory=list)
    total: float = 0.0
    count: int = 0


def select_planting_windows(
    rows: Sequence[SuitabilityRow],
    threshold: float = PLANTING_THRESHOLD,
) -> List[PlantingWindow]:
    """
    Melhores períodos de plantio.

    Mantém as linhas com índice >= threshold e resume por (região, cultura):
    meses distintos na ordem em que aparecem e índice médio do grupo.
    Pares sem nenhuma linha aprovada não geram registro.
    """
    groups: Dict[Tuple[str, str], _WindowAccumulator] = {}

    for row in rows:
        # NaN nunca passa no filtro
        if not row.suitability_index >= threshold:
            continue
        acc = groups.setdefault((row.region, row.crop_name), _WindowAccumulator())
        if row.month not in acc.months:
            acc.months.append(row.month)
        acc.total += row.suitability_index
        acc.count += 1

    return [
        PlantingWindow(
            region=region,
            crop_name=crop,
            recommended_months=tuple(acc.months),
            mean_index=acc.total / acc.count,
        )
        for (region, crop), acc in sorted(groups.items())
    ]


def window_for(
    windows: Sequence[PlantingWindow],
    region: str,
    crop_name: str,
) -> Optional[PlantingWindow]:
    """Janela do par (região, cultura) ou None se nenhum período foi adequado."""
    for w in windows:
        if w.region == region and w.crop_name == crop_name:
            return w
    return None
