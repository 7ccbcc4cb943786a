# agroclima_ceara/climate/forecast.py
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..schemas.records import DailyObservation, ForecastRow
from .aggregation import NanMean, checked_values


def summarize_forecast(records: Iterable[DailyObservation]) -> List[ForecastRow]:
    """
    Previsão por região: média entre os locais da região para cada data.
    Saída ordenada por data (e região, para desempate).
    """
    groups: Dict[Tuple[date, str], Tuple[NanMean, NanMean, NanMean]] = {}

    for rec in records:
        tmax, tmin, prcp = checked_values(rec)
        acc = groups.setdefault((rec.date, rec.region), (NanMean(), NanMean(), NanMean()))
        acc[0].add(tmax)
        acc[1].add(tmin)
        acc[2].add(prcp)

    return [
        ForecastRow(
            region=region,
            date=day,
            temp_max=acc[0].value,
            temp_min=acc[1].value,
            precipitation=acc[2].value,
        )
        for (day, region), acc in sorted(groups.items())
    ]


def first_days(rows: Sequence[ForecastRow], n: int, region: Optional[str] = None) -> List[ForecastRow]:
    """Recorte das `n` primeiras datas da previsão (opcionalmente de uma região)."""
    if region is not None:
        rows = [r for r in rows if r.region == region]
    dates = sorted({r.date for r in rows})[: max(0, int(n))]
    keep = set(dates)
    return [r for r in rows if r.date in keep]
