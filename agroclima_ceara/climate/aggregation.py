# agroclima_ceara/climate/aggregation.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..schemas.records import (
    DailyObservation,
    MonthlyLocationPrecip,
    MonthlyRegionalStat,
    measurement,
)


@dataclass
class NanMean:
    """Média que ignora valores ausentes (NaN se nenhum valor válido)."""
    total: float = 0.0
    count: int = 0

    def add(self, value: float) -> None:
        if not math.isnan(value):
            self.total += value
            self.count += 1

    @property
    def value(self) -> float:
        return self.total / self.count if self.count else math.nan

    @property
    def sum(self) -> float:
        # grupo sem nenhum valor válido não soma zero
        return self.total if self.count else math.nan


@dataclass
class _MonthlyAccumulator:
    temp_max: NanMean
    temp_min: NanMean
    precipitation: NanMean


def _where(obs: DailyObservation) -> str:
    return f"({obs.location}, {obs.date})"


def checked_values(obs: DailyObservation) -> Tuple[float, float, float]:
    """(temp_max, temp_min, precipitation) validados como números."""
    w = _where(obs)
    return (
        measurement(obs.temp_max, "temp_max", w),
        measurement(obs.temp_min, "temp_min", w),
        measurement(obs.precipitation, "precipitation", w),
    )


def aggregate_monthly(observations: Iterable[DailyObservation]) -> List[MonthlyRegionalStat]:
    """
    Médias mensais por região.

    Agrupa por (região, mês do ano) e calcula a média de temp_max, temp_min e
    precipitação ignorando ausentes. Só emite combinações observadas, em
    ordem (região, mês).
    """
    groups: Dict[Tuple[str, int], _MonthlyAccumulator] = {}

    for obs in observations:
        tmax, tmin, prcp = checked_values(obs)
        key = (obs.region, obs.date.month)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _MonthlyAccumulator(NanMean(), NanMean(), NanMean())
        acc.temp_max.add(tmax)
        acc.temp_min.add(tmin)
        acc.precipitation.add(prcp)

    return [
        MonthlyRegionalStat(
            region=region,
            month=month,
            temp_max_mean=acc.temp_max.value,
            temp_min_mean=acc.temp_min.value,
            precip_mean=acc.precipitation.value,
        )
        for (region, month), acc in sorted(groups.items())
    ]


def monthly_precipitation_totals(
    observations: Iterable[DailyObservation],
) -> List[MonthlyLocationPrecip]:
    """Balanço hídrico simplificado: chuva total por local e mês."""
    groups: Dict[Tuple[str, str, int], NanMean] = {}

    for obs in observations:
        _, _, prcp = checked_values(obs)
        key = (obs.region, obs.location, obs.date.month)
        groups.setdefault(key, NanMean()).add(prcp)

    return [
        MonthlyLocationPrecip(region=region, location=location, month=month, precip_total=acc.sum)
        for (region, location, month), acc in sorted(groups.items())
    ]
