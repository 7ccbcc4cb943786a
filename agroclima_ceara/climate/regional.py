# agroclima_ceara/climate/regional.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from ..config import RAINY_DAY_MM
from ..schemas.records import DailyObservation, RegionalStat
from .aggregation import NanMean, checked_values


@dataclass
class _RegionAccumulator:
    temp_max: NanMean = field(default_factory=NanMean)
    temp_min: NanMean = field(default_factory=NanMean)
    amplitude: NanMean = field(default_factory=NanMean)
    precipitation: NanMean = field(default_factory=NanMean)
    rainy_days: int = 0
    locations: Set[str] = field(default_factory=set)


def regional_statistics(
    observations: Iterable[DailyObservation],
    rainy_day_mm: float = RAINY_DAY_MM,
) -> List[RegionalStat]:
    """
    Estatísticas do período inteiro por região.

    - amplitude térmica: média de (tmax - tmin) calculada dia a dia
    - precipitação anual e dias chuvosos (> rainy_day_mm): divididos pelo
      número de locais distintos da região (média por local)
    """
    groups: Dict[str, _RegionAccumulator] = {}

    for obs in observations:
        tmax, tmin, prcp = checked_values(obs)
        acc = groups.setdefault(obs.region, _RegionAccumulator())
        acc.locations.add(obs.location)
        acc.temp_max.add(tmax)
        acc.temp_min.add(tmin)
        acc.amplitude.add(tmax - tmin)
        acc.precipitation.add(prcp)
        if not math.isnan(prcp) and prcp > rainy_day_mm:
            acc.rainy_days += 1

    out: List[RegionalStat] = []
    for region, acc in sorted(groups.items()):
        n_loc = len(acc.locations)
        out.append(
            RegionalStat(
                region=region,
                temp_max_mean=acc.temp_max.value,
                temp_min_mean=acc.temp_min.value,
                thermal_amplitude_mean=acc.amplitude.value,
                annual_precip_total=acc.precipitation.sum / n_loc,
                rainy_days_mean=acc.rainy_days / n_loc if acc.precipitation.count else math.nan,
            )
        )
    return out
