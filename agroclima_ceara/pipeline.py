# agroclima_ceara/pipeline.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from .climate.aggregation import aggregate_monthly, monthly_precipitation_totals
from .climate.forecast import summarize_forecast
from .climate.ingestion import (
    ClimateSource,
    LocationResult,
    collect_location_data,
    combined_forecast,
    combined_observations,
)
from .climate.regional import regional_statistics
from .config import FORECAST_DAYS, HISTORY_DAYS, PLANTING_THRESHOLD
from .planner.suitability import score_suitability, summarize_suitability
from .planner.windows import select_planting_windows
from .schemas.records import (
    CropProfile,
    DailyObservation,
    ForecastRow,
    Location,
    MonthlyLocationPrecip,
    MonthlyRegionalStat,
    PlantingWindow,
    RegionalStat,
    SuitabilityRow,
    SuitabilitySummary,
)


@dataclass(frozen=True)
class ClimateAnalysis:
    crops: Tuple[CropProfile, ...]
    threshold: float
    monthly: Tuple[MonthlyRegionalStat, ...]
    suitability: Tuple[SuitabilityRow, ...]
    suitability_summary: Tuple[SuitabilitySummary, ...]
    windows: Tuple[PlantingWindow, ...]
    regional: Tuple[RegionalStat, ...]
    forecast: Tuple[ForecastRow, ...]
    water_balance: Tuple[MonthlyLocationPrecip, ...]
    results: Tuple[LocationResult, ...] = field(default_factory=tuple)

    @property
    def has_data(self) -> bool:
        return len(self.monthly) > 0

    @property
    def failed_locations(self) -> List[LocationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def forecast_failures(self) -> List[LocationResult]:
        return [r for r in self.results if r.ok and r.forecast_error is not None]

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_locations)


def analyze(
    observations: Sequence[DailyObservation],
    forecast_records: Sequence[DailyObservation],
    crops: Sequence[CropProfile],
    threshold: float = PLANTING_THRESHOLD,
    results: Sequence[LocationResult] = (),
) -> ClimateAnalysis:
    """Executa agregação, adequabilidade, janelas, estatísticas e previsão."""
    monthly = aggregate_monthly(observations)
    rows = score_suitability(monthly, crops)

    return ClimateAnalysis(
        crops=tuple(crops),
        threshold=threshold,
        monthly=tuple(monthly),
        suitability=tuple(rows),
        suitability_summary=tuple(summarize_suitability(rows)),
        windows=tuple(select_planting_windows(rows, threshold)),
        regional=tuple(regional_statistics(observations)),
        forecast=tuple(summarize_forecast(forecast_records)),
        water_balance=tuple(monthly_precipitation_totals(observations)),
        results=tuple(results),
    )


def run_climate_analysis(
    locations: Sequence[Location],
    crops: Sequence[CropProfile],
    source: ClimateSource,
    end_date: Optional[date] = None,
    history_days: int = HISTORY_DAYS,
    forecast_days: int = FORECAST_DAYS,
    threshold: float = PLANTING_THRESHOLD,
    pause_s: float = 0.0,
) -> ClimateAnalysis:
    """
    Coleta os últimos `history_days` dias de cada local (melhor esforço) e
    roda a análise sobre os locais que responderam.
    """
    for crop in crops:
        crop.validate()

    if end_date is None:
        end_date = date.today()
    start_date = end_date - timedelta(days=int(history_days))

    results = collect_location_data(
        locations,
        source,
        start_date=start_date,
        end_date=end_date,
        forecast_days=forecast_days,
        pause_s=pause_s,
    )

    return analyze(
        combined_observations(results),
        combined_forecast(results),
        crops,
        threshold=threshold,
        results=results,
    )
