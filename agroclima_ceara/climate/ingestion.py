# agroclima_ceara/climate/ingestion.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Protocol, Sequence, Tuple

import pandas as pd

from ..errors import DataQualityError, FetchError
from ..schemas.records import DailyObservation, Location, measurement
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ClimateSource(Protocol):
    def history(self, location: Location, start_date: date, end_date: date) -> pd.DataFrame: ...

    def forecast(self, location: Location, days: int) -> pd.DataFrame: ...


@dataclass(frozen=True)
class LocationResult:
    """
    Resultado (sucesso/falha) da coleta de um local.

    - error: falha do histórico -> o local fica fora da análise
    - forecast_error: falha só da previsão -> o histórico é mantido
    """
    location: Location
    observations: Tuple[DailyObservation, ...] = field(default_factory=tuple)
    forecast: Tuple[DailyObservation, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    forecast_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def observations_from_frame(df: pd.DataFrame, location: Location) -> List[DailyObservation]:
    """
    Converte um DataFrame diário (ds, temp_max, temp_min, precipitation)
    em DailyObservation do local. Valores ausentes viram NaN; valores não
    numéricos levantam DataQualityError.
    """
    if df is None or df.empty:
        return []

    missing = [c for c in ["ds", "temp_max", "temp_min", "precipitation"] if c not in df.columns]
    if missing:
        raise DataQualityError(f"Dados de {location.name} sem as colunas {missing}")

    out: List[DailyObservation] = []
    for ds, tmax, tmin, prcp in zip(df["ds"], df["temp_max"], df["temp_min"], df["precipitation"]):
        ts = pd.to_datetime(ds, errors="coerce")
        if pd.isna(ts):
            raise DataQualityError(f"Data inválida {ds!r} em {location.name}")
        where = f"({location.name}, {ts.date().isoformat()})"
        out.append(
            DailyObservation(
                location=location.name,
                region=location.region,
                date=ts.date(),
                temp_max=measurement(tmax, "temp_max", where),
                temp_min=measurement(tmin, "temp_min", where),
                precipitation=measurement(prcp, "precipitation", where),
            )
        )
    return out


def fetch_location(
    source: ClimateSource,
    location: Location,
    start_date: date,
    end_date: date,
    forecast_days: int,
) -> LocationResult:
    """
    Coleta histórico e previsão de um local.

    Só FetchError é convertido em falha do local; erro de qualidade de dado
    sobe para quem chamou.
    """
    try:
        history_df = source.history(location, start_date, end_date)
    except FetchError as exc:
        logger.warning("Erro ao obter dados para %s: %s", location.name, exc)
        return LocationResult(location=location, error=str(exc))

    observations = tuple(observations_from_frame(history_df, location))

    try:
        forecast_df = source.forecast(location, forecast_days)
    except FetchError as exc:
        logger.warning("Erro ao obter previsão para %s: %s", location.name, exc)
        return LocationResult(location=location, observations=observations, forecast_error=str(exc))

    forecast = tuple(observations_from_frame(forecast_df, location))
    return LocationResult(location=location, observations=observations, forecast=forecast)


def collect_location_data(
    locations: Sequence[Location],
    source: ClimateSource,
    start_date: date,
    end_date: date,
    forecast_days: int,
    pause_s: float = 0.0,
) -> List[LocationResult]:
    """
    Coleta cada local de forma independente; a falha de um local não
    interrompe os demais.
    """
    results: List[LocationResult] = []
    for i, location in enumerate(locations):
        if i > 0 and pause_s > 0:
            time.sleep(pause_s)
        results.append(fetch_location(source, location, start_date, end_date, forecast_days))

    n_ok = sum(1 for r in results if r.ok)
    if n_ok < len(results):
        logger.warning("Dados parciais: %d de %d locais obtidos.", n_ok, len(results))
    return results


def combined_observations(results: Sequence[LocationResult]) -> List[DailyObservation]:
    return [obs for r in results if r.ok for obs in r.observations]


def combined_forecast(results: Sequence[LocationResult]) -> List[DailyObservation]:
    return [obs for r in results if r.ok for obs in r.forecast]
