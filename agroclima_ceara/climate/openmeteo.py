# agroclima_ceara/climate/openmeteo.py
from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from ..config import (
    DAILY_VARS,
    MAX_FORECAST_DAYS,
    OPENMETEO_ARCHIVE_URL,
    OPENMETEO_FORECAST_URL,
    REQUEST_TIMEOUT_S,
)
from ..errors import DataQualityError, FetchError, InputFileNotFoundError
from ..schemas.records import Location
from ..utils.logger import get_logger

logger = get_logger(__name__)

DAILY_COLUMNS = ["ds", "temp_max", "temp_min", "precipitation", "rain"]

_RENAME = {
    "time": "ds",
    "temperature_2m_max": "temp_max",
    "temperature_2m_min": "temp_min",
    "precipitation_sum": "precipitation",
    "rain_sum": "rain",
}


def _get_daily(url: str, params: Dict[str, Any], timeout: float) -> pd.DataFrame:
    """
    Executa a requisição e normaliza o bloco 'daily' para as colunas:
      ds, temp_max, temp_min, precipitation, rain

    Os valores ficam como vieram da API (None vira NaN); a checagem numérica
    é feita na ingestão.
    """
    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(f"Erro na requisição à API: {exc}") from exc

    if resp.status_code != 200:
        raise FetchError(f"Erro na requisição à API: {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise FetchError(f"Resposta da API não é JSON válido: {exc}") from exc

    daily = data.get("daily") or {}
    if "time" not in daily:
        raise FetchError("Open-Meteo não retornou bloco 'daily'.")

    n = len(daily["time"])
    df = pd.DataFrame({_RENAME[k]: daily.get(k, [None] * n) for k in ["time"] + DAILY_VARS})
    if df.empty:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    df["ds"] = pd.to_datetime(df["ds"])
    return df[DAILY_COLUMNS].sort_values("ds").reset_index(drop=True)


def fetch_daily_history(
    lat: float,
    lon: float,
    start_date: date,
    end_date: date,
    timeout: float = REQUEST_TIMEOUT_S,
) -> pd.DataFrame:
    """Histórico diário via Open-Meteo Archive API para o intervalo [start_date, end_date]."""
    if end_date < start_date:
        raise ValueError("end_date deve ser >= start_date")

    params = {
        "latitude": lat,
        "longitude": lon,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "daily": ",".join(DAILY_VARS),
        "timezone": "auto",
    }
    return _get_daily(OPENMETEO_ARCHIVE_URL, params, timeout)


def fetch_daily_forecast(
    lat: float,
    lon: float,
    days: int = 10,
    timeout: float = REQUEST_TIMEOUT_S,
) -> pd.DataFrame:
    """Previsão diária Open-Meteo para os próximos `days` dias (máx. 16)."""
    if days <= 0:
        raise ValueError("days deve ser > 0")
    days = min(days, MAX_FORECAST_DAYS)

    params = {
        "latitude": lat,
        "longitude": lon,
        "daily": ",".join(DAILY_VARS),
        "forecast_days": days,
        "timezone": "auto",
    }
    return _get_daily(OPENMETEO_FORECAST_URL, params, timeout)


# =============================================================================
# FONTES DE DADOS (interface comum: history / forecast)
# =============================================================================

class OpenMeteoSource:
    """Fonte online: uma requisição por local."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT_S):
        self.timeout = timeout

    def history(self, location: Location, start_date: date, end_date: date) -> pd.DataFrame:
        logger.info("Obtendo histórico para %s (%s -> %s)", location.name, start_date, end_date)
        return fetch_daily_history(
            location.latitude, location.longitude, start_date, end_date, timeout=self.timeout
        )

    def forecast(self, location: Location, days: int) -> pd.DataFrame:
        logger.info("Obtendo previsão de %d dias para %s", days, location.name)
        return fetch_daily_forecast(location.latitude, location.longitude, days, timeout=self.timeout)


class CsvClimateSource:
    """
    Fonte offline: lê séries diárias já exportadas.

    O CSV precisa das colunas location, date, temp_max, temp_min, precipitation.
    Um local sem linhas no arquivo é tratado como falha de obtenção.
    """

    REQUIRED = ["location", "date", "temp_max", "temp_min", "precipitation"]

    def __init__(self, history_csv: Path | str, forecast_csv: Optional[Path | str] = None):
        self.history_df = self._read(Path(history_csv))
        self.forecast_df = self._read(Path(forecast_csv)) if forecast_csv else None

    def _read(self, path: Path) -> pd.DataFrame:
        if not path.exists():
            raise InputFileNotFoundError(f"Arquivo de dados climáticos não encontrado: {path}")
        df = pd.read_csv(path)
        missing = [c for c in self.REQUIRED if c not in df.columns]
        if missing:
            raise DataQualityError(
                f"Arquivo {path} precisa ter colunas {self.REQUIRED}. "
                f"Colunas faltando: {missing}"
            )
        df = df.copy()
        df["date"] = pd.to_datetime(df["date"])
        return df

    def _select(self, df: pd.DataFrame, location: Location) -> pd.DataFrame:
        d = df[df["location"] == location.name]
        if d.empty:
            raise FetchError(f"Sem dados para {location.name} no arquivo.")
        out = d.rename(columns={"date": "ds"})
        cols: List[str] = ["ds", "temp_max", "temp_min", "precipitation"]
        return out[cols].sort_values("ds").reset_index(drop=True)

    def history(self, location: Location, start_date: date, end_date: date) -> pd.DataFrame:
        d = self._select(self.history_df, location)
        mask = (d["ds"].dt.date >= start_date) & (d["ds"].dt.date <= end_date)
        return d[mask].reset_index(drop=True)

    def forecast(self, location: Location, days: int) -> pd.DataFrame:
        if self.forecast_df is None:
            return pd.DataFrame(columns=["ds", "temp_max", "temp_min", "precipitation"])
        d = self._select(self.forecast_df, location)
        first = d["ds"].min()
        return d[d["ds"] < first + timedelta(days=days)].reset_index(drop=True)
