"""
Testes do cliente Open-Meteo (requests mockado) e da fonte CSV offline.
"""
from datetime import date
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
import requests

from agroclima_ceara.climate.openmeteo import (
    DAILY_COLUMNS,
    CsvClimateSource,
    OpenMeteoSource,
    fetch_daily_forecast,
    fetch_daily_history,
)
from agroclima_ceara.config import OPENMETEO_ARCHIVE_URL, OPENMETEO_FORECAST_URL
from agroclima_ceara.errors import DataQualityError, FetchError, InputFileNotFoundError
from agroclima_ceara.schemas.records import Location

FORTALEZA = Location("Fortaleza", -3.7319, -38.5267, "Litoral")


def fake_response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


DAILY_PAYLOAD = {
    "daily": {
        "time": ["2025-01-02", "2025-01-01"],
        "temperature_2m_max": [31.0, 30.5],
        "temperature_2m_min": [24.0, None],
        "precipitation_sum": [3.2, 0.0],
        "rain_sum": [3.2, 0.0],
    }
}


class TestFetchDailyHistory:
    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_normalizes_daily_block(self, mock_get):
        mock_get.return_value = fake_response(payload=DAILY_PAYLOAD)

        df = fetch_daily_history(-3.73, -38.52, date(2025, 1, 1), date(2025, 1, 2))

        assert list(df.columns) == DAILY_COLUMNS
        assert df["ds"].iloc[0] == pd.Timestamp("2025-01-01")
        assert pd.isna(df["temp_min"].iloc[0])

        args, kwargs = mock_get.call_args
        assert args[0] == OPENMETEO_ARCHIVE_URL
        assert kwargs["params"]["daily"] == "temperature_2m_max,temperature_2m_min,precipitation_sum,rain_sum"
        assert kwargs["params"]["timezone"] == "auto"
        assert kwargs["timeout"] > 0

    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_non_200_raises(self, mock_get):
        mock_get.return_value = fake_response(status=500)
        with pytest.raises(FetchError, match="500"):
            fetch_daily_history(-3.73, -38.52, date(2025, 1, 1), date(2025, 1, 2))

    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_transport_error_raises(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("sem rede")
        with pytest.raises(FetchError):
            fetch_daily_history(-3.73, -38.52, date(2025, 1, 1), date(2025, 1, 2))

    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_missing_daily_block_raises(self, mock_get):
        mock_get.return_value = fake_response(payload={"error": True})
        with pytest.raises(FetchError):
            fetch_daily_history(-3.73, -38.52, date(2025, 1, 1), date(2025, 1, 2))

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            fetch_daily_history(-3.73, -38.52, date(2025, 1, 2), date(2025, 1, 1))


class TestFetchDailyForecast:
    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_horizon_capped(self, mock_get):
        mock_get.return_value = fake_response(payload=DAILY_PAYLOAD)
        fetch_daily_forecast(-3.73, -38.52, days=30)

        args, kwargs = mock_get.call_args
        assert args[0] == OPENMETEO_FORECAST_URL
        assert kwargs["params"]["forecast_days"] == 16

    @patch("agroclima_ceara.climate.openmeteo.requests.get")
    def test_source_uses_location_coordinates(self, mock_get):
        mock_get.return_value = fake_response(payload=DAILY_PAYLOAD)
        OpenMeteoSource(timeout=5).forecast(FORTALEZA, 10)

        _, kwargs = mock_get.call_args
        assert kwargs["params"]["latitude"] == FORTALEZA.latitude
        assert kwargs["timeout"] == 5


class TestCsvClimateSource:
    @pytest.fixture
    def history_csv(self, tmp_path):
        df = pd.DataFrame(
            {
                "location": ["Fortaleza"] * 3 + ["Sobral"],
                "date": ["2025-01-01", "2025-01-02", "2025-02-01", "2025-01-01"],
                "temp_max": [30.0, 31.0, 32.0, 35.0],
                "temp_min": [22.0, 23.0, 24.0, 23.0],
                "precipitation": [5.0, 0.0, 1.0, 0.0],
            }
        )
        path = tmp_path / "historico.csv"
        df.to_csv(path, index=False)
        return path

    def test_history_filters_location_and_range(self, history_csv):
        source = CsvClimateSource(history_csv)
        df = source.history(FORTALEZA, date(2025, 1, 1), date(2025, 1, 31))
        assert len(df) == 2
        assert list(df.columns) == ["ds", "temp_max", "temp_min", "precipitation"]

    def test_unknown_location_is_fetch_error(self, history_csv):
        source = CsvClimateSource(history_csv)
        with pytest.raises(FetchError):
            source.history(Location("Crato", -7.23, -39.41, "Cariri"), date(2025, 1, 1), date(2025, 1, 31))

    def test_forecast_without_file_is_empty(self, history_csv):
        assert CsvClimateSource(history_csv).forecast(FORTALEZA, 10).empty

    def test_forecast_first_days(self, history_csv):
        source = CsvClimateSource(history_csv, forecast_csv=history_csv)
        assert len(source.forecast(FORTALEZA, 2)) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileNotFoundError):
            CsvClimateSource(tmp_path / "nao_existe.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "ruim.csv"
        pd.DataFrame({"location": ["Fortaleza"], "date": ["2025-01-01"]}).to_csv(path, index=False)
        with pytest.raises(DataQualityError, match="temp_max"):
            CsvClimateSource(path)
