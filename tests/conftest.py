"""
Fixtures compartilhadas dos testes.

- observações diárias sintéticas por local/região
- perfis de culturas
- fonte de dados falsa (sem rede) que pode falhar para locais escolhidos
- tabelas FarmTech pequenas
"""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import matplotlib

matplotlib.use("Agg")

import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from agroclima_ceara.errors import FetchError  # noqa: E402
from agroclima_ceara.pipeline import analyze  # noqa: E402
from agroclima_ceara.schemas.records import (  # noqa: E402
    CropProfile,
    DailyObservation,
    Location,
)


# ============================================================
# Helpers
# ============================================================

def obs(location: str, region: str, day: date, tmax: float, tmin: float, prcp: float) -> DailyObservation:
    return DailyObservation(
        location=location,
        region=region,
        date=day,
        temp_max=tmax,
        temp_min=tmin,
        precipitation=prcp,
    )


def daily_frame(start: date, n: int, tmax: float = 31.0, tmin: float = 23.0, prcp: float = 4.0) -> pd.DataFrame:
    days = [start + timedelta(days=i) for i in range(n)]
    return pd.DataFrame(
        {
            "ds": pd.to_datetime(days),
            "temp_max": [tmax] * n,
            "temp_min": [tmin] * n,
            "precipitation": [prcp] * n,
        }
    )


class FakeSource:
    """Fonte em memória: falha (FetchError) para os locais indicados."""

    def __init__(
        self,
        fail: Iterable[str] = (),
        fail_forecast: Iterable[str] = (),
        frames: Optional[Dict[str, pd.DataFrame]] = None,
    ):
        self.fail = set(fail)
        self.fail_forecast = set(fail_forecast)
        self.frames = frames or {}
        self.history_calls: List[str] = []
        self.forecast_calls: List[str] = []

    def history(self, location: Location, start_date: date, end_date: date) -> pd.DataFrame:
        self.history_calls.append(location.name)
        if location.name in self.fail:
            raise FetchError(f"Erro na requisição à API: 500 ({location.name})")
        if location.name in self.frames:
            return self.frames[location.name]
        return daily_frame(start_date, 60)

    def forecast(self, location: Location, days: int) -> pd.DataFrame:
        self.forecast_calls.append(location.name)
        if location.name in self.fail_forecast:
            raise FetchError(f"Timeout na previsão ({location.name})")
        return daily_frame(date(2025, 3, 1), days, tmax=32.0, tmin=24.0, prcp=2.0)


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def locations() -> List[Location]:
    return [
        Location("Fortaleza", -3.7319, -38.5267, "Litoral"),
        Location("Aquiraz", -3.9006, -38.3911, "Litoral"),
        Location("Sobral", -3.6889, -40.3494, "Sertão"),
        Location("Quixadá", -4.9676, -39.0157, "Sertão"),
        Location("Juazeiro do Norte", -7.2131, -39.3153, "Cariri"),
    ]


@pytest.fixture
def mandioca() -> CropProfile:
    return CropProfile("Mandioca", 20, 30, 50, 200, ("Plantar no início da estação chuvosa",))


@pytest.fixture
def crops(mandioca) -> List[CropProfile]:
    return [
        mandioca,
        CropProfile("Feijão Caupi", 18, 34, 40, 150),
        CropProfile("Caju", 22, 36, 30, 100),
    ]


@pytest.fixture
def observations() -> List[DailyObservation]:
    """Dois locais no Litoral e um no Sertão, em janeiro e fevereiro."""
    return [
        obs("Fortaleza", "Litoral", date(2025, 1, 1), 30.0, 22.0, 100.0),
        obs("Aquiraz", "Litoral", date(2025, 1, 1), 30.0, 22.0, 140.0),
        obs("Fortaleza", "Litoral", date(2025, 2, 1), 32.0, 24.0, 10.0),
        obs("Sobral", "Sertão", date(2025, 1, 1), 35.0, 23.0, 0.0),
        obs("Sobral", "Sertão", date(2025, 1, 2), 37.0, 25.0, 2.0),
    ]


@pytest.fixture
def forecast_records() -> List[DailyObservation]:
    base = date(2025, 3, 1)
    out = []
    for i in range(7):
        out.append(obs("Fortaleza", "Litoral", base + timedelta(days=i), 31.0, 24.0, 2.0))
        out.append(obs("Sobral", "Sertão", base + timedelta(days=i), 35.0, 23.0, 0.0))
    return out


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource(fail=["Quixadá"])


@pytest.fixture
def analysis(observations, forecast_records, crops):
    return analyze(observations, forecast_records, crops)


@pytest.fixture
def farm_frames() -> Dict[str, pd.DataFrame]:
    culturas = pd.DataFrame(
        {
            "nome": ["Mandioca", "Milho"],
            "ciclo_minimo": [240, 90],
            "ciclo_maximo": [540, 140],
            "temperatura_min": [20, 20],
            "temperatura_max": [30, 32],
            "precipitacao_min": [1000, 500],
            "precipitacao_max": [1500, 800],
        }
    )
    campos = pd.DataFrame(
        {
            "nome_produtor": ["Ana", "Bruno", "Carla"],
            "cultura_plantada": ["Mandioca", "Milho", "Mandioca"],
            "area_m2": [20000.0, 10000.0, 40000.0],
            "area_hectare": [2.0, 1.0, 4.0],
            "tipo_geometria": ["retangulo", "circulo", "retangulo"],
            "regiao": ["Litoral", "Sertão", "Litoral"],
        }
    )
    insumos = pd.DataFrame(
        {
            "nome_produtor": ["Ana", "Bruno", "Carla"],
            "cultura_plantada": ["Mandioca", "Milho", "Mandioca"],
            "area_hectare": [2.0, 1.0, 4.0],
            "fertilizante_total_kg": [100.0, 120.0, 400.0],
            "irrigacao_volume_total": [20000.0, 30000.0, 80000.0],
        }
    )
    return {"culturas": culturas, "campos": campos, "insumos": insumos}


@pytest.fixture
def farm_dir(tmp_path, farm_frames):
    for kind, df in farm_frames.items():
        df.to_csv(tmp_path / f"farmtech_20250101_120000_{kind}.csv", index=False)
    return tmp_path
