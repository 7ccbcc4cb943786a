# agroclima_ceara/config.py

import json
from pathlib import Path
from typing import List

from .errors import DataQualityError
from .schemas.records import Location, measurement
from .utils.logger import get_logger

logger = get_logger(__name__)

# =============================================================================
# PASTAS BÁSICAS
# =============================================================================
BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"

# Saída fixa da análise climática (relativa ao diretório de execução)
OUTPUT_DIR = Path("resultados_ceara")

LOCATIONS_JSON = DATA_DIR / "locations.json"
CROPS_JSON = DATA_DIR / "crops.json"

# =============================================================================
# OPEN-METEO
# =============================================================================
OPENMETEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
OPENMETEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

DAILY_VARS = [
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "rain_sum",
]

HISTORY_DAYS = 365
FORECAST_DAYS = 10
# limite do endpoint de previsão da Open-Meteo
MAX_FORECAST_DAYS = 16
FORECAST_PREVIEW_DAYS = 5

REQUEST_TIMEOUT_S = 60
# pausa entre locais para não estourar o limite da API
REQUEST_PAUSE_S = 1.0

# =============================================================================
# PARÂMETROS AGRONÔMICOS
# =============================================================================
PLANTING_THRESHOLD = 0.6
RAINY_DAY_MM = 1.0
TEMP_TOLERANCE_C = 10.0
TEMP_WEIGHT = 0.5
PRECIP_WEIGHT = 0.5

# =============================================================================
# FARMTECH (culturas, campos e insumos)
# =============================================================================
FARMTECH_SUFFIXES = {
    "culturas": "_culturas.csv",
    "campos": "_campos.csv",
    "insumos": "_insumos.csv",
}
FARMTECH_TIMESTAMP_PATTERN = r"\d{8}_\d{6}"

# =============================================================================
# LOCAIS (registro externo em JSON)
# =============================================================================
DEFAULT_LOCATIONS = [
    Location("Fortaleza", -3.7319, -38.5267, "Litoral"),
    Location("Aquiraz", -3.9006, -38.3911, "Litoral"),
    Location("Sobral", -3.6889, -40.3494, "Sertão"),
    Location("Quixadá", -4.9676, -39.0157, "Sertão"),
    Location("Juazeiro do Norte", -7.2131, -39.3153, "Cariri"),
]


def load_locations(path: Path = LOCATIONS_JSON) -> List[Location]:
    """
    Carrega os municípios monitorados do JSON externo.
    Se o arquivo não existir, usa os cinco municípios padrão do Ceará.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Arquivo %s não encontrado. Usando locais padrão.", path)
        return list(DEFAULT_LOCATIONS)

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict) or "locais" not in raw:
        raise DataQualityError(f"JSON inválido em {path}: esperado um objeto com a chave 'locais'.")

    locations: List[Location] = []
    for item in raw["locais"]:
        missing = [k for k in ("nome", "latitude", "longitude", "regiao") if k not in item]
        if missing:
            raise DataQualityError(f"Local incompleto em {path}: faltam {missing} ({item!r})")
        loc = Location(
            name=str(item["nome"]).strip(),
            latitude=measurement(item["latitude"], "latitude", f"(local {item['nome']})"),
            longitude=measurement(item["longitude"], "longitude", f"(local {item['nome']})"),
            region=str(item["regiao"]).strip(),
        )
        loc.validate()
        locations.append(loc)

    if not locations:
        raise DataQualityError(f"Nenhum local cadastrado em {path}")

    return locations
