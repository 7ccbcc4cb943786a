# agroclima_ceara/schemas/records.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from numbers import Real
from typing import Any, Tuple

from ..errors import DataQualityError

MONTH_LABELS = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")


def month_label(month: int) -> str:
    return MONTH_LABELS[int(month) - 1]


def measurement(value: Any, field_name: str, where: str = "") -> float:
    """
    Converte uma medida para float.

    None e NaN viram NaN (dado ausente). Qualquer outro valor não numérico
    levanta DataQualityError com o campo e o registro afetado.
    """
    if value is None:
        return math.nan
    if isinstance(value, bool):
        raise DataQualityError(f"Campo '{field_name}' com valor booleano {value!r} {where}".strip())
    if isinstance(value, Real):
        return float(value)
    if isinstance(value, str):
        txt = value.strip()
        if txt == "" or txt.upper() in {"NA", "NAN"}:
            return math.nan
        try:
            return float(txt)
        except ValueError:
            pass
    raise DataQualityError(f"Campo '{field_name}' não numérico: {value!r} {where}".strip())


@dataclass(frozen=True)
class Location:
    name: str
    latitude: float
    longitude: float
    region: str

    def validate(self) -> None:
        if not (-90.0 <= float(self.latitude) <= 90.0):
            raise DataQualityError(f"latitude inválida para {self.name}: deve estar entre -90 e 90.")
        if not (-180.0 <= float(self.longitude) <= 180.0):
            raise DataQualityError(f"longitude inválida para {self.name}: deve estar entre -180 e 180.")
        if not str(self.region).strip():
            raise DataQualityError(f"região vazia para {self.name}.")


@dataclass(frozen=True)
class DailyObservation:
    location: str
    region: str
    date: date
    temp_max: float
    temp_min: float
    precipitation: float


@dataclass(frozen=True)
class CropProfile:
    crop_name: str
    temp_min_ideal: float
    temp_max_ideal: float
    precip_min_monthly: float
    precip_max_monthly: float
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def validate(self) -> None:
        # os limites de chuva são divisores no índice de precipitação
        for name in ("temp_min_ideal", "temp_max_ideal", "precip_min_monthly", "precip_max_monthly"):
            v = measurement(getattr(self, name), name, f"(cultura {self.crop_name})")
            if math.isnan(v):
                raise DataQualityError(f"Cultura {self.crop_name}: '{name}' ausente.")
        if float(self.precip_min_monthly) <= 0:
            raise DataQualityError(
                f"Cultura {self.crop_name}: precip_min_monthly deve ser > 0 "
                f"(recebido {self.precip_min_monthly})."
            )
        if float(self.precip_max_monthly) <= 0:
            raise DataQualityError(
                f"Cultura {self.crop_name}: precip_max_monthly deve ser > 0 "
                f"(recebido {self.precip_max_monthly})."
            )


@dataclass(frozen=True)
class MonthlyRegionalStat:
    region: str
    month: int
    temp_max_mean: float
    temp_min_mean: float
    precip_mean: float


@dataclass(frozen=True)
class MonthlyLocationPrecip:
    region: str
    location: str
    month: int
    precip_total: float


@dataclass(frozen=True)
class SuitabilityRow:
    region: str
    month: int
    crop_name: str
    temp_score: float
    precip_score: float
    suitability_index: float


@dataclass(frozen=True)
class SuitabilitySummary:
    region: str
    crop_name: str
    mean_index: float


@dataclass(frozen=True)
class PlantingWindow:
    region: str
    crop_name: str
    recommended_months: Tuple[int, ...]
    mean_index: float

    @property
    def months_label(self) -> str:
        return ", ".join(month_label(m) for m in self.recommended_months)


@dataclass(frozen=True)
class RegionalStat:
    region: str
    temp_max_mean: float
    temp_min_mean: float
    thermal_amplitude_mean: float
    annual_precip_total: float
    rainy_days_mean: float


@dataclass(frozen=True)
class ForecastRow:
    region: str
    date: date
    temp_max: float
    temp_min: float
    precipitation: float
