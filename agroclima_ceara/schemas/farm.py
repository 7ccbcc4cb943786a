from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class InputRecord:
    """Uma linha de insumos (um campo de um produtor)."""
    producer: str
    crop: str
    area_hectare: float
    fertilizer_kg: float
    irrigation_l: float
    region: Optional[str] = None


@dataclass(frozen=True)
class InputGroupSummary:
    group: str
    num_fields: int
    area_total: float
    fertilizer_mean: float
    irrigation_mean: float
    fertilizer_per_ha_mean: float
    irrigation_per_ha_mean: float


@dataclass(frozen=True)
class CropCatalogStats:
    count: int
    cycle_min_mean: float
    cycle_max_mean: float
    temp_min_mean: float
    temp_max_mean: float
    precip_min_mean: float
    precip_max_mean: float


@dataclass(frozen=True)
class FieldStats:
    count: int
    area_m2_mean: float
    area_m2_sd: float
    area_ha_mean: float
    area_ha_sd: float
    area_ha_total: float
    geometry_counts: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class InputStats:
    fertilizer_mean: float
    fertilizer_sd: float
    fertilizer_per_ha_mean: float
    irrigation_mean: float
    irrigation_sd: float
    irrigation_per_ha_mean: float
