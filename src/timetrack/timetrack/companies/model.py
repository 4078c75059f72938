from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_AUTO_PUNCHOUT_MARGIN_AFTER,
    DEFAULT_AUTO_PUNCHOUT_MARGIN_BEFORE,
    DEFAULT_AUTO_PUNCHOUT_MAX_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_METERS,
)


@dataclass(frozen=True)
class Company:
    """Tenant settings the time tracking rules depend on."""

    company_id: int
    name: str
    active: bool = True
    utc_offset_minutes: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geofence_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS
    require_geolocation: bool = False
    auto_punchout_enabled: bool = False
    auto_punchout_max_minutes: int = DEFAULT_AUTO_PUNCHOUT_MAX_MINUTES
    auto_punchout_margin_before: int = DEFAULT_AUTO_PUNCHOUT_MARGIN_BEFORE
    auto_punchout_margin_after: int = DEFAULT_AUTO_PUNCHOUT_MARGIN_AFTER

    def offset_minutes(self, default: int) -> int:
        return self.utc_offset_minutes if self.utc_offset_minutes is not None else int(default)

    @property
    def has_geofence(self) -> bool:
        return self.require_geolocation and self.latitude is not None and self.longitude is not None
