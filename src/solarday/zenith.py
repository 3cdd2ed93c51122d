"""Zenith constants and the refraction / solar radius / elevation correction."""

import math
from dataclasses import dataclass

from solarday.units import arcminutes_to_degrees, meters_to_km

# Degrees below the vertical. Sunrise and sunset are computed from the
# geometric zenith and then adjusted by ZenithAdjuster.adjust_zenith.
GEOMETRIC_ZENITH = 90.0
CIVIL_ZENITH = 96.0
NAUTICAL_ZENITH = 102.0
ASTRONOMICAL_ZENITH = 108.0


@dataclass(frozen=True)
class ZenithAdjuster:
    """Physical constants applied to a true horizon crossing.

    The sun is not a point and the atmosphere bends its light, so the upper
    limb disappears when the center is about 50' below the horizon: 16' of
    apparent solar radius plus 34' of refraction. Reingold and Dershowitz give a
    global average refraction of 34.478885263888294'; 34' is the usual value.
    The apparent radius varies from 15.755' at aphelion to 16.293' at
    perihelion, which matters only near the poles.
    """

    refraction: float = 34.0  # arc-minutes
    solar_radius: float = 16.0  # arc-minutes
    earth_radius: float = 6356.9  # km; used only for the elevation dip

    def elevation_adjustment(self, elevation: float) -> float:
        """Extra dip below the horizon, in degrees, visible from an elevation in meters.

        From Calendrical Calculations by Reingold and Dershowitz:
        arccos(R / (R + h)).
        """
        return math.degrees(
            math.acos(self.earth_radius / (self.earth_radius + meters_to_km(elevation)))
        )

    def adjust_zenith(self, zenith: float, elevation: float) -> float:
        """Apply solar radius, refraction and elevation to the geometric zenith.

        Only exactly 90° is adjusted. Twilight zeniths such as 108° describe a
        level of available light, which elevation does not change.
        """
        if zenith != GEOMETRIC_ZENITH:
            return zenith
        return zenith + (
            arcminutes_to_degrees(self.solar_radius)
            + arcminutes_to_degrees(self.refraction)
            + self.elevation_adjustment(elevation)
        )
