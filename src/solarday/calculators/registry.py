"""Runtime selection of a solar position calculator by short name."""

from solarday.calculators.base import SolarPositionCalculator
from solarday.calculators.noaa import NOAACalculator
from solarday.calculators.usno import USNOCalculator
from solarday.models import InvalidInputError
from solarday.zenith import ZenithAdjuster

CALCULATORS: dict[str, type[NOAACalculator] | type[USNOCalculator]] = {
    "noaa": NOAACalculator,
    "usno": USNOCalculator,
}


def get_calculator(
    name: str,
    refraction: float | None = None,
    solar_radius: float | None = None,
    earth_radius: float | None = None,
) -> SolarPositionCalculator:
    """Build a calculator by short name ("noaa" or "usno").

    Args:
        name: Case-insensitive calculator key.
        refraction: Arc-minutes; library default when omitted.
        solar_radius: Arc-minutes; library default when omitted.
        earth_radius: Kilometers; library default when omitted.

    Raises:
        InvalidInputError: For an unknown name.
    """
    try:
        cls = CALCULATORS[name.strip().lower()]
    except KeyError as e:
        raise InvalidInputError(
            f"Unknown calculator {name!r}; choose one of {', '.join(CALCULATORS)}"
        ) from e
    overrides = {
        key: value
        for key, value in (
            ("refraction", refraction),
            ("solar_radius", solar_radius),
            ("earth_radius", earth_radius),
        )
        if value is not None
    }
    return cls(adjuster=ZenithAdjuster(**overrides))
