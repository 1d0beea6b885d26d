"""
Display Values
==============

Small pure functions that turn readings into what the dashboard shows:
change arrows, colour bands and the day/sunset/night theme.
"""

from typing import Optional

from weatherverse.models import (
    ChangeDirection,
    ChangeIndicator,
    TemperatureBand,
    TimeOfDay,
)


# Temperature card colours
COLD_BELOW = 28
HOT_ABOVE = 32

# Humidity animation shows above this
HUMID_ABOVE = 40


def change_indicator(current: float, previous: Optional[float], unit: str) -> ChangeIndicator:
    """
    Compare a value with its previous reading.

    Args:
        current: The newest value
        previous: The value before it, or None on the first reading
        unit: Suffix for the label (e.g., "°C", "%")

    Returns:
        ChangeIndicator with direction, rounded delta and label
        like "+2.0°C", "-1.5%" or "No change"
    """
    if previous is None:
        return ChangeIndicator()

    diff = current - previous
    if diff > 0:
        return ChangeIndicator(direction=ChangeDirection.UP, delta=round(diff, 1), label=f"+{diff:.1f}{unit}")
    if diff < 0:
        return ChangeIndicator(direction=ChangeDirection.DOWN, delta=round(diff, 1), label=f"{diff:.1f}{unit}")
    return ChangeIndicator(direction=ChangeDirection.NONE, delta=0.0, label="No change")


def temperature_band(temperature: float) -> TemperatureBand:
    """Pick the temperature card colour: blue below 28, red above 32."""
    if temperature < COLD_BELOW:
        return TemperatureBand.COLD
    if temperature > HOT_ABOVE:
        return TemperatureBand.HOT
    return TemperatureBand.WARM


def is_humid(humidity: float) -> bool:
    return humidity > HUMID_ABOVE


def time_of_day(hour: int) -> TimeOfDay:
    """
    Pick the dashboard theme from the local hour (0-23).

    Day is 06:00-16:59, sunset 17:00-19:59, night the rest.
    """
    if 6 <= hour < 17:
        return TimeOfDay.DAY
    if 17 <= hour < 20:
        return TimeOfDay.SUNSET
    return TimeOfDay.NIGHT
