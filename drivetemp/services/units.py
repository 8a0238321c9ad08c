from drivetemp.models.drive import TemperatureUnit


def celsius_to_fahrenheit(celsius: int) -> int:
    """
    Convert a Celsius integer to Fahrenheit, rounding half up.

    The conversion is done in tenths of a degree so that no floating point
    is involved: F * 10 = C * 18 + 320.
    """
    tenths = celsius * 18 + 320
    degrees, remainder = divmod(tenths, 10)
    if remainder >= 5:
        degrees += 1
    return degrees


def convert_temperature(celsius: int, unit: TemperatureUnit) -> int:
    if unit is TemperatureUnit.FAHRENHEIT:
        return celsius_to_fahrenheit(celsius)
    return celsius
