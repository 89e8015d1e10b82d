"""Emoji icons and temperature colours used by the weather report."""

from typing import Dict, List, Tuple

from rich.text import Text

# PM2.5 category upper bounds
AQI_GOOD = 50
AQI_MODERATE = 100
AQI_SENSITIVE = 150
AQI_UNHEALTHY = 200
AQI_VERY_UNHEALTHY = 300

MISSING_ICON = "?"

_RAIN = "\N{CLOUD WITH RAIN}"
_SNOW = "\N{CLOUD WITH SNOW}"
_ICE = "\N{ICE CUBE}"
_FOG = "\N{FOG}"
_SNOWFLAKE = "\N{SNOWFLAKE}"
_LIGHTNING = "\N{CLOUD WITH LIGHTNING}"

ICONS: Dict[str, str] = {
    "wind": "\N{LEAF FLUTTERING IN WIND}",
    "humidity": "\N{DROPLET}",
    "sunrise": "\N{SUNRISE}",
    "sunset": "\N{SUNSET OVER BUILDINGS}",
}

WEATHER_ICONS: Dict[str, str] = {
    "clear": "\N{NIGHT WITH STARS}",
    "sunny": "\N{BLACK SUN WITH RAYS}",
    "partly_cloudy": "\N{WHITE SUN BEHIND CLOUD}",
    "cloudy": "\N{CLOUD}",
    "overcast": "\N{CLOUD}",
    "mist": _FOG,
    "fog": _FOG,
    "freezing_fog": _FOG + _ICE,
    "patchy_rain_possible": _RAIN,
    "patchy_rain_nearby": _RAIN,
    "patchy_snow_possible": _SNOW,
    "patchy_sleet_possible": _RAIN + _SNOWFLAKE,
    "patchy_freezing_drizzle_possible": _RAIN + _ICE,
    "thundery_outbreaks_possible": _LIGHTNING,
    "thundery_outbreaks_in_nearby": _LIGHTNING,
    "blowing_snow": _SNOW,
    "blizzard": _SNOW + "\N{DASH SYMBOL}",
    "patchy_light_drizzle": _RAIN,
    "light_drizzle": _RAIN,
    "freezing_drizzle": _RAIN + _ICE,
    "heavy_freezing_drizzle": _RAIN + _ICE,
    "patchy_light_rain": _RAIN,
    "light_rain": _RAIN,
    "moderate_rain_at_times": _RAIN,
    "moderate_rain": _RAIN,
    "heavy_rain_at_times": _RAIN,
    "heavy_rain": _RAIN,
    "light_freezing_rain": _RAIN + _ICE,
    "moderate_or_heavy_freezing_rain": _RAIN + _ICE,
    "light_sleet": _RAIN,
    "moderate_or_heavy_sleet": _RAIN,
    "patchy_light_snow": _SNOW,
    "light_snow": _SNOW,
    "patchy_moderate_snow": _SNOW,
    "moderate_snow": _SNOW,
    "patchy_heavy_snow": _SNOW,
    "heavy_snow": _SNOW,
    "ice_pellets": _ICE,
    "light_rain_shower": _RAIN,
    "moderate_or_heavy_rain_shower": _RAIN,
    "torrential_rain_shower": _RAIN,
    "light_sleet_showers": _RAIN + _ICE,
    "moderate_or_heavy_sleet_showers": _RAIN + _ICE,
    "light_snow_showers": _SNOW,
    "moderate_or_heavy_snow_showers": _SNOW,
    "light_showers_of_ice_pellets": _SNOW + _ICE,
    "moderate_or_heavy_showers_of_ice_pellets": _SNOW + _ICE,
    "patchy_light_rain_with_thunder": "\N{THUNDER CLOUD AND RAIN}",
    "moderate_or_heavy_rain_with_thunder": "\N{THUNDER CLOUD AND RAIN}",
    "patchy_light_snow_with_thunder": _LIGHTNING + _SNOWFLAKE,
    "moderate_or_heavy_snow_with_thunder": _LIGHTNING + _SNOWFLAKE,
}

AQI_ICONS: Dict[str, str] = {
    "good": "\N{LARGE GREEN CIRCLE}",
    "moderate": "\N{LARGE YELLOW CIRCLE}",
    "sensitive": "\N{LARGE ORANGE CIRCLE}",
    "unhealthy": "\N{LARGE RED CIRCLE}",
    "very_unhealthy": "\N{LARGE PURPLE CIRCLE}",
    "hazardous": "\N{SKULL}",
}

# (upper bound in Fahrenheit, RGB) from cold blues to hot reds
TEMP_COLORS: List[Tuple[float, Tuple[int, int, int]]] = [
    (-60, (228, 240, 255)),
    (-50, (211, 226, 247)),
    (-40, (192, 213, 237)),
    (-30, (176, 199, 231)),
    (-20, (157, 184, 222)),
    (-10, (136, 165, 206)),
    (0, (118, 145, 185)),
    (10, (86, 114, 156)),
    (20, (65, 93, 135)),
    (30, (47, 72, 117)),
    (40, (36, 79, 120)),
    (50, (39, 103, 138)),
    (60, (68, 128, 144)),
    (70, (135, 155, 132)),
    (80, (195, 171, 117)),
    (90, (195, 139, 83)),
    (100, (175, 77, 78)),
    (110, (135, 32, 62)),
    (120, (87, 11, 37)),
    (150, (61, 2, 22)),
]


def get_icon(name: str) -> str:
    return ICONS.get(name.lower(), "")


def get_weather_icon(condition: str) -> str:
    """Icon for a WeatherAPI condition text such as "Partly cloudy"."""
    key = "_".join(condition.strip().lower().split())
    return WEATHER_ICONS.get(key, MISSING_ICON)


def aqi_category(pm2_5: float) -> str:
    aqi = int(pm2_5)
    if aqi < 0:
        return "unknown"
    if aqi <= AQI_GOOD:
        return "good"
    if aqi <= AQI_MODERATE:
        return "moderate"
    if aqi <= AQI_SENSITIVE:
        return "sensitive"
    if aqi <= AQI_UNHEALTHY:
        return "unhealthy"
    if aqi <= AQI_VERY_UNHEALTHY:
        return "very_unhealthy"
    return "hazardous"


def get_aqi_icon(pm2_5: float) -> str:
    return AQI_ICONS.get(aqi_category(pm2_5), "\N{BLACK QUESTION MARK ORNAMENT}")


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9 / 5 + 32


def temp_color(temp_c: float) -> str:
    """Rich colour style for a Celsius temperature."""
    temp_f = celsius_to_fahrenheit(temp_c)
    for max_f, (r, g, b) in TEMP_COLORS:
        if temp_f <= max_f:
            return f"rgb({r},{g},{b})"
    r, g, b = TEMP_COLORS[-1][1]
    return f"rgb({r},{g},{b})"


def colorize_temp(temp_c: float) -> Text:
    return Text(f"{temp_c:.0f}°C", style=temp_color(temp_c))
