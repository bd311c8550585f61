"""Forecast-text classification into warning, advice and icon."""

from __future__ import annotations

from .models import WeatherClassification, WeatherIcon

WARNING_PHRASES: tuple[str, ...] = (
    "thundery showers",
    "heavy rain",
    "rain",
    "showers",
    "thunderstorm",
    "stormy",
    "windy",
    "hazy",
)

DEFAULT_RECOMMENDATION = "Good weather for outdoor activities!"

# Severe conditions come first: "heavy rain" must win over plain "rain".
RECOMMENDATION_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("thundery", "thunderstorm"),
        "Stay indoors or seek shelter. Avoid outdoor activities.",
    ),
    (
        ("heavy rain",),
        "Bring umbrella and waterproof gear. Consider postponing outdoor events.",
    ),
    (
        ("rain", "showers"),
        "Bring umbrella or raincoat for outdoor activities.",
    ),
    (
        ("hazy",),
        "Consider wearing a mask if you have respiratory issues.",
    ),
    (
        ("hot", "warm"),
        "Stay hydrated and seek shade during outdoor activities.",
    ),
)

ICON_RULES: tuple[tuple[tuple[str, ...], WeatherIcon], ...] = (
    (("sunny", "fair"), WeatherIcon.SUNNY),
    (("partly cloudy",), WeatherIcon.PARTLY_CLOUDY),
    (("cloudy",), WeatherIcon.CLOUDY),
    (("thundery", "thunderstorm"), WeatherIcon.THUNDERSTORM),
    (("heavy rain",), WeatherIcon.HEAVY_RAIN),
    (("rain", "showers"), WeatherIcon.SHOWERS),
    (("hazy", "mist"), WeatherIcon.HAZE),
    (("windy",), WeatherIcon.WINDY),
)

_ICON_GLYPHS: dict[WeatherIcon, str] = {
    WeatherIcon.THUNDERSTORM: "⛈️",
    WeatherIcon.HEAVY_RAIN: "\U0001f327️",
    WeatherIcon.SHOWERS: "\U0001f326️",
    WeatherIcon.HAZE: "\U0001f32b️",
    WeatherIcon.WINDY: "\U0001f32c️",
    WeatherIcon.PARTLY_CLOUDY: "⛅",
    WeatherIcon.CLOUDY: "☁️",
    WeatherIcon.SUNNY: "☀️",
    WeatherIcon.PARTLY_SUNNY: "\U0001f324️",
}


def has_warning(text: str) -> bool:
    """Return True when the forecast mentions any adverse condition."""
    lowered = text.lower()
    return any(phrase in lowered for phrase in WARNING_PHRASES)


def recommendation(text: str) -> str:
    lowered = text.lower()
    for phrases, advice in RECOMMENDATION_RULES:
        if any(phrase in lowered for phrase in phrases):
            return advice
    return DEFAULT_RECOMMENDATION


def icon(text: str) -> WeatherIcon:
    lowered = text.lower()
    for phrases, symbol in ICON_RULES:
        if any(phrase in lowered for phrase in phrases):
            return symbol
    return WeatherIcon.PARTLY_SUNNY


def icon_glyph(symbol: WeatherIcon) -> str:
    """Display glyph for terminal output."""
    return _ICON_GLYPHS[symbol]


def classify(text: str) -> WeatherClassification:
    return WeatherClassification(
        warning=has_warning(text),
        recommendation=recommendation(text),
        icon=icon(text),
    )
