"""Free-form location phrases mapped to canonical forecast areas."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from ..config import Settings
from ..exceptions import ConfigError

DEFAULT_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "marina bay": "Marina Bay",
        "orchard road": "Orchard",
        "orchard": "Orchard",
        "chinatown": "Chinatown",
        "little india": "Little India",
        "bugis": "Bugis",
        "raffles place": "Raffles Place",
        "clarke quay": "Clarke Quay",
        "sentosa": "Sentosa",
        "jurong east": "Jurong East",
        "jurong": "Jurong East",
        "tampines": "Tampines",
        "woodlands": "Woodlands",
        "changi": "Changi",
        "changi airport": "Changi",
        "toa payoh": "Toa Payoh",
        "ang mo kio": "Ang Mo Kio",
        "bedok": "Bedok",
        "clementi": "Clementi",
        "bishan": "Bishan",
        "punggol": "Punggol",
        "sengkang": "Sengkang",
        "hougang": "Hougang",
        "pasir ris": "Pasir Ris",
        "yishun": "Yishun",
        "serangoon": "Serangoon",
        "novena": "Novena",
        "dhoby ghaut": "Dhoby Ghaut",
        "city hall": "City",
        "downtown": "Downtown Core",
        "east coast": "East Coast",
        "west coast": "West Coast",
    }
)


class AliasTable(Mapping[str, str]):
    """Read-only phrase -> canonical area mapping with normalized keys."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        normalized: dict[str, str] = {}
        for phrase, area in mapping.items():
            key = phrase.strip().lower()
            target = area.strip()
            if not key or not target:
                raise ConfigError(f"Alias entries must be non-empty: {phrase!r} -> {area!r}")
            normalized[key] = target
        self._entries = MappingProxyType(normalized)

    @classmethod
    def from_file(cls, path: Path) -> AliasTable:
        """Load aliases from a JSON object of ``{"phrase": "Area"}`` pairs."""
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"Failed reading alias file {path}: {exc}") from exc
        except ValueError as exc:
            raise ConfigError(f"Alias file {path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in payload.items()
        ):
            raise ConfigError(f"Alias file {path} must be a JSON object of strings.")
        return cls(payload)

    def target(self, phrase: str) -> str | None:
        return self._entries.get(phrase.strip().lower())

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def load_alias_table(settings: Settings) -> AliasTable:
    """Build the alias table from the configured file or the built-in defaults."""
    if settings.weather_aliases_file is not None:
        return AliasTable.from_file(settings.weather_aliases_file)
    return AliasTable(DEFAULT_ALIASES)
