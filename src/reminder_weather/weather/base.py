"""Provider-agnostic forecast source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import FetchResult


class ForecastSource(ABC):
    """Base contract for sources feeding the area index."""

    @abstractmethod
    def fetch(self) -> FetchResult:
        """Fetch and normalize one region-wide forecast payload."""

    @abstractmethod
    def close(self) -> None:
        """Release source resources."""
