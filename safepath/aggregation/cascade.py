"""
SafePath - Fallback Cascade
States and per-tier decision functions for route discovery.

    CHECK_HAZARDS --features--> HAZARD_ROUTES
          | nothing / failed
    CHECK_WEATHER --features--> WEATHER_ROUTES
          | nothing / failed
    CHECK_TRAFFIC --features--> TRAFFIC_ROUTES
          | nothing / failed
        EMPTY  (synthetic generator)

A tier that fails outright behaves like a tier that found nothing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Type

from safepath.core.exceptions import ProviderError
from safepath.core.models import RawFeature


class CascadeState(str, Enum):
    """Where route discovery is in the cascade."""
    CHECK_HAZARDS = "check_hazards"
    HAZARD_ROUTES = "hazard_routes"
    CHECK_WEATHER = "check_weather"
    WEATHER_ROUTES = "weather_routes"
    CHECK_TRAFFIC = "check_traffic"
    TRAFFIC_ROUTES = "traffic_routes"
    EMPTY = "empty"


class ZoneSearchState(str, Enum):
    """How the safe zones of a call were found."""
    PLACES = "places"
    EMPTY = "empty"


@dataclass(frozen=True)
class ProviderResult:
    """What one provider call produced: features, or the error it raised."""
    provider: str
    features: Tuple[RawFeature, ...] = ()
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TierOutcome:
    """Joined results of one tier, in provider order."""
    results: List[ProviderResult] = field(default_factory=list)

    @property
    def features(self) -> List[RawFeature]:
        return [f for r in self.results for f in r.features]

    @property
    def errors(self) -> List[ProviderError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def has_features(self) -> bool:
        return any(r.features for r in self.results)

    @property
    def all_failed(self) -> bool:
        """Every provider errored (an empty tier has not failed)."""
        return bool(self.results) and all(not r.ok for r in self.results)

    def of_type(self, *types: Type) -> List[RawFeature]:
        """Features of the given types, in provider order."""
        return [f for f in self.features if isinstance(f, types)]


def after_hazard_check(outcome: TierOutcome) -> CascadeState:
    """Any earthquake or disaster declaration means hazard routes."""
    if outcome.has_features:
        return CascadeState.HAZARD_ROUTES
    return CascadeState.CHECK_WEATHER


def after_weather_check(outcome: TierOutcome) -> CascadeState:
    """Any active alert means directions toward safe destinations."""
    if outcome.has_features:
        return CascadeState.WEATHER_ROUTES
    return CascadeState.CHECK_TRAFFIC


def after_traffic_check(outcome: TierOutcome) -> CascadeState:
    """Major roads become routes; nothing left means synthetic data."""
    if outcome.has_features:
        return CascadeState.TRAFFIC_ROUTES
    return CascadeState.EMPTY
