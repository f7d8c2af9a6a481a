"""
SafePath - Emergency Aggregator
Runs the provider cascades and always hands back usable routes and safe zones.

Providers of one tier run concurrently and are joined before anything is
merged; tiers run one after another. Provider failures are logged and
contained here. The only exception a caller sees is InvalidInputError
(plus CancelledError if they cancel the call themselves).
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

import httpx

from safepath.aggregation.cascade import (
    CascadeState,
    ProviderResult,
    TierOutcome,
    ZoneSearchState,
    after_hazard_check,
    after_traffic_check,
    after_weather_check,
)
from safepath.aggregation.deduplicator import merge_routes, remove_duplicate_safe_zones
from safepath.aggregation.evacuation_router import (
    find_safe_destinations,
    routes_from_directions,
    routes_from_roads,
    safe_zones_from_places,
)
from safepath.aggregation.synthetic import SyntheticGenerator
from safepath.core.config import settings
from safepath.core.constants import PLACES_FACILITY_TYPES
from safepath.core.exceptions import ProviderError, ProviderErrorKind
from safepath.core.geo_utils import Coordinate, validate_coordinate, validate_radius
from safepath.core.models import (
    AggregationResult,
    DirectionsRoute,
    DisasterDeclaration,
    EvacuationRoute,
    FacilityPlace,
    RoadWay,
    SafeZone,
    SeismicEvent,
    WeatherAlert,
)
from safepath.ingestion.base import ProviderClient
from safepath.ingestion.fema_client import FEMAClient
from safepath.ingestion.google_client import DirectionsClient, PlacesClient
from safepath.ingestion.nws_client import NWSAlertsClient
from safepath.ingestion.osm_client import OverpassClient
from safepath.ingestion.usgs_client import USGSClient

logger = logging.getLogger(__name__)


# =============================================================================
# PROVIDER FACTORIES
# =============================================================================

class ProviderFactory:
    """
    Builds the providers of each tier for one aggregation call.

    Every tier is empty by default; subclasses fill in the ones they serve.
    """

    def hazard_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return []

    def weather_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return []

    def directions_providers(
        self, http: httpx.AsyncClient, origin: Coordinate, radius_m: float
    ) -> List[ProviderClient]:
        return []

    def road_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return []

    def facility_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return []


class HttpProviderFactory(ProviderFactory):
    """
    The live feeds.

    Google-backed tiers are skipped without an API key, and disaster
    declarations without a FEMA state to scope them to.
    """

    def __init__(
        self,
        google_api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        fema_state: Optional[str] = None,
    ):
        self.google_api_key = google_api_key or settings.google_maps_api_key
        self.fema_state = fema_state or settings.fema_state
        self.timeout = timeout

    def hazard_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        providers: List[ProviderClient] = [USGSClient(http, self.timeout)]
        if self.fema_state:
            providers.append(FEMAClient(http, self.timeout, state=self.fema_state))
        else:
            logger.debug("FEMA_STATE not set; skipping disaster declarations")
        return providers

    def weather_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return [NWSAlertsClient(http, self.timeout)]

    def directions_providers(
        self, http: httpx.AsyncClient, origin: Coordinate, radius_m: float
    ) -> List[ProviderClient]:
        if not self.google_api_key:
            logger.warning("GOOGLE_MAPS_API_KEY not set; skipping directions")
            return []
        return [
            DirectionsClient(http, self.google_api_key, destination, self.timeout, label=label)
            for label, destination in find_safe_destinations(origin, radius_m)
        ]

    def road_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        return [OverpassClient(http, self.timeout)]

    def facility_providers(self, http: httpx.AsyncClient) -> List[ProviderClient]:
        if not self.google_api_key:
            logger.warning("GOOGLE_MAPS_API_KEY not set; skipping places search")
            return []
        return [
            PlacesClient(http, self.google_api_key, facility_type, self.timeout)
            for facility_type in PLACES_FACILITY_TYPES
        ]


# =============================================================================
# AGGREGATOR
# =============================================================================

class EmergencyAggregator:
    """
    Fallback orchestrator for evacuation routes and safe zones.

    Usage:
        aggregator = EmergencyAggregator()
        routes = await aggregator.find_evacuation_routes(37.7749, -122.4194)
    """

    def __init__(
        self,
        factory: Optional[ProviderFactory] = None,
        generator: Optional[SyntheticGenerator] = None,
        http_client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
        max_routes: Optional[int] = None,
    ):
        """
        Args:
            factory: Provider builder (default: live feeds)
            generator: Synthetic fallback (default: seeded from settings)
            http_client_factory: Makes the per-call HTTP client
            max_routes: Cap on provider-backed routes (default 5)
        """
        self.factory = factory or HttpProviderFactory()
        self.generator = generator or SyntheticGenerator()
        self.http_client_factory = http_client_factory or (lambda: httpx.AsyncClient(follow_redirects=True))
        self.max_routes = max_routes or settings.max_routes

    # -------------------------------------------------------------------------
    # Tier execution
    # -------------------------------------------------------------------------

    async def _call_provider(
        self, provider: ProviderClient, center: Coordinate, radius_m: float
    ) -> ProviderResult:
        try:
            features = await asyncio.wait_for(provider.fetch(center, radius_m), timeout=provider.timeout)
        except asyncio.TimeoutError:
            error = ProviderError(
                provider.name, ProviderErrorKind.TIMEOUT, f"no answer within {provider.timeout}s"
            )
        except ProviderError as e:
            error = e
        except Exception as e:
            logger.exception(f"Unexpected failure in provider {provider.name}")
            error = ProviderError(provider.name, ProviderErrorKind.UNPARSEABLE, str(e))
        else:
            return ProviderResult(provider=provider.name, features=tuple(features))

        logger.warning(error.message)
        return ProviderResult(provider=provider.name, error=error)

    async def run_tier(
        self, providers: Sequence[ProviderClient], center: Coordinate, radius_m: float
    ) -> TierOutcome:
        """
        Run one tier's providers concurrently and wait for all of them.

        Results come back in provider order regardless of which call
        finished first.
        """
        if not providers:
            return TierOutcome()

        results = await asyncio.gather(
            *(self._call_provider(p, center, radius_m) for p in providers)
        )
        outcome = TierOutcome(results=list(results))

        logger.debug(
            f"Tier [{', '.join(p.name for p in providers)}]: "
            f"{len(outcome.features)} features, {len(outcome.errors)} errors"
        )
        return outcome

    # -------------------------------------------------------------------------
    # Evacuation routes
    # -------------------------------------------------------------------------

    def _finalize_routes(self, routes: List[EvacuationRoute]) -> List[EvacuationRoute]:
        merged = merge_routes(routes)
        merged.sort(key=lambda r: r.safety_level, reverse=True)
        return merged[:self.max_routes]

    async def _hazard_routes(
        self,
        http: httpx.AsyncClient,
        origin: Coordinate,
        radius_m: float,
        hazards: TierOutcome,
        errors: List[ProviderError],
    ) -> List[EvacuationRoute]:
        routes = [
            self.generator.hazard_avoidance_route(origin, event)
            for event in hazards.of_type(SeismicEvent)
        ]

        declarations = hazards.of_type(DisasterDeclaration)
        if declarations:
            category = declarations[0].category
            logger.info(f"{len(declarations)} disaster declarations; fetching {category.value} routes")

            providers = (
                self.factory.directions_providers(http, origin, radius_m) +
                self.factory.road_providers(http)
            )
            outcome = await self.run_tier(providers, origin, radius_m)
            errors.extend(outcome.errors)

            routes += routes_from_directions(outcome.of_type(DirectionsRoute), category)
            routes += routes_from_roads(origin, outcome.of_type(RoadWay), category)

        return routes

    async def _weather_routes(
        self,
        http: httpx.AsyncClient,
        origin: Coordinate,
        radius_m: float,
        weather: TierOutcome,
        errors: List[ProviderError],
    ) -> List[EvacuationRoute]:
        alerts = weather.of_type(WeatherAlert)
        category = alerts[0].category
        logger.info(f"{len(alerts)} weather alerts ({alerts[0].event}); fetching directions")

        outcome = await self.run_tier(
            self.factory.directions_providers(http, origin, radius_m), origin, radius_m
        )
        errors.extend(outcome.errors)

        return routes_from_directions(outcome.of_type(DirectionsRoute), category)

    async def _route_cascade(
        self, http: httpx.AsyncClient, origin: Coordinate, radius_m: float
    ) -> AggregationResult:
        errors: List[ProviderError] = []

        hazards = await self.run_tier(self.factory.hazard_providers(http), origin, radius_m)
        errors.extend(hazards.errors)
        state = after_hazard_check(hazards)
        logger.info(f"Hazard check -> {state.value}")

        if state is CascadeState.HAZARD_ROUTES:
            routes = await self._hazard_routes(http, origin, radius_m, hazards, errors)
        else:
            weather = await self.run_tier(self.factory.weather_providers(http), origin, radius_m)
            errors.extend(weather.errors)
            state = after_weather_check(weather)
            logger.info(f"Weather check -> {state.value}")

            if state is CascadeState.WEATHER_ROUTES:
                routes = await self._weather_routes(http, origin, radius_m, weather, errors)
            else:
                traffic = await self.run_tier(self.factory.road_providers(http), origin, radius_m)
                errors.extend(traffic.errors)
                state = after_traffic_check(traffic)
                logger.info(f"Traffic check -> {state.value}")

                routes = []
                if state is CascadeState.TRAFFIC_ROUTES:
                    routes = routes_from_roads(origin, traffic.of_type(RoadWay))

        return AggregationResult(
            items=self._finalize_routes(routes),
            state=state.value,
            provider_errors=[e.message for e in errors],
        )

    async def aggregate_evacuation_routes(
        self,
        latitude: float,
        longitude: float,
        radius_m: Optional[float] = None,
        connected: bool = True,
    ) -> AggregationResult:
        """
        Routes plus how they were found.

        Args:
            latitude: Person's latitude
            longitude: Person's longitude
            radius_m: Search radius (default 25 km)
            connected: False skips the network entirely

        Returns:
            AggregationResult with routes as items

        Raises:
            InvalidInputError: Unusable coordinates or radius
        """
        origin = validate_coordinate(latitude, longitude)
        radius = validate_radius(settings.default_radius_m if radius_m is None else radius_m)

        if connected:
            async with self.http_client_factory() as http:
                result = await self._route_cascade(http, origin, radius)
        else:
            logger.info("Offline; using synthetic routes")
            result = AggregationResult(state=CascadeState.EMPTY.value)

        if not result.items:
            logger.warning(f"No provider routes near {origin.latitude:.4f},{origin.longitude:.4f}; "
                           f"generating synthetic routes")
            result.items = self.generator.directional_routes(origin)
            result.synthetic = True

        logger.info(f"Returning {len(result.items)} routes ({result.state})")
        return result

    async def find_evacuation_routes(
        self,
        latitude: float,
        longitude: float,
        radius_m: Optional[float] = None,
        connected: bool = True,
    ) -> List[EvacuationRoute]:
        """Non-empty list of evacuation routes for a location."""
        result = await self.aggregate_evacuation_routes(latitude, longitude, radius_m, connected)
        return result.items

    # -------------------------------------------------------------------------
    # Safe zones
    # -------------------------------------------------------------------------

    async def aggregate_safe_zones(
        self,
        latitude: float,
        longitude: float,
        radius_m: Optional[float] = None,
        connected: bool = True,
    ) -> AggregationResult:
        """
        Safe zones plus how they were found.

        One tier: a places search per facility type, run concurrently.
        Failed facility types are ignored as long as any other answers.

        Raises:
            InvalidInputError: Unusable coordinates or radius
        """
        origin = validate_coordinate(latitude, longitude)
        radius = validate_radius(settings.default_radius_m if radius_m is None else radius_m)

        result = AggregationResult(state=ZoneSearchState.EMPTY.value)
        if connected:
            async with self.http_client_factory() as http:
                outcome = await self.run_tier(self.factory.facility_providers(http), origin, radius)

            zones = safe_zones_from_places(outcome.of_type(FacilityPlace), rng=self.generator.rng)
            result.items = remove_duplicate_safe_zones(zones)
            result.provider_errors = [e.message for e in outcome.errors]
            if result.items:
                result.state = ZoneSearchState.PLACES.value
        else:
            logger.info("Offline; using synthetic safe zones")

        if not result.items:
            logger.warning(f"No safe zones found near {origin.latitude:.4f},{origin.longitude:.4f}; "
                           f"generating synthetic zones")
            result.items = self.generator.safe_zones(origin)
            result.synthetic = True

        logger.info(f"Returning {len(result.items)} safe zones ({result.state})")
        return result

    async def find_safe_zones(
        self,
        latitude: float,
        longitude: float,
        radius_m: Optional[float] = None,
        connected: bool = True,
    ) -> List[SafeZone]:
        """Non-empty list of safe zones for a location."""
        result = await self.aggregate_safe_zones(latitude, longitude, radius_m, connected)
        return result.items


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

async def get_evacuation_routes(
    latitude: float,
    longitude: float,
    radius_m: Optional[float] = None,
    connected: bool = True,
) -> List[EvacuationRoute]:
    """
    Evacuation routes from the live feeds.

    Args:
        latitude: Person's latitude
        longitude: Person's longitude
        radius_m: Search radius in meters
        connected: Whether the device has network access

    Returns:
        Non-empty list of routes, possibly synthetic
    """
    return await EmergencyAggregator().find_evacuation_routes(latitude, longitude, radius_m, connected)


async def get_safe_zones(
    latitude: float,
    longitude: float,
    radius_m: Optional[float] = None,
    connected: bool = True,
) -> List[SafeZone]:
    """Safe zones from the live feeds; synthetic when none are found."""
    return await EmergencyAggregator().find_safe_zones(latitude, longitude, radius_m, connected)
