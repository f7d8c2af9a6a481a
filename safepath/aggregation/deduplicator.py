"""
SafePath - Cross-Provider Deduplication
Collapses routes and safe zones that different feeds report for the same place.

All functions are pure, keep input order for the survivors and are
idempotent: running one twice gives the same list as running it once.
"""

import logging
from typing import Iterable, List, Optional, Set

from safepath.core.config import settings
from safepath.core.geo_utils import bearing_description, haversine_distance
from safepath.core.models import EvacuationRoute, SafeZone

logger = logging.getLogger(__name__)


def _is_duplicate_route(a: EvacuationRoute, b: EvacuationRoute, threshold_m: float) -> bool:
    """Same route iff both the starts and the ends are within the threshold."""
    return (
        haversine_distance(a.start, b.start) < threshold_m and
        haversine_distance(a.end, b.end) < threshold_m
    )


def remove_duplicate_routes(
    routes: Iterable[EvacuationRoute],
    threshold_m: Optional[float] = None,
) -> List[EvacuationRoute]:
    """
    Drop routes whose start and end are both near an already-kept route.

    Args:
        routes: Candidate routes, in priority order
        threshold_m: Proximity threshold (default 300 m)

    Returns:
        Routes with duplicates removed; the first of each group wins
    """
    if threshold_m is None:
        threshold_m = settings.route_dedup_threshold_m

    kept: List[EvacuationRoute] = []
    for route in routes:
        if any(_is_duplicate_route(route, existing, threshold_m) for existing in kept):
            continue
        kept.append(route)

    return kept


def merge_routes(
    routes: Iterable[EvacuationRoute],
    threshold_m: Optional[float] = None,
) -> List[EvacuationRoute]:
    """
    Merge routes from several feeds, government sources first.

    Official routes (USGS, FEMA, NWS) each claim the compass direction they
    head in. A non-official route survives only if its direction is still
    unclaimed, and then claims it.

    Args:
        routes: Routes from every provider of a tier, in provider order
        threshold_m: Proximity threshold for the first dedup pass

    Returns:
        Merged routes, official first
    """
    # sorted() is stable, so provider order holds within each group
    ordered = sorted(routes, key=lambda r: 0 if r.is_official else 1)
    unique = remove_duplicate_routes(ordered, threshold_m)

    claimed: Set[str] = set()
    merged = []
    for route in unique:
        direction = bearing_description(route.start, route.end)
        if route.is_official or direction not in claimed:
            claimed.add(direction)
            merged.append(route)

    if len(merged) < len(ordered):
        logger.debug(f"Merged {len(ordered)} routes down to {len(merged)}")

    return merged


def remove_duplicate_safe_zones(
    zones: Iterable[SafeZone],
    threshold_m: Optional[float] = None,
) -> List[SafeZone]:
    """
    Drop safe zones whose center is near an already-kept zone.

    Args:
        zones: Candidate zones, in priority order
        threshold_m: Center distance threshold (default 100 m)

    Returns:
        Zones with duplicates removed; the first seen wins
    """
    if threshold_m is None:
        threshold_m = settings.zone_dedup_threshold_m

    kept: List[SafeZone] = []
    for zone in zones:
        if any(haversine_distance(zone.center, existing.center) < threshold_m for existing in kept):
            continue
        kept.append(zone)

    return kept
