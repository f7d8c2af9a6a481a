"""
SafePath - Aggregation Module
Fallback cascades, deduplication and synthetic data.
"""

from safepath.aggregation.cascade import (
    CascadeState,
    ProviderResult,
    TierOutcome,
    ZoneSearchState,
    after_hazard_check,
    after_weather_check,
    after_traffic_check,
)
from safepath.aggregation.deduplicator import (
    remove_duplicate_routes,
    merge_routes,
    remove_duplicate_safe_zones,
)
from safepath.aggregation.synthetic import SyntheticGenerator
from safepath.aggregation.orchestrator import (
    EmergencyAggregator,
    ProviderFactory,
    HttpProviderFactory,
    get_evacuation_routes,
    get_safe_zones,
)

__all__ = [
    # Cascade
    "CascadeState",
    "ProviderResult",
    "TierOutcome",
    "ZoneSearchState",
    "after_hazard_check",
    "after_weather_check",
    "after_traffic_check",
    # Deduplication
    "remove_duplicate_routes",
    "merge_routes",
    "remove_duplicate_safe_zones",
    # Synthetic
    "SyntheticGenerator",
    # Orchestrator
    "EmergencyAggregator",
    "ProviderFactory",
    "HttpProviderFactory",
    "get_evacuation_routes",
    "get_safe_zones",
]
