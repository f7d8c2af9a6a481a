"""
SafePath - Data Ingestion Module
Async clients for the hazard, facility and road feeds.
"""

from safepath.ingestion.base import ProviderClient
from safepath.ingestion.usgs_client import USGSClient
from safepath.ingestion.nws_client import NWSAlertsClient
from safepath.ingestion.fema_client import FEMAClient
from safepath.ingestion.google_client import (
    DirectionsClient,
    PlacesClient,
)
from safepath.ingestion.osm_client import OverpassClient

__all__ = [
    "ProviderClient",
    # Hazards
    "USGSClient",
    "NWSAlertsClient",
    "FEMAClient",
    # Google
    "PlacesClient",
    "DirectionsClient",
    # OSM
    "OverpassClient",
]
