"""
SafePath - REST API

FastAPI application exposing evacuation routes and safe zones for a
location. Responses are never empty for a valid location: when no live
feed has data, synthetic results are returned and flagged.

Run with: uvicorn safepath.api.main:app --reload
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from safepath import __version__
from safepath.aggregation.orchestrator import EmergencyAggregator
from safepath.core.config import settings
from safepath.core.exceptions import InvalidInputError
from safepath.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="SafePath",
    description="Emergency aggregation API: evacuation routes and safe zones from live hazard feeds",
    version=__version__,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class CoordinateResponse(BaseModel):
    latitude: float
    longitude: float


class RouteResponse(BaseModel):
    """Single evacuation route."""
    id: str
    name: str
    description: str
    waypoints: List[CoordinateResponse]
    category: str
    estimated_travel_time_seconds: float
    length_km: float
    last_updated: str
    safety_level: int = Field(ge=1, le=5, description="5 is safest")
    authority: str
    source: str


class RoutesListResponse(BaseModel):
    """Evacuation routes for a location."""
    count: int
    synthetic: bool = Field(description="True when no live feed had data")
    state: str
    provider_errors: List[str]
    routes: List[RouteResponse]


class SafeZoneResponse(BaseModel):
    """Single safe zone."""
    id: str
    name: str
    description: str
    center: CoordinateResponse
    radius_m: float
    capacity: int
    current_occupancy: int
    occupancy_percent: float
    available_capacity: int
    resources: List[str]
    last_updated: str
    safety_level: int = Field(ge=1, le=5)
    address: Optional[str] = None
    contact: Optional[str] = None


class SafeZonesListResponse(BaseModel):
    """Safe zones for a location."""
    count: int
    synthetic: bool
    state: str
    provider_errors: List[str]
    safe_zones: List[SafeZoneResponse]


class HealthResponse(BaseModel):
    """API health check."""
    status: str
    version: str
    environment: str
    timestamp: str
    modules: Dict[str, bool]


# ============================================================================
# Dependencies and error handling
# ============================================================================

def get_aggregator() -> EmergencyAggregator:
    """Aggregator backed by the live feeds."""
    return EmergencyAggregator()


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.info(f"Rejected {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=422,
        content={"error": "invalid_input", "message": exc.message, "details": exc.details},
    )


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status and module availability."""
    modules = {
        "usgs": True,
        "nws": True,
        "fema": True,
        "overpass": True,
        "google_maps": settings.google_configured,
        "synthetic": True,
    }

    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
        modules=modules,
    )


# ============================================================================
# Evacuation Routes
# ============================================================================

@app.get("/api/v1/evacuation/routes", response_model=RoutesListResponse, tags=["Evacuation"])
async def get_evacuation_routes(
    latitude: float = Query(..., description="Latitude in decimal degrees"),
    longitude: float = Query(..., description="Longitude in decimal degrees"),
    radius: Optional[float] = Query(default=None, description="Search radius in meters (default 25000)"),
    connected: bool = Query(default=True, description="False returns synthetic routes without network calls"),
    aggregator: EmergencyAggregator = Depends(get_aggregator),
):
    """Evacuation routes away from active hazards, best first."""
    result = await aggregator.aggregate_evacuation_routes(
        latitude, longitude, radius_m=radius, connected=connected
    )

    return RoutesListResponse(
        count=len(result.items),
        synthetic=result.synthetic,
        state=result.state,
        provider_errors=result.provider_errors,
        routes=[RouteResponse(**route.to_dict()) for route in result.items],
    )


# ============================================================================
# Safe Zones
# ============================================================================

@app.get("/api/v1/safe-zones", response_model=SafeZonesListResponse, tags=["Safe Zones"])
async def get_safe_zones(
    latitude: float = Query(..., description="Latitude in decimal degrees"),
    longitude: float = Query(..., description="Longitude in decimal degrees"),
    radius: Optional[float] = Query(default=None, description="Search radius in meters (default 25000)"),
    connected: bool = Query(default=True),
    aggregator: EmergencyAggregator = Depends(get_aggregator),
):
    """Hospitals, fire stations, police stations and schools usable as shelters."""
    result = await aggregator.aggregate_safe_zones(
        latitude, longitude, radius_m=radius, connected=connected
    )

    return SafeZonesListResponse(
        count=len(result.items),
        synthetic=result.synthetic,
        state=result.state,
        provider_errors=result.provider_errors,
        safe_zones=[SafeZoneResponse(**zone.to_dict()) for zone in result.items],
    )


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
