"""
SafePath - Geospatial Emergency Aggregation Engine
Evacuation routes and safe zones from live hazard feeds, with synthetic fallback.
"""

__version__ = "0.1.0"
