"""SafePath - HTTP API."""
