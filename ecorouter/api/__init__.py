"""HTTP API for the eco-router."""
