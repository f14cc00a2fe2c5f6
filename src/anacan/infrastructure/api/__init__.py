"""Dev server HTTP API."""
