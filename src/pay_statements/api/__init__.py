"""HTTP API for pay statements."""
