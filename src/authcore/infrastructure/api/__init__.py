"""HTTP API for authcore."""
