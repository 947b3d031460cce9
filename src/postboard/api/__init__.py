"""HTTP API for the Postboard service."""
