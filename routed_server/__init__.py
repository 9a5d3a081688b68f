"""HTTP server with exact-path routes, built by an explicit composition root."""

__version__ = "0.1.0"
