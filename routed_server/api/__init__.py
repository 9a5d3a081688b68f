"""HTTP routes, router, server and lifecycle."""
