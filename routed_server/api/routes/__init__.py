"""HTTP routes: each one answers a single exact path."""
from .base import Route
from .echo import EchoRoute
from .hello import HelloRoute

__all__ = [
    "Route",
    "EchoRoute",
    "HelloRoute",
]
