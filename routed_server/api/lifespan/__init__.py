"""
Lifecycle management: start/stop hooks and the process supervisor that runs them.
"""

from .base import Hook, Lifecycle
from .manager import App

__all__ = [
    "App",
    "Hook",
    "Lifecycle",
]
