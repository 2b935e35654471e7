"""Command line interface for the gateway"""

from .main import main

__all__ = ["main"]
