"""
Command-line interface for promptlab.
"""

from .app import app

__all__ = ["app"]
