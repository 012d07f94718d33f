"""Utility modules for gitpusher."""

from .browser import open_url

__all__ = [
    "open_url",
]
