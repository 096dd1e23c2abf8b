"""Data loaders for the target service."""

from .base import BaseLoader
from .hygraph_loader import HygraphLoader

__all__ = [
    "BaseLoader",
    "HygraphLoader",
]
