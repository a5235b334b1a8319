"""
depcache Cache Module

The cache system consists of three main components:
- DependencyCache: Copies resolved artifacts into the cache directory, extracts
  what they bundle and evicts what the current resolution no longer needs
- ProcessorTable: Thread-safe memo of declared annotation processors
- CacheOptions / CacheResult / CacheWarning: Build options and build outcome
"""

from .models import CacheOptions, CacheResult, CacheWarning
from .processors import ProcessorTable
from .engine import DependencyCache

__all__ = [
    'CacheOptions',
    'CacheResult',
    'CacheWarning',
    'ProcessorTable',
    'DependencyCache',
]
