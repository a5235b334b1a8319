"""
depcache Archive Module

- ArchiveInspector: extracts packaged lint jars and annotation-processor
  descriptors from jar/aar archives
"""

from .inspector import ArchiveInspector, parse_service_descriptor, sibling

__all__ = [
    'ArchiveInspector',
    'parse_service_descriptor',
    'sibling',
]
