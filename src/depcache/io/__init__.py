"""
depcache IO Module

- FileSystem: Abstract file system interface used by the dependency cache
- FsspecFileSystem: fsspec-backed implementation
- DiskFileSystem: Local disk file system
- MemoryFileSystem: In-memory file system for testing
- wrap_io_error: Translate builtin IO errors into depcache exceptions

Usage:
    from depcache.io import DiskFileSystem

    fs = DiskFileSystem()
    content = fs.read_text(Path("deps.yml"))
"""

from .fs import (
    FileSystem,
    FsspecFileSystem,
    DiskFileSystem,
    MemoryFileSystem,
    wrap_io_error,
)

__all__ = [
    'FileSystem',
    'FsspecFileSystem',
    'DiskFileSystem',
    'MemoryFileSystem',
    'wrap_io_error',
]
