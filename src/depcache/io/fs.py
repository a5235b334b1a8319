from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, List
import functools
import logging
import os
import fsspec
from typing_extensions import override
from ..exceptions import (
    DCPathExistsError,
    DCPathNotFoundError,
    DCNotAFileError,
    DCNotADirectoryError,
)

logger = logging.getLogger(__name__)


def wrap_io_error(func):
    """Decorator to wrap builtin IO errors into depcache exceptions."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FileExistsError as e:
            raise DCPathExistsError(e) from e
        except FileNotFoundError as e:
            raise DCPathNotFoundError(e) from e
        except IsADirectoryError as e:
            raise DCNotAFileError(e) from e
        except NotADirectoryError as e:
            raise DCNotADirectoryError(e) from e

    return wrapper

# --------------------------------------------------------
#
# Abstract Base FileSystem Interface
#
# --------------------------------------------------------
"""
    Abstract Base FileSystem Interface,
    define the file system operations the dependency cache relies on.
"""

class FileSystem(ABC):
    """depcache File System Abstract Base Class"""

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read text from a file"""
        pass

    @abstractmethod
    def write_text(self, path: Path, content: str):
        """Write text to a file"""
        pass

    @abstractmethod
    def copy(self, src: Path, dst: Path):
        """Copy a file from src to dst"""
        pass

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check if a path exists"""
        pass

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory"""
        pass

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        """Check if a path is a file"""
        pass

    @abstractmethod
    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False):
        """Create a directory"""
        pass

    @abstractmethod
    def listdir(self, path: Path) -> List[Path]:
        """List directory contents"""
        pass

    @abstractmethod
    def remove(self, path: Path):
        """Remove a file"""
        pass

    @abstractmethod
    def rglob(self, path: Path, pattern: str) -> List[Path]:
        """Glob a path pattern recursively"""
        pass

    @abstractmethod
    def stat(self, path: Path) -> os.stat_result:
        """Get file status"""
        pass

    @abstractmethod
    def open(self, path: Path, mode: str = "rb", **kwargs) -> IO:
        """Open a file"""
        pass


# --------------------
#
# fsspec FileSystem
#
# --------------------

class FsspecFileSystem(FileSystem):
    """fsspec-based File System"""

    def __init__(self, protocol: str = "file"):
        self.fs = fsspec.filesystem(protocol)
        self.protocol = protocol
        self.name = f"{protocol}FS"

    def path2str(self, path: Path) -> str:
        """Convert Path to string"""
        return str(path)

    @override
    @wrap_io_error
    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        logger.debug(f"[{self.name}] Reading from: {path}")
        with self.fs.open(self.path2str(path), "r", encoding=encoding) as f:
            return f.read()

    @override
    @wrap_io_error
    def write_text(self, path: Path, content: str, encoding: str = "utf-8"):
        logger.debug(f"[{self.name}] Writing to: {path}")
        self.fs.mkdirs(self.path2str(path.parent), exist_ok=True)
        with self.fs.open(self.path2str(path), "w", encoding=encoding) as f:
            f.write(content)

    @override
    @wrap_io_error
    def copy(self, src: Path, dst: Path):
        logger.debug(f"[{self.name}] Copying path '{src}' to '{dst}'")
        self.fs.mkdirs(self.path2str(dst.parent), exist_ok=True)
        self.fs.copy(self.path2str(src), self.path2str(dst))

    @override
    def exists(self, path: Path) -> bool:
        return self.fs.exists(self.path2str(path))

    @override
    def is_dir(self, path: Path) -> bool:
        return self.fs.isdir(self.path2str(path))

    @override
    def is_file(self, path: Path) -> bool:
        return self.fs.isfile(self.path2str(path))

    @override
    @wrap_io_error
    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False):
        self.fs.mkdirs(self.path2str(path), exist_ok=exist_ok)

    @override
    @wrap_io_error
    def listdir(self, path: Path) -> List[Path]:
        return [Path(p) for p in self.fs.ls(self.path2str(path), detail=False)]

    @override
    @wrap_io_error
    def remove(self, path: Path):
        logger.debug(f"[{self.name}] Removing: {path}")
        self.fs.rm(self.path2str(path))

    @override
    @wrap_io_error
    def rglob(self, path: Path, pattern: str) -> List[Path]:
        return [Path(p) for p in self.fs.glob(self.path2str(path / f"**/{pattern}"))]

    @override
    @wrap_io_error
    def stat(self, path: Path) -> os.stat_result:
        info = self.fs.info(self.path2str(path))
        mode = 0o100644 if info.get("type") == "file" else 0o040755
        mtime = info.get("mtime", 0) or 0
        return os.stat_result((mode, 0, 0, 1, 0, 0, info.get("size", 0), mtime, mtime, mtime))

    @override
    @wrap_io_error
    def open(self, path: Path, mode: str = "rb", **kwargs) -> IO:
        logger.debug(f"[{self.name}] Opening: {path} with mode '{mode}'")
        if "w" in mode or "a" in mode:
            self.fs.mkdirs(self.path2str(path.parent), exist_ok=True)
        return self.fs.open(self.path2str(path), mode=mode, **kwargs)


# --------------------
#
# Disk FileSystem
#
# --------------------

class DiskFileSystem(FsspecFileSystem):
    """Local disk file system using fsspec"""

    def __init__(self):
        super().__init__(protocol="file")

    @override
    @wrap_io_error
    def stat(self, path: Path) -> os.stat_result:
        return Path(path).stat()

    @override
    @wrap_io_error
    def open(self, path: Path, mode: str = "rb", **kwargs) -> IO:
        if "w" in mode or "a" in mode:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        return open(str(path), mode, **kwargs)


class MemoryFileSystem(FsspecFileSystem):
    """
    in-memory filesystem using fsspec
    """
    def __init__(self):
        super().__init__(protocol="memory")
