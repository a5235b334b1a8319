import struct
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from depcache.resolver import ResolvedArtifact

PROCESSOR_ENTRY = "META-INF/services/javax.annotation.processing.Processor"
LINT_PAYLOAD = b"PK-lint-rules"
# Central directory values zipfile refuses to read
ENCRYPTED_FLAG = 0x1
DEFLATE64 = 9


def write_archive(path: Path, entries: Optional[Dict[str, bytes]] = None) -> Path:
    """Write a zip archive holding the given entries"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n")
        for name, content in (entries or {}).items():
            zf.writestr(name, content)
    return path


def patch_central_entry(path: Path, entry: str, flag_bits: Optional[int] = None,
                        compress_type: Optional[int] = None) -> Path:
    """Rewrite the central directory record of one archive entry in place"""
    data = bytearray(path.read_bytes())
    offset = data.find(b"PK\x01\x02")
    while offset != -1:
        name_len = struct.unpack_from("<H", data, offset + 28)[0]
        if bytes(data[offset + 46:offset + 46 + name_len]).decode() == entry:
            if flag_bits is not None:
                struct.pack_into("<H", data, offset + 8, flag_bits)
            if compress_type is not None:
                struct.pack_into("<H", data, offset + 10, compress_type)
            path.write_bytes(bytes(data))
            return path
        offset = data.find(b"PK\x01\x02", offset + 4)
    raise KeyError(entry)


@pytest.fixture
def make_archive(tmp_path: Path):
    """A pytest fixture to create jar/aar archives under a temporary repository."""
    def _make(relative: str, entries: Optional[Dict[str, bytes]] = None) -> Path:
        return write_archive(tmp_path / "repo" / relative, entries)
    return _make


@pytest.fixture
def make_artifact():
    """A pytest fixture to create resolver artifacts from coordinates."""
    def _make(coordinate: str, file: Path, display_id: Optional[str] = None) -> ResolvedArtifact:
        return ResolvedArtifact.from_coordinate(coordinate, file, display_id=display_id)
    return _make


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def processor_jar(make_archive):
    """A jar declaring two annotation processors, with comments and blank lines."""
    descriptor = (
        b"# processors shipped by this jar\n"
        b"com.example.FooProcessor\n"
        b"\n"
        b"com.example.BarProcessor  # generated\n"
    )
    return make_archive("com/example/proc/1.0/proc-1.0.jar", {PROCESSOR_ENTRY: descriptor})


@pytest.fixture
def lint_aar(make_archive):
    """An aar bundling lint rules."""
    return make_archive("com/example/foo/1.2.0/foo-1.2.0.aar", {"lint.jar": LINT_PAYLOAD, "classes.jar": b"classes"})


def snapshot(directory: Path) -> Dict[str, bytes]:
    """File name -> content of every file directly in a directory"""
    return {p.name: p.read_bytes() for p in sorted(directory.iterdir()) if p.is_file()}


@pytest.fixture
def take_snapshot():
    return snapshot
