import contextlib
import logging
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional

from .. import constants
from ..io.fs import FileSystem
from ..exceptions import DCIOError, ExtractionError

logger = logging.getLogger(__name__)

# Failures that mean the archive or one of its entries is unreadable.
# zipfile raises NotImplementedError for unsupported compression methods
# and RuntimeError for encrypted entries.
_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
    DCIOError,
)


def sibling(archive: Path, suffix: str) -> Path:
    """Path next to an archive, named after its base name plus suffix"""
    return archive.with_name(f"{archive.stem}{suffix}")


def parse_service_descriptor(text: str) -> List[str]:
    """
    Parse a service-provider descriptor.

    One fully-qualified class name per line; blank lines and anything
    after a '#' are ignored. Order is preserved.
    """
    names = []
    for line in text.splitlines():
        name = line.split(constants.SERVICE_COMMENT_PREFIX, 1)[0].strip()
        if name:
            names.append(name)
    return names


class ArchiveInspector:
    """
    Reads single entries out of jar/aar archives without unpacking them.

    Every extraction result is written next to the archive, and an existing
    result short-circuits the next call so the archive is opened at most once.
    """

    def __init__(self, fs: FileSystem):
        self.fs = fs

    @contextlib.contextmanager
    def open_archive(self, archive: Path) -> Iterator[zipfile.ZipFile]:
        """Open an archive as a random-access zip container"""
        logger.debug(f"Opening archive {archive}")
        try:
            handle = self.fs.open(archive, "rb")
        except _READ_ERRORS as e:
            raise ExtractionError(archive, e) from e
        try:
            try:
                zf = zipfile.ZipFile(handle)
            except _READ_ERRORS as e:
                raise ExtractionError(archive, e) from e
            with zf:
                yield zf
        finally:
            handle.close()

    def extract_packaged_lint_jar(self, archive: Path) -> Optional[Path]:
        """
        Extract the lint rules bundled in an archive.

        Args:
            archive: Path of an .aar archive

        Returns:
            Optional[Path]: Path of the extracted lint jar, None if the
            archive bundles no lint rules
        """
        lint_jar = sibling(archive, constants.LINT_JAR_SUFFIX)
        if self.fs.exists(lint_jar):
            logger.debug(f"Lint jar already extracted: {lint_jar}")
            return lint_jar

        with self.open_archive(archive) as zf:
            try:
                entry = zf.getinfo(constants.PACKAGED_LINT_JAR_ENTRY)
            except KeyError:
                logger.debug(f"No packaged lint jar in {archive}")
                return None
            try:
                with zf.open(entry) as src, self.fs.open(lint_jar, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except _READ_ERRORS as e:
                self._discard(lint_jar)
                raise ExtractionError(
                    archive, f"could not read entry '{constants.PACKAGED_LINT_JAR_ENTRY}': {e}"
                ) from e

        logger.debug(f"Extracted lint jar {lint_jar}")
        return lint_jar

    def extract_annotation_processor_descriptor(self, jar: Path) -> Path:
        """
        Write the annotation processors a jar declares to a sidecar file.

        An empty sidecar records that the jar declares none, and is returned
        as-is on later calls like any other sidecar.

        Args:
            jar: Path of a .jar archive

        Returns:
            Path: The sidecar file, one class name per line
        """
        sidecar = sibling(jar, constants.PROCESSORS_SUFFIX)
        if self.fs.exists(sidecar):
            logger.debug(f"Processor sidecar already present: {sidecar}")
            return sidecar

        with self.open_archive(jar) as zf:
            try:
                raw = zf.read(constants.PROCESSOR_SERVICE_ENTRY)
            except KeyError:
                raw = None
            except _READ_ERRORS as e:
                raise ExtractionError(
                    jar, f"could not read entry '{constants.PROCESSOR_SERVICE_ENTRY}': {e}"
                ) from e

        if raw is None:
            processors = []
        else:
            try:
                processors = parse_service_descriptor(raw.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise ExtractionError(jar, f"processor descriptor is not valid UTF-8: {e}") from e

        self.fs.write_text(sidecar, "\n".join(processors))
        logger.debug(f"Wrote {len(processors)} processor(s) for {jar.name} to {sidecar}")
        return sidecar

    def read_annotation_processors(self, jar: Path) -> FrozenSet[str]:
        """Processor classes a jar declares, read through its sidecar"""
        sidecar = self.extract_annotation_processor_descriptor(jar)
        return frozenset(parse_service_descriptor(self.fs.read_text(sidecar)))

    def _discard(self, path: Path):
        try:
            if self.fs.exists(path):
                self.fs.remove(path)
        except (OSError, DCIOError) as e:
            logger.warning(f"Failed to remove partially extracted file {path}: {e}")
