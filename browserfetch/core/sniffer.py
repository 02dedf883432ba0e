"""
Archive format detection by content.

Some download endpoints serve a payload whose compression does not match the
extension implied by the URL. This module classifies a file by its leading
magic bytes, falling back to the system ``file`` utility, and renames the
file so that extension-driven tools pick the right decompressor.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from browserfetch.core.process import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

HEADER_SIZE = 20


class ArchiveFormat(Enum):
    """Container formats the installer can extract."""

    ZIP = ".zip"
    TAR_BZ2 = ".tar.bz2"
    TAR_GZ = ".tar.gz"
    TAR_XZ = ".tar.xz"
    UNKNOWN = ""

    @property
    def suffix(self) -> str:
        return self.value


# Checked in order; the first match wins
MAGIC_NUMBERS = [
    (b"\xfd\x37\x7a\x58\x5a\x00", ArchiveFormat.TAR_XZ),
    (b"\x1f\x8b", ArchiveFormat.TAR_GZ),
    (b"BZ", ArchiveFormat.TAR_BZ2),
    (b"PK", ArchiveFormat.ZIP),
]

# Substrings looked for in `file` output, in order
FILE_COMMAND_MARKERS = [
    ("gzip", ArchiveFormat.TAR_GZ),
    ("bzip2", ArchiveFormat.TAR_BZ2),
    ("Zip", ArchiveFormat.ZIP),
]


def classify_header(header: bytes) -> ArchiveFormat:
    """
    Classify a file from its leading bytes.

    Example:
        >>> classify_header(b"\\x1f\\x8b\\x08\\x00")
        <ArchiveFormat.TAR_GZ: '.tar.gz'>
    """
    for magic, archive_format in MAGIC_NUMBERS:
        if header.startswith(magic):
            return archive_format
    return ArchiveFormat.UNKNOWN


def classify_file_output(output: str) -> ArchiveFormat:
    """Classify from the textual output of the ``file`` utility."""
    for marker, archive_format in FILE_COMMAND_MARKERS:
        if marker in output:
            return archive_format
    return ArchiveFormat.UNKNOWN


def classify(
    file_path: Union[str, Path],
    runner: Optional[CommandRunner] = None,
    logger: logging.Logger = logger,
) -> ArchiveFormat:
    """
    Determine the real container format of a file.

    Magic bytes are checked first. If none match, the ``file`` utility is
    consulted. A missing or failing ``file`` command is not an error: the
    result is simply ``UNKNOWN`` and the caller keeps the original name.

    Args:
        file_path: File to inspect
        runner: Command runner for the ``file`` fallback
        logger: Logger for detection details

    Returns:
        The detected ArchiveFormat
    """
    file_path = Path(file_path)
    with open(file_path, "rb") as f:
        header = f.read(HEADER_SIZE)

    logger.debug(f"File header bytes: {header[:10].hex(' ')}")

    archive_format = classify_header(header)
    if archive_format is not ArchiveFormat.UNKNOWN:
        logger.debug(f"Detected {archive_format.name} format from magic bytes")
        return archive_format

    runner = runner or SubprocessRunner()
    try:
        result = runner.run(["file", str(file_path)])
    except OSError as e:
        logger.debug(f"File command failed: {e}")
        return ArchiveFormat.UNKNOWN

    if not result.ok:
        logger.debug(f"File command exited with {result.returncode}: {result.stderr}")
        return ArchiveFormat.UNKNOWN

    logger.debug(f"File command output: {result.stdout.strip()}")
    return classify_file_output(result.stdout)


def format_from_name(file_path: Union[str, Path]) -> ArchiveFormat:
    """Return the format implied by a file name's extension."""
    name = Path(file_path).name.lower()
    for archive_format in ArchiveFormat:
        if archive_format.suffix and name.endswith(archive_format.suffix):
            return archive_format
    return ArchiveFormat.UNKNOWN


def normalize_archive_name(
    archive_path: Union[str, Path],
    runner: Optional[CommandRunner] = None,
    logger: logging.Logger = logger,
) -> Path:
    """
    Rename an archive so its extension matches its content.

    Only names carrying a known archive extension are inspected. When the
    sniffed format is unknown the file keeps its name and extraction is
    attempted under the original assumption.

    Args:
        archive_path: Downloaded archive
        runner: Command runner for the ``file`` fallback
        logger: Logger for the rename notice

    Returns:
        Path of the (possibly renamed) archive
    """
    archive_path = Path(archive_path)
    implied = format_from_name(archive_path)
    if implied is ArchiveFormat.UNKNOWN:
        return archive_path

    detected = classify(archive_path, runner, logger)
    if detected is ArchiveFormat.UNKNOWN:
        logger.warning(
            f"Could not detect format of {archive_path.name}, keeping original name"
        )
        return archive_path
    if detected is implied:
        return archive_path

    stem = archive_path.name[: -len(implied.suffix)]
    new_path = archive_path.with_name(stem + detected.suffix)
    logger.info(
        f"{archive_path.name} is actually {detected.suffix}, renaming to {new_path.name}"
    )
    archive_path.rename(new_path)
    return new_path
